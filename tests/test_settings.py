import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from promoter.logging_config import configure_logging
from promoter.settings import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.working_directory == Path("work")
    assert settings.nexus_address == "https://oss.sonatype.org/"
    assert settings.artifact_exclude_suffixes == [".zip"]
    assert settings.close_staging_repository is True
    assert settings.max_workers == 8
    assert not settings.signing_enabled


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PROMOTER_NEXUS_ADDRESS", "https://nexus.example.com/")
    monkeypatch.setenv("PROMOTER_PGP_KEY_ID", "ABCDEF01")
    monkeypatch.setenv("PROMOTER_ARTIFACT_EXCLUDE_SUFFIXES", '[".zip", ".tar.gz"]')
    monkeypatch.setenv("PROMOTER_CLOSE_STAGING_REPOSITORY", "false")

    settings = Settings(_env_file=None)

    assert settings.nexus_address == "https://nexus.example.com/"
    assert settings.signing_enabled
    assert settings.artifact_exclude_suffixes == [".zip", ".tar.gz"]
    assert settings.close_staging_repository is False


def test_worker_bound_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_workers=0)


def test_configure_logging_sets_root_level():
    configure_logging("debug")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING
    configure_logging("INFO")
