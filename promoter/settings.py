"""Runtime configuration for the artifact promoter."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values mapped from ``PROMOTER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PROMOTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field("Artifact Promoter", description="Title of the HTTP API")
    version: str = Field("0.1.0")
    log_level: str = Field("INFO")

    # Local workspace
    working_directory: Path = Field(Path("work"), description="Root of the download workspace")
    clean_workspace: bool = Field(True, description="Delete a previous workspace of the same build first")

    # Artifactory (source of the build)
    artifactory_address: str = Field("http://localhost:8081/artifactory")
    artifactory_username: Optional[str] = Field(None)
    artifactory_password: Optional[str] = Field(None)
    artifact_exclude_suffixes: List[str] = Field(default_factory=lambda: [".zip"])

    # Nexus 2 staging (target of the promotion)
    nexus_address: str = Field("https://oss.sonatype.org/")
    nexus_username: Optional[str] = Field(None)
    nexus_password: Optional[str] = Field(None)
    close_staging_repository: bool = Field(True)

    # PGP signing, enabled when a key id is configured
    pgp_key_id: Optional[str] = Field(None)
    pgp_passphrase: Optional[str] = Field(None)
    pgp_keyring: Optional[Path] = Field(None, description="Armored key file imported before signing")
    pgp_gnupghome: Optional[Path] = Field(None)

    # Transport and concurrency
    max_workers: int = Field(8, ge=1, description="Upper bound of concurrent file transfers")
    http_timeout: float = Field(30.0, gt=0)

    @property
    def signing_enabled(self) -> bool:
        return bool(self.pgp_key_id)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance for dependency injection."""
    return Settings()
