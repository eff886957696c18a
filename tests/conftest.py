import hashlib
import json
from pathlib import Path

import pytest

from promoter.modules.promotion.domain import (
    ArtifactDescriptor,
    ArtifactType,
    BuildMetadata,
    Coordinate,
    Module,
    ModuleSet,
    PromotionContext,
)
from promoter.settings import Settings

FIXTURES = Path(__file__).parent / "fixtures"


def build_settings(tmp_path, **overrides) -> Settings:
    defaults = {
        "working_directory": tmp_path / "work",
        "artifactory_address": "http://repo.example.com/artifactory",
        "artifactory_username": "reader",
        "artifactory_password": "secret",
        "nexus_address": "https://nexus.example.com/",
        "nexus_username": "deployer",
        "nexus_password": "secret",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


def descriptor(name: str, content: bytes, type_name: str = "jar", uri: str = "") -> ArtifactDescriptor:
    return ArtifactDescriptor(
        name=name,
        sha1=hashlib.sha1(content).hexdigest(),
        md5=hashlib.md5(content).hexdigest(),
        download_uri=uri or f"http://repo.example.com/artifactory/libs/{name}",
        type=ArtifactType.of(type_name),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return build_settings(tmp_path)


@pytest.fixture
def build_metadata() -> BuildMetadata:
    return BuildMetadata.from_dict(json.loads((FIXTURES / "build_info.json").read_text()))


@pytest.fixture
def download_uris():
    return json.loads((FIXTURES / "download_uris.json").read_text())


@pytest.fixture
def context() -> PromotionContext:
    return PromotionContext("demo-build", "42")


@pytest.fixture
def jar_bytes() -> bytes:
    return b"PK\x03\x04 demo jar content"


@pytest.fixture
def module_set(jar_bytes) -> ModuleSet:
    coordinate = Coordinate.parse("com.example:demo:1.0.0")
    pom_bytes = b"<project/>"
    return ModuleSet(
        [
            Module(
                id=coordinate,
                artifacts=(
                    descriptor("demo-1.0.0.jar", jar_bytes),
                    descriptor("demo-1.0.0.pom", pom_bytes, "pom"),
                ),
            )
        ]
    )


def write_artifact(directory: Path, artifact: ArtifactDescriptor, content: bytes, *, signature: bool = True) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / artifact.name).write_bytes(content)
    (directory / f"{artifact.name}.sha1").write_text(artifact.sha1)
    (directory / f"{artifact.name}.md5").write_text(artifact.md5)
    if signature:
        (directory / f"{artifact.name}.asc").write_text("-----BEGIN PGP SIGNATURE-----\n")
