"""Dataclasses describing a promotable build."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from promoter.modules.promotion.errors import EmptyModuleError, PromotionError
from .artifact_type import ArtifactType
from .coordinate import Coordinate

DISTRIBUTION_SUFFIXES: Tuple[str, ...] = ("", ".asc", ".md5", ".sha1")
CHECKSUM_SUFFIXES: Tuple[str, ...] = (".md5", ".sha1")


@dataclass(frozen=True)
class ArtifactDescriptor:
    """A deployable file of a module and the digests the repository reported for it."""

    name: str
    sha1: str
    md5: str
    download_uri: str
    type: ArtifactType

    @property
    def distribution_file_names(self) -> List[str]:
        """Binary, signature and checksum files published for this artifact."""
        return [self.name + suffix for suffix in DISTRIBUTION_SUFFIXES]


@dataclass(frozen=True)
class Module:
    id: Coordinate
    artifacts: Tuple[ArtifactDescriptor, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "artifacts", tuple(self.artifacts))
        if not self.artifacts:
            raise EmptyModuleError(f"Empty module {self.id}")


@dataclass(frozen=True)
class ModuleSet:
    modules: Tuple[Module, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "modules", tuple(self.modules))

    def __iter__(self) -> Iterator[Module]:
        return iter(self.modules)

    def __len__(self) -> int:
        return len(self.modules)

    def __getitem__(self, index: int) -> Module:
        return self.modules[index]

    @property
    def artifact_count(self) -> int:
        return sum(len(module.artifacts) for module in self.modules)


@dataclass(frozen=True)
class PromotionContext:
    """Identity of the build being promoted."""

    build_name: str
    build_number: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "build_number", str(self.build_number))

    def __str__(self) -> str:
        return f"{self.build_name} #{self.build_number}"


@dataclass(frozen=True)
class StagingProfile:
    profile_id: str


@dataclass(frozen=True)
class StagingRepository:
    repository_id: str
    profile: StagingProfile
    description: str = ""


@dataclass
class ArtifactResult:
    """Outcome of one pipeline step for a single artifact."""

    artifact: ArtifactDescriptor
    ok: bool
    message: str = "ok"
    error: Optional[PromotionError] = None

    @classmethod
    def success(cls, artifact: ArtifactDescriptor, message: str = "ok") -> "ArtifactResult":
        return cls(artifact=artifact, ok=True, message=message)

    @classmethod
    def failure(cls, artifact: ArtifactDescriptor, error: PromotionError) -> "ArtifactResult":
        return cls(artifact=artifact, ok=False, message=str(error), error=error)


def raise_for_failures(results: Sequence[ArtifactResult]) -> None:
    """Raise the error of the first failed result, if any.

    Results that failed with an error take precedence over results that were
    merely skipped after it.
    """
    failed = [result for result in results if not result.ok]
    if not failed:
        return
    for result in failed:
        if result.error is not None:
            raise result.error
    raise PromotionError(f"{failed[0].artifact.name}: {failed[0].message}")


@dataclass
class PromotionResult:
    context: PromotionContext
    module_set: ModuleSet
    repository: Optional[StagingRepository] = None
    closed: bool = False
    signed: bool = False
    downloaded: List[ArtifactResult] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "buildName": self.context.build_name,
            "buildNumber": self.context.build_number,
            "stagingRepositoryId": self.repository.repository_id if self.repository else None,
            "closed": self.closed,
            "signed": self.signed,
            "modules": [str(module.id) for module in self.module_set],
            "artifactCount": self.module_set.artifact_count,
        }
