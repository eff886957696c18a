"""Match reported artifacts to raw download locations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from promoter.modules.promotion.domain import ArtifactType, ArtifactTypes, Coordinate
from promoter.modules.promotion.errors import ResolutionError


@dataclass(frozen=True)
class DownloadCandidate:
    """A download location as returned by the artifact repository search."""

    uri: str

    def matches(self, coordinate: Coordinate, artifact_type: ArtifactType, types: ArtifactTypes) -> bool:
        if coordinate.repository_path not in self.uri:
            return False
        # A plain jar must not be satisfied by a -sources/-javadoc/-original jar.
        if artifact_type.is_plain_jar and any(
            classifier.matches(self.uri) for classifier in types.known_classifiers()
        ):
            return False
        return artifact_type.matches(self.uri)


class CandidateMatcher:
    """Select the first candidate in pool order that satisfies a coordinate and type."""

    def __init__(self, types: ArtifactTypes) -> None:
        self.types = types

    def resolve(
        self,
        coordinate: Coordinate,
        artifact_type: ArtifactType,
        candidates: Sequence[DownloadCandidate],
    ) -> DownloadCandidate:
        for candidate in candidates:
            if candidate.matches(coordinate, artifact_type, self.types):
                return candidate
        raise ResolutionError(f"Cannot find download URI for {coordinate}, type {artifact_type}")
