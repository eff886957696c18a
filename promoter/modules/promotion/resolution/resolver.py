"""Combine build metadata with download candidates into a module set."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from promoter.modules.promotion.domain import (
    ArtifactDescriptor,
    ArtifactTypes,
    BuildMetadata,
    BuildModule,
    Coordinate,
    Module,
    ModuleSet,
)
from promoter.modules.promotion.errors import FormatError
from .matcher import CandidateMatcher, DownloadCandidate

log = logging.getLogger(__name__)

ArtifactFilter = Callable[[str], bool]


def exclude_suffixes(suffixes: Iterable[str]) -> ArtifactFilter:
    """Build a filter that keeps artifact names not ending in any of ``suffixes``."""
    excluded = tuple(suffixes)

    def _keep(name: str) -> bool:
        return not name.endswith(excluded) if excluded else True

    return _keep


class BuildResolver:
    """Turns a remote build description into validated modules and artifacts."""

    def __init__(self, types: Optional[ArtifactTypes] = None) -> None:
        self.types = types or ArtifactTypes.well_known()
        self.matcher = CandidateMatcher(self.types)

    def resolve(
        self,
        build: BuildMetadata,
        download_uris: Sequence[str],
        artifact_filter: ArtifactFilter = lambda name: True,
    ) -> ModuleSet:
        candidates = [DownloadCandidate(uri) for uri in download_uris]
        modules: List[Module] = []
        for item in build.modules:
            try:
                modules.append(self._to_module(item, candidates, artifact_filter))
            except FormatError as exc:
                raise FormatError(f"Malformed module id in build {build.name} #{build.number}: {exc}") from exc
        log.info(
            "Resolved build %s #%s: %d modules, %d artifacts from %d candidates",
            build.name or "-",
            build.number or "-",
            len(modules),
            sum(len(module.artifacts) for module in modules),
            len(candidates),
        )
        return ModuleSet(modules)

    def _to_module(
        self,
        build_module: BuildModule,
        candidates: Sequence[DownloadCandidate],
        artifact_filter: ArtifactFilter,
    ) -> Module:
        coordinate = Coordinate.parse(build_module.id)
        artifacts: List[ArtifactDescriptor] = []
        for artifact in build_module.artifacts:
            if not artifact_filter(artifact.name):
                log.debug("Skipping artifact %s of %s", artifact.name, coordinate)
                continue
            artifact_type = self.types.of(artifact.type)
            candidate = self.matcher.resolve(coordinate, artifact_type, candidates)
            artifacts.append(
                ArtifactDescriptor(
                    name=artifact.name,
                    sha1=artifact.sha1,
                    md5=artifact.md5,
                    download_uri=candidate.uri,
                    type=artifact_type,
                )
            )
        return Module(id=coordinate, artifacts=tuple(artifacts))
