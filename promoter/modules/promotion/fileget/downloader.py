"""Concurrent download of a module set into the workspace."""

from __future__ import annotations

import logging
from collections import defaultdict
from concurrent.futures import Executor, Future, as_completed
from pathlib import Path
from typing import Dict, List, Tuple

from promoter.modules.promotion.domain import (
    ArtifactDescriptor,
    ArtifactResult,
    ModuleSet,
    PromotionContext,
)
from promoter.modules.promotion.domain.models import CHECKSUM_SUFFIXES
from promoter.modules.promotion.errors import PromotionError
from promoter.modules.promotion.workspace import context_directory, module_directory
from .artifactory_client import ArtifactoryClient

DOWNLOAD_SUFFIXES: Tuple[str, ...] = ("",) + CHECKSUM_SUFFIXES


class BuildDownloader:
    """Fetch each artifact together with its ``.md5`` and ``.sha1`` side-cars.

    Every file is a separate task on the shared executor. An artifact counts
    as downloaded only when all three of its files arrived.
    """

    def __init__(self, client: ArtifactoryClient, working_directory: Path, *, fail_fast: bool = True) -> None:
        self.client = client
        self.working_directory = Path(working_directory)
        self.fail_fast = fail_fast
        self.log = logging.getLogger(self.__class__.__name__)

    def download(self, module_set: ModuleSet, context: PromotionContext, executor: Executor) -> List[ArtifactResult]:
        build_dir = context_directory(self.working_directory, context)
        jobs: List[Tuple[ArtifactDescriptor, str, Path]] = []
        for module in module_set:
            directory = module_directory(build_dir, module)
            if not directory.is_dir():
                raise PromotionError(f"Module directory {directory} does not exist, prepare the workspace first")
            self.log.info("Downloading module %s to %s", module.id, directory)
            for artifact in module.artifacts:
                for suffix in DOWNLOAD_SUFFIXES:
                    jobs.append((artifact, artifact.download_uri + suffix, directory / (artifact.name + suffix)))

        future_map: Dict[Future, ArtifactDescriptor] = {
            executor.submit(self.client.download, uri, target): artifact for artifact, uri, target in jobs
        }
        errors: Dict[ArtifactDescriptor, PromotionError] = {}
        cancelled: Dict[ArtifactDescriptor, int] = defaultdict(int)
        try:
            for future in as_completed(future_map):
                artifact = future_map[future]
                if future.cancelled():
                    cancelled[artifact] += 1
                    continue
                try:
                    future.result()
                except PromotionError as exc:
                    self.log.error("Download of %s failed: %s", artifact.name, exc)
                    errors.setdefault(artifact, exc)
                    if self.fail_fast:
                        self._cancel_pending(future_map)
        except Exception:
            self._cancel_pending(future_map)
            raise

        results: List[ArtifactResult] = []
        for module in module_set:
            module_ok = True
            for artifact in module.artifacts:
                if artifact in errors:
                    results.append(ArtifactResult.failure(artifact, errors[artifact]))
                    module_ok = False
                elif cancelled[artifact]:
                    results.append(ArtifactResult(artifact=artifact, ok=False, message="download cancelled"))
                    module_ok = False
                else:
                    results.append(ArtifactResult.success(artifact, "downloaded"))
            if module_ok:
                self.log.info("Download of %s complete", module.id)
        return results

    @staticmethod
    def _cancel_pending(future_map: Dict[Future, ArtifactDescriptor]) -> None:
        for future in future_map:
            future.cancel()
