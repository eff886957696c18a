"""Promotion pipeline: resolve, download, verify, sign and stage one build."""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Optional, Set, Union

from promoter.modules.promotion.domain import (
    ArtifactTypes,
    ModuleSet,
    PromotionContext,
    PromotionResult,
    raise_for_failures,
)
from promoter.modules.promotion.errors import PromotionInProgressError
from promoter.modules.promotion.fileget import ArtifactoryClient, BuildDownloader
from promoter.modules.promotion.resolution import BuildResolver, exclude_suffixes
from promoter.modules.promotion.signing import PgpSigner, SigningHook
from promoter.modules.promotion.staging import NexusStagingClient, StagingOrchestrator
from promoter.modules.promotion.verify import IntegrityVerifier
from promoter.modules.promotion.workspace import clean_context_directory, context_directory, prepare_directories
from promoter.settings import Settings

log = logging.getLogger(__name__)


class PromotionService:
    """Runs the stages strictly in order; the first failing stage aborts the run.

    Nothing is rolled back on failure: downloaded files stay in the workspace
    and an opened staging repository stays open. Builds sharing a workspace
    directory (the same sanitized build name) are never promoted at the same
    time; an overlapping run is rejected with ``PromotionInProgressError``.
    """

    def __init__(
        self,
        settings: Settings,
        artifactory: Optional[ArtifactoryClient] = None,
        nexus: Optional[NexusStagingClient] = None,
        signer: Optional[PgpSigner] = None,
        types: Optional[ArtifactTypes] = None,
    ) -> None:
        self.settings = settings
        self.working_directory = settings.working_directory
        self.artifactory = artifactory or ArtifactoryClient(settings)
        self.nexus = nexus or NexusStagingClient(settings)
        self._signer = signer
        self.resolver = BuildResolver(types)
        self.downloader = BuildDownloader(self.artifactory, self.working_directory)
        self.verifier = IntegrityVerifier(self.working_directory)
        self._active: Set[Path] = set()
        self._active_lock = threading.Lock()

    @property
    def signer(self) -> Optional[PgpSigner]:
        if self._signer is None and self.settings.signing_enabled:
            self._signer = PgpSigner(
                self.settings.pgp_gnupghome,
                self.settings.pgp_key_id,
                self.settings.pgp_passphrase,
                keyring=self.settings.pgp_keyring,
            )
        return self._signer

    def close(self) -> None:
        self.artifactory.close()
        self.nexus.close()

    def resolve(self, context: PromotionContext) -> ModuleSet:
        build = self.artifactory.get_build_info(context.build_name, context.build_number)
        uris = self.artifactory.search_build_artifacts(context.build_name, context.build_number)
        return self.resolver.resolve(build, uris, exclude_suffixes(self.settings.artifact_exclude_suffixes))

    @contextmanager
    def _exclusive_workspace(self, context: PromotionContext) -> Iterator[None]:
        """Claim the workspace directory of ``context`` for the duration of one run."""
        directory = context_directory(self.working_directory, context)
        with self._active_lock:
            if directory in self._active:
                raise PromotionInProgressError(
                    f"Cannot promote {context}: another promotion is using workspace {directory}"
                )
            self._active.add(directory)
        try:
            yield
        finally:
            with self._active_lock:
                self._active.discard(directory)

    def promote(self, build_name: str, build_number: Union[int, str]) -> PromotionResult:
        context = PromotionContext(build_name, str(build_number))
        with self._exclusive_workspace(context):
            return self._promote(context)

    def _promote(self, context: PromotionContext) -> PromotionResult:
        started = time.monotonic()
        log.info("Starting promotion build=%s", context)

        if self.settings.clean_workspace:
            clean_context_directory(self.working_directory, context)
        module_set = self.resolve(context)
        result = PromotionResult(context=context, module_set=module_set)
        prepare_directories(self.working_directory, context, module_set)

        with ThreadPoolExecutor(max_workers=self.settings.max_workers) as executor:
            result.downloaded = self.downloader.download(module_set, context, executor)
            raise_for_failures(result.downloaded)

            self.verifier.check(module_set, context)

            signer = self.signer
            if signer is not None:
                raise_for_failures(SigningHook(signer, self.working_directory).sign(module_set, context))
                result.signed = True
            else:
                log.info("Signing disabled, expecting existing .asc files for build=%s", context)

            orchestrator = StagingOrchestrator(self.nexus, self.working_directory)
            result.repository = orchestrator.stage(
                module_set,
                context,
                executor,
                close=self.settings.close_staging_repository,
            )
            result.closed = self.settings.close_staging_repository

        log.info(
            "Promotion of build=%s finished repository=%s modules=%d artifacts=%d elapsed=%.1fs",
            context,
            result.repository.repository_id,
            len(module_set),
            module_set.artifact_count,
            time.monotonic() - started,
        )
        return result
