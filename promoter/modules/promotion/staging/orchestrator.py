"""Staging repository lifecycle on top of :class:`NexusStagingClient`."""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from enum import Enum
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from promoter.modules.promotion.domain import (
    Coordinate,
    ModuleSet,
    PromotionContext,
    StagingProfile,
    StagingRepository,
)
from promoter.modules.promotion.errors import StagingError
from promoter.modules.promotion.concurrency import join_all
from promoter.modules.promotion.workspace import context_directory, module_directory
from .nexus_client import NexusStagingClient


class StagingState(str, Enum):
    NO_PROFILE = "NoProfile"
    PROFILE_SELECTED = "ProfileSelected"
    REPOSITORY_OPEN = "RepositoryOpen"
    REPOSITORY_CLOSED = "RepositoryClosed"


class StagingOrchestrator:
    """Select a profile, open a repository, upload and optionally close it.

    One instance drives exactly one staging repository. Transitions only move
    forward; an operation called in the wrong state raises ``StagingError``.
    """

    def __init__(self, client: NexusStagingClient, working_directory: Path) -> None:
        self.client = client
        self.working_directory = Path(working_directory)
        self.state = StagingState.NO_PROFILE
        self.profile: Optional[StagingProfile] = None
        self.repository: Optional[StagingRepository] = None
        self.uploaded_files = 0
        self.log = logging.getLogger(self.__class__.__name__)

    def _require(self, expected: StagingState, operation: str) -> None:
        if self.state is not expected:
            raise StagingError(f"Cannot {operation} in state {self.state.value}, expected {expected.value}")

    def select_profile(self, coordinate: Coordinate) -> StagingProfile:
        self._require(StagingState.NO_PROFILE, "select a staging profile")
        profile = self.client.evaluate_profile(coordinate.group_id, coordinate.artifact_id, coordinate.version)
        if profile is None:
            raise StagingError(f"Cannot resolve staging profile for {coordinate}")
        self.log.info("Selected staging profile profile=%s coordinate=%s", profile.profile_id, coordinate)
        self.profile = profile
        self.state = StagingState.PROFILE_SELECTED
        return profile

    def create_repository(self, profile: StagingProfile, description: str) -> StagingRepository:
        self._require(StagingState.PROFILE_SELECTED, "create a staging repository")
        repository = self.client.start_staging(profile, description)
        self.log.info(
            "Opened staging repository repository=%s profile=%s", repository.repository_id, profile.profile_id
        )
        self.repository = repository
        self.state = StagingState.REPOSITORY_OPEN
        return repository

    def upload(
        self,
        repository: StagingRepository,
        module_set: ModuleSet,
        context: PromotionContext,
        executor: Executor,
    ) -> int:
        """Upload the four distribution files of every artifact; returns the file count."""
        self._require(StagingState.REPOSITORY_OPEN, "upload")
        build_dir = context_directory(self.working_directory, context)
        uploads: List[Tuple[str, str, Path]] = []
        for module in module_set:
            directory = module_directory(build_dir, module)
            for artifact in module.artifacts:
                for filename in artifact.distribution_file_names:
                    path = directory / filename
                    if not path.is_file():
                        raise StagingError(f"Cannot upload {filename} of {module.id}: {path} does not exist")
                    uploads.append((module.id.repository_path, filename, path))

        calls: List[Callable[[], None]] = [
            partial(self.client.deploy_file, repository, layout_path, filename, path)
            for layout_path, filename, path in uploads
        ]
        self.log.info("Uploading %d files to repository=%s", len(calls), repository.repository_id)
        join_all(executor, calls)
        self.uploaded_files += len(calls)
        return len(calls)

    def close_repository(self, repository: StagingRepository) -> None:
        self._require(StagingState.REPOSITORY_OPEN, "close the staging repository")
        if not self.uploaded_files:
            raise StagingError(f"Refusing to close empty staging repository {repository.repository_id}")
        self.client.finish_staging(repository)
        self.log.info("Closed staging repository repository=%s", repository.repository_id)
        self.state = StagingState.REPOSITORY_CLOSED

    def stage(
        self,
        module_set: ModuleSet,
        context: PromotionContext,
        executor: Executor,
        *,
        close: bool = True,
        description: Optional[str] = None,
    ) -> StagingRepository:
        """Run the whole lifecycle for ``module_set``; closing is skipped when ``close`` is false."""
        if not len(module_set):
            raise StagingError(f"Nothing to stage for {context}")
        coordinate = module_set[0].id
        profile = self.select_profile(coordinate)
        repository = self.create_repository(profile, description or f"Promotion of {coordinate}")
        self.upload(repository, module_set, context, executor)
        if close:
            self.close_repository(repository)
        else:
            self.log.info("Leaving staging repository %s open", repository.repository_id)
        return repository
