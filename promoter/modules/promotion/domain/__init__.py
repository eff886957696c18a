from .artifact_type import ArtifactType, ArtifactTypes, WellKnownType
from .build_info import BuildArtifact, BuildMetadata, BuildModule
from .coordinate import Coordinate
from .models import (
    ArtifactDescriptor,
    ArtifactResult,
    Module,
    ModuleSet,
    PromotionContext,
    PromotionResult,
    StagingProfile,
    StagingRepository,
    raise_for_failures,
)

__all__ = [
    "ArtifactDescriptor",
    "ArtifactResult",
    "ArtifactType",
    "ArtifactTypes",
    "BuildArtifact",
    "BuildMetadata",
    "BuildModule",
    "Coordinate",
    "Module",
    "ModuleSet",
    "PromotionContext",
    "PromotionResult",
    "StagingProfile",
    "StagingRepository",
    "WellKnownType",
    "raise_for_failures",
]
