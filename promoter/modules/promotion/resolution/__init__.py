from .matcher import CandidateMatcher, DownloadCandidate
from .resolver import ArtifactFilter, BuildResolver, exclude_suffixes

__all__ = [
    "ArtifactFilter",
    "BuildResolver",
    "CandidateMatcher",
    "DownloadCandidate",
    "exclude_suffixes",
]
