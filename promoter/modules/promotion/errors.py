"""Error taxonomy for the promotion pipeline.

Every error is fatal to a promotion run. Messages carry the build, module or
artifact identity and, for remote failures, the response body.
"""

from __future__ import annotations

from typing import Optional


class PromotionError(RuntimeError):
    """Base class for all promotion failures."""


class FormatError(PromotionError, ValueError):
    """Raised when a coordinate string cannot be parsed."""


class ResolutionError(PromotionError):
    """Raised when build metadata cannot be mapped onto downloadable files."""


class IntegrityError(PromotionError):
    """Raised when a downloaded file does not match its reported digests."""


class EmptyModuleError(ResolutionError, IntegrityError):
    """Raised when a module has no artifacts left after filtering."""


class PromotionInProgressError(PromotionError):
    """Raised when a build name is already being promoted into the same workspace."""


class RemoteError(PromotionError):
    """A failure reported by a remote service, optionally with its response body."""

    def __init__(self, message: str, response_body: Optional[str] = None) -> None:
        if response_body:
            message = f"{message}: {response_body}"
        super().__init__(message)
        self.response_body = response_body


class RepositoryError(RemoteError):
    """Raised when the artifact repository cannot serve build info or files."""


class StagingError(RemoteError):
    """Raised for staging profile, repository, upload or close failures."""


class SigningError(PromotionError):
    """Raised when a detached signature cannot be produced."""


class KeyUnlockError(SigningError):
    """Raised when the signing key cannot be unlocked, e.g. wrong passphrase."""


class SignatureInvalid(SigningError):
    """Raised when a signature does not verify against the message."""
