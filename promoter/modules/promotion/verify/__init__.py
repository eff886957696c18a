from .checksums import IntegrityVerifier, compute_digests

__all__ = ["IntegrityVerifier", "compute_digests"]
