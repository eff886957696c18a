"""Checksum verification of downloaded artifacts."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Dict, List

from promoter.modules.promotion.domain import (
    ArtifactDescriptor,
    ArtifactResult,
    ModuleSet,
    PromotionContext,
    raise_for_failures,
)
from promoter.modules.promotion.errors import IntegrityError
from promoter.modules.promotion.workspace import context_directory, module_directory

ALGORITHMS = ("sha1", "md5")


def compute_digests(path: Path) -> Dict[str, str]:
    """Return lower-case hex digests of ``path`` for every algorithm in ``ALGORITHMS``."""
    hashers = {name: hashlib.new(name) for name in ALGORITHMS}
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(8192), b""):
            for hasher in hashers.values():
                hasher.update(chunk)
    return {name: hasher.hexdigest() for name, hasher in hashers.items()}


class IntegrityVerifier:
    """Cross-check local digests against the repository and the side-car files.

    For both SHA1 and MD5 the computed digest must equal the digest reported
    in the build info and must be contained in the ``.sha1``/``.md5`` file.
    """

    def __init__(self, working_directory: Path) -> None:
        self.working_directory = Path(working_directory)
        self.log = logging.getLogger(self.__class__.__name__)

    def verify(self, module_set: ModuleSet, context: PromotionContext) -> List[ArtifactResult]:
        build_dir = context_directory(self.working_directory, context)
        results: List[ArtifactResult] = []
        for module in module_set:
            directory = module_directory(build_dir, module)
            self.log.info("Verifying checksums for module %s in %s", module.id, directory)
            module_results = [self.verify_artifact(directory, artifact) for artifact in module.artifacts]
            if all(result.ok for result in module_results):
                self.log.info("Checksum verification of %s completed successfully", module.id)
            results.extend(module_results)
        return results

    def check(self, module_set: ModuleSet, context: PromotionContext) -> None:
        """Verify everything and raise ``IntegrityError`` for the first mismatch."""
        raise_for_failures(self.verify(module_set, context))

    def verify_artifact(self, directory: Path, artifact: ArtifactDescriptor) -> ArtifactResult:
        try:
            self._verify(directory, artifact)
        except IntegrityError as exc:
            self.log.error("%s", exc)
            return ArtifactResult.failure(artifact, exc)
        return ArtifactResult.success(artifact, "verified")

    def _verify(self, directory: Path, artifact: ArtifactDescriptor) -> None:
        binary = directory / artifact.name
        try:
            computed = compute_digests(binary)
        except OSError as exc:
            raise IntegrityError(f"Cannot read {binary} to verify {artifact.name}: {exc}") from exc

        reported = {"sha1": artifact.sha1, "md5": artifact.md5}
        for algorithm in ALGORITHMS:
            sidecar = directory / f"{artifact.name}.{algorithm}"
            try:
                sidecar_content = sidecar.read_text(encoding="ascii", errors="replace")
            except OSError as exc:
                raise IntegrityError(
                    f"{algorithm.upper()} checksum verification failed for {artifact.name}: "
                    f"cannot read {sidecar.name}"
                ) from exc
            digest = computed[algorithm]
            if (reported[algorithm] or "").strip().lower() != digest:
                raise IntegrityError(
                    f"{algorithm.upper()} checksum verification failed for {artifact.name}: "
                    f"repository reported {reported[algorithm] or '<none>'}, computed {digest}"
                )
            if digest not in sidecar_content.lower():
                raise IntegrityError(
                    f"{algorithm.upper()} checksum verification failed for {artifact.name}: "
                    f"{sidecar.name} does not contain {digest}"
                )
