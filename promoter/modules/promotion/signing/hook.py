"""Write ``.asc`` signatures next to downloaded artifacts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from promoter.modules.promotion.domain import ArtifactResult, ModuleSet, PromotionContext
from promoter.modules.promotion.errors import SigningError
from promoter.modules.promotion.workspace import context_directory, module_directory
from .pgp import PgpSigner


class SigningHook:
    """Sign every artifact of a module set, one at a time.

    Artifacts are streamed from disk. Each signature is verified right after
    it is written and removed again when it does not verify. The first failure
    stops the pass and is returned as a failed result.
    """

    def __init__(self, signer: PgpSigner, working_directory: Path) -> None:
        self.signer = signer
        self.working_directory = Path(working_directory)
        self.log = logging.getLogger(self.__class__.__name__)

    def sign(self, module_set: ModuleSet, context: PromotionContext) -> List[ArtifactResult]:
        build_dir = context_directory(self.working_directory, context)
        results: List[ArtifactResult] = []
        for module in module_set:
            directory = module_directory(build_dir, module)
            for artifact in module.artifacts:
                target = directory / artifact.name
                signature_path = directory / f"{artifact.name}.asc"
                try:
                    signature_path.write_text(self.signer.sign_file(target), encoding="ascii")
                    try:
                        self.signer.verify_file(target, signature_path)
                    except SigningError:
                        signature_path.unlink()
                        raise
                except OSError as exc:
                    error = SigningError(f"Cannot sign {artifact.name} of {module.id}: {exc}")
                    results.append(ArtifactResult.failure(artifact, error))
                    return results
                except SigningError as exc:
                    self.log.error("Signing of %s failed: %s", artifact.name, exc)
                    results.append(ArtifactResult.failure(artifact, exc))
                    return results
                self.log.debug("Signed artifact=%s", artifact.name)
                results.append(ArtifactResult.success(artifact, "signed"))
            self.log.info("Signed module %s", module.id)
        return results
