"""Detached armored signatures through GnuPG."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Optional, Union

import gnupg

from promoter.modules.promotion.errors import KeyUnlockError, SignatureInvalid, SigningError

log = logging.getLogger(__name__)


class PgpSigner:
    """Sign and verify messages with one key of a GnuPG home.

    ``keyring`` is an optional armored key file imported into ``gnupghome``
    when the signer is created. Every signature is requested with the
    configured passphrase: gpg-agent is reloaded first so a passphrase cached
    by an earlier signer cannot unlock the key.
    """

    def __init__(
        self,
        gnupghome: Optional[Union[str, Path]],
        key_id: str,
        passphrase: Optional[str],
        keyring: Optional[Union[str, Path]] = None,
    ) -> None:
        if not key_id:
            raise SigningError("No signing key configured")
        home = str(gnupghome) if gnupghome else None
        try:
            self.gpg = gnupg.GPG(gnupghome=home)
        except (OSError, ValueError) as exc:
            raise SigningError(f"Cannot start gpg with home {home or '<default>'}: {exc}") from exc
        self.gnupghome = home
        self.key_id = key_id
        self.passphrase = passphrase
        if keyring:
            self.import_keyring(Path(keyring))
        self._require_secret_key()

    def import_keyring(self, path: Path) -> None:
        try:
            key_data = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SigningError(f"Cannot read keyring {path}: {exc}") from exc
        result = self.gpg.import_keys(key_data, passphrase=self.passphrase)
        if not result.count:
            raise SigningError(f"No keys imported from {path}: {result.stderr.strip()}")
        log.info("Imported %d keys from %s", result.count, path)

    def _require_secret_key(self) -> None:
        wanted = self.key_id.upper()
        for key in self.gpg.list_keys(secret=True):
            if key.get("keyid", "").upper().endswith(wanted) or key.get("fingerprint", "").upper().endswith(wanted):
                return
        raise SigningError(f"Secret key {self.key_id} not found")

    def _forget_cached_passphrases(self) -> None:
        """Reload gpg-agent, which flushes every cached passphrase."""
        gpgconf = shutil.which("gpgconf")
        if gpgconf is None:
            # GnuPG 1.x: no agent between gpg and the passphrase.
            return
        command = [gpgconf]
        if self.gnupghome:
            command += ["--homedir", self.gnupghome]
        command += ["--reload", "gpg-agent"]
        try:
            completed = subprocess.run(command, capture_output=True, text=True, stdin=subprocess.DEVNULL)
        except OSError as exc:
            raise SigningError(f"Cannot reload gpg-agent to drop cached passphrases: {exc}") from exc
        if completed.returncode != 0:
            # No running agent means nothing is cached.
            log.warning("gpg-agent reload exited with %s: %s", completed.returncode, completed.stderr.strip())

    def _armored(self, result) -> str:
        if not result.data:
            raise KeyUnlockError(
                f"Cannot unlock key {self.key_id}: {result.status or result.stderr.strip() or 'no signature produced'}"
            )
        return result.data.decode("ascii")

    def sign(self, data: bytes) -> str:
        """Return an armored detached signature of ``data``."""
        self._forget_cached_passphrases()
        result = self.gpg.sign(data, keyid=self.key_id, passphrase=self.passphrase, detach=True)
        return self._armored(result)

    def sign_file(self, path: Path) -> str:
        """Like :meth:`sign`, streaming the content of ``path`` to gpg."""
        self._forget_cached_passphrases()
        with Path(path).open("rb") as fh:
            result = self.gpg.sign_file(fh, keyid=self.key_id, passphrase=self.passphrase, detach=True)
        return self._armored(result)

    def verify(self, data: bytes, signature: str) -> None:
        """Raise ``SignatureInvalid`` unless ``signature`` is a good signature of ``data``."""
        handle, sig_path = tempfile.mkstemp(suffix=".asc")
        try:
            with os.fdopen(handle, "w", encoding="ascii") as fh:
                fh.write(signature)
            verified = self.gpg.verify_data(sig_path, data)
        finally:
            os.unlink(sig_path)
        self._require_valid(verified)

    def verify_file(self, path: Path, signature_path: Path) -> None:
        """Check the detached signature in ``signature_path`` against the file at ``path``."""
        verified = self.gpg.verify_file(str(signature_path), data_filename=str(path))
        self._require_valid(verified)

    @staticmethod
    def _require_valid(verified) -> None:
        if not verified.valid:
            raise SignatureInvalid(f"Signature does not verify: {verified.status or 'invalid signature'}")
