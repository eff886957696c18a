from .hook import SigningHook
from .pgp import PgpSigner

__all__ = ["PgpSigner", "SigningHook"]
