"""Core module: lightweight re-exports only."""

from userdir.core.logging import request_scope, setup_logging
from userdir.core.signing import Ed25519Signer

__all__ = ["Ed25519Signer", "request_scope", "setup_logging"]
