from userdir.protocols.signing import SignatureVerifier
from userdir.protocols.storage import StorageBackend

__all__ = ["SignatureVerifier", "StorageBackend"]
