"""Error taxonomy shared by the storage, directory and gate layers.

Each error carries a short ``public_message`` that is safe to hand to a
caller. Underlying causes stay on ``__cause__`` for logs only.
"""

from __future__ import annotations


class DirectoryError(Exception):
    public_message = "Directory error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)
        if message:
            self.public_message = message


class NotFoundError(DirectoryError):
    public_message = "Not found"


class AuthError(DirectoryError):
    public_message = "Unauthorized"


class SerializationError(DirectoryError):
    public_message = "Failed to encode or decode document"


class StorageError(DirectoryError):
    public_message = "Storage failure"


class InvalidKeyError(StorageError):
    public_message = "Invalid storage key"


__all__ = [
    "AuthError",
    "DirectoryError",
    "InvalidKeyError",
    "NotFoundError",
    "SerializationError",
    "StorageError",
]
