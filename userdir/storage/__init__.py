"""Storage backends and the client that owns the configured one."""

from userdir.storage.client import StorageClient, backend_from_uri
from userdir.storage.file_backend import FileStorageBackend
from userdir.storage.memory_backend import InMemoryStorageBackend
from userdir.storage.sqlite_backend import SQLiteStorageBackend

__all__ = [
    "FileStorageBackend",
    "InMemoryStorageBackend",
    "SQLiteStorageBackend",
    "StorageClient",
    "backend_from_uri",
]
