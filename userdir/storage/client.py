"""Storage client: owns the one configured backend and forwards calls to it."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

from userdir.protocols.storage import Document, StorageBackend
from userdir.storage.file_backend import FileStorageBackend
from userdir.storage.memory_backend import InMemoryStorageBackend
from userdir.storage.sqlite_backend import SQLiteStorageBackend


class StorageClient:
    def __init__(self, backend: StorageBackend) -> None:
        self._backend = backend

    @classmethod
    def from_uri(cls, uri: str) -> StorageClient:
        return cls(backend_from_uri(uri))

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def backend_name(self) -> str:
        return type(self._backend).__name__

    async def get(self, key: str) -> Document | None:
        return await self._backend.get(key)

    async def set(self, key: str, value: Document) -> None:
        await self._backend.set(key, value)

    async def delete(self, key: str) -> bool:
        return await self._backend.delete(key)


def backend_from_uri(uri: str) -> StorageBackend:
    """Pick a backend from the locator scheme.

    ``file://./data`` and bare paths map to the filesystem backend,
    ``sqlite://./data/users.db`` to SQLite and ``memory://`` to the
    in-process map.
    """
    if not uri:
        raise ValueError("storage uri must not be empty")

    parts = urlsplit(uri)
    scheme = parts.scheme.lower()
    if scheme in {"", "file"}:
        return FileStorageBackend(_uri_path(uri, scheme))
    if scheme == "memory":
        return InMemoryStorageBackend()
    if scheme == "sqlite":
        return SQLiteStorageBackend(_uri_path(uri, scheme))
    raise ValueError(f"unsupported storage uri scheme: {scheme!r}")


def _uri_path(uri: str, scheme: str) -> Path:
    # urlsplit would move "." of "file://./data" into netloc, so strip the scheme by hand.
    raw = uri
    if scheme:
        raw = uri[len(scheme) + 1 :]
        if raw.startswith("//"):
            raw = raw[2:]
    if not raw:
        raise ValueError(f"storage uri has no path: {uri!r}")
    return Path(raw)


__all__ = ["StorageClient", "backend_from_uri"]
