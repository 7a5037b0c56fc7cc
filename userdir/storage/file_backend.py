"""Filesystem storage backend: one JSON file per key under a root directory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import tempfile
from pathlib import Path

from userdir.errors import InvalidKeyError, StorageError
from userdir.protocols.storage import Document
from userdir.storage.codec import decode_document, encode_document

logger = logging.getLogger(__name__)

_FORBIDDEN_KEY_CHARS = frozenset({"/", "\\", "\x00"})


def validate_key(key: str) -> str:
    """Reject keys that could resolve outside the storage root."""
    if not key or key in {".", ".."}:
        raise InvalidKeyError(f"Invalid storage key: {key!r}")
    if key.startswith("."):
        raise InvalidKeyError(f"Invalid storage key: {key!r}")
    if any(ch in _FORBIDDEN_KEY_CHARS for ch in key):
        raise InvalidKeyError(f"Invalid storage key: {key!r}")
    return key


class FileStorageBackend:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"FileStorageBackend(root={str(self.root)!r})"

    async def get(self, key: str) -> Document | None:
        path = self._path_for(key)
        try:
            raw = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageError("Failed to read document") from exc
        return decode_document(raw)

    async def set(self, key: str, value: Document) -> None:
        path = self._path_for(key)
        payload = encode_document(value)
        try:
            await asyncio.to_thread(self._write_atomic, path, payload)
        except OSError as exc:
            raise StorageError("Failed to write document") from exc

    async def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError("Failed to delete document") from exc
        return True

    def _ensure_root_sync(self) -> None:
        # exist_ok keeps concurrent first writers from racing each other.
        self.root.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        return self.root / validate_key(key)

    def _write_atomic(self, path: Path, payload: str) -> None:
        self._ensure_root_sync()
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        self._fsync_root()

    def _fsync_root(self) -> None:
        try:
            dir_fd = os.open(self.root, os.O_RDONLY)
        except OSError:
            # Some platforms cannot open directories for fsync.
            return
        try:
            os.fsync(dir_fd)
        except OSError:
            logger.debug("Directory fsync unsupported for %s", self.root)
        finally:
            os.close(dir_fd)


__all__ = ["FileStorageBackend", "validate_key"]
