from __future__ import annotations

from userdir.protocols.storage import Document
from userdir.storage.codec import decode_document, encode_document


class InMemoryStorageBackend:
    """Process-local backend. Values are kept encoded so callers never share references."""

    def __init__(self) -> None:
        self._documents: dict[str, str] = {}

    async def get(self, key: str) -> Document | None:
        raw = self._documents.get(key)
        if raw is None:
            return None
        return decode_document(raw)

    async def set(self, key: str, value: Document) -> None:
        self._documents[key] = encode_document(value)

    async def delete(self, key: str) -> bool:
        return self._documents.pop(key, None) is not None


__all__ = ["InMemoryStorageBackend"]
