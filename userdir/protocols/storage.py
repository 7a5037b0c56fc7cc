from __future__ import annotations

from typing import Any, Protocol, TypeAlias, runtime_checkable

Document: TypeAlias = Any


@runtime_checkable
class StorageBackend(Protocol):
    async def get(self, key: str) -> Document | None: ...

    async def set(self, key: str, value: Document) -> None: ...

    async def delete(self, key: str) -> bool: ...


__all__ = ["Document", "StorageBackend"]
