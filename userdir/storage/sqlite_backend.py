"""SQLite key-value backend."""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from userdir.errors import StorageError
from userdir.protocols.storage import Document
from userdir.storage.codec import decode_document, encode_document

_SCHEMA = """
CREATE TABLE IF NOT EXISTS documents (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class SQLiteStorageBackend:
    def __init__(self, db_path: str | Path) -> None:
        self.db_path = str(db_path)
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"SQLiteStorageBackend(db_path={self.db_path!r})"

    async def get(self, key: str) -> Document | None:
        await self.ensure_schema()
        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute("SELECT value FROM documents WHERE key = ?", (key,))
                row = await cursor.fetchone()
        except sqlite3.Error as exc:
            raise StorageError("Failed to read document") from exc
        if row is None:
            return None
        return decode_document(row[0])

    async def set(self, key: str, value: Document) -> None:
        payload = encode_document(value)
        await self.ensure_schema()
        now = datetime.now(UTC).isoformat()
        try:
            async with aiosqlite.connect(self.db_path) as db:
                await db.execute(
                    """
                    INSERT INTO documents (key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                    """,
                    (key, payload, now),
                )
                await db.commit()
        except sqlite3.Error as exc:
            raise StorageError("Failed to write document") from exc

    async def delete(self, key: str) -> bool:
        await self.ensure_schema()
        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute("DELETE FROM documents WHERE key = ?", (key,))
                await db.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as exc:
            raise StorageError("Failed to delete document") from exc

    async def ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if self._schema_ready:
                return
            try:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
                async with aiosqlite.connect(self.db_path) as db:
                    await db.execute(_SCHEMA)
                    await db.commit()
            except (OSError, sqlite3.Error) as exc:
                raise StorageError("Failed to initialize storage database") from exc
            self._schema_ready = True


__all__ = ["SQLiteStorageBackend"]
