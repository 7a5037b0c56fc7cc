"""Directory operations over the storage client.

User records live under ``user:<uuid>``; the public key index is one
document under ``keys``. Record creation and index registration are two
separate writes, so they can diverge if the process dies between them.
``create_and_register`` narrows that window for callers that want both.
"""

from __future__ import annotations

import asyncio
import logging
import uuid as uuid_lib
from collections.abc import Callable

from userdir.errors import NotFoundError, SerializationError, StorageError
from userdir.models.users import INDEX_KEY, PublicKeyIndex, User, user_key
from userdir.storage.client import StorageClient

logger = logging.getLogger(__name__)

_MAX_UUID_ATTEMPTS = 5
_UNDECODABLE = object()


def _uuid4() -> str:
    return str(uuid_lib.uuid4())


class DirectoryService:
    def __init__(
        self,
        client: StorageClient,
        uuid_factory: Callable[[], str] = _uuid4,
    ) -> None:
        self._client = client
        self._uuid_factory = uuid_factory
        # Serializes every read-modify-write of the index document.
        self._index_lock = asyncio.Lock()

    async def create_user(self, public_key: str, credential_hash: str) -> User:
        user = User(
            uuid=await self._fresh_uuid(),
            public_key=public_key,
            credential_hash=credential_hash,
        )
        await self._client.set(user_key(user.uuid), user.to_document())
        logger.info("Created user %s", user.uuid)
        return user

    async def get_user(self, uuid: str) -> User | None:
        document = await self._read_document(user_key(uuid))
        if document is None or document is _UNDECODABLE:
            return None
        try:
            return User.from_document(document)
        except SerializationError:
            logger.warning("Stored record for user %s failed to decode", uuid)
            return None

    async def delete_user(self, uuid: str) -> bool:
        removed = await self._client.delete(user_key(uuid))
        if removed:
            logger.info("Deleted user %s", uuid)
        return removed

    async def update_credential_hash(self, uuid: str, new_hash: str) -> User:
        existing = await self.get_user(uuid)
        if existing is None:
            raise NotFoundError(f"User {uuid} not found")
        updated = existing.with_credential_hash(new_hash)
        await self._client.set(user_key(uuid), updated.to_document())
        logger.info("Updated credential hash for user %s", uuid)
        return updated

    async def register_public_key(self, public_key: str, uuid: str) -> None:
        async with self._index_lock:
            index = await self._load_index()
            index.assign(public_key, uuid)
            await self._client.set(INDEX_KEY, index.to_document())

    async def unregister_public_key(self, public_key: str, uuid: str | None = None) -> bool:
        """Drop the index entry for ``public_key``.

        When ``uuid`` is given the entry is only removed if it still points at
        that user, so a key re-registered by someone else survives.
        """
        async with self._index_lock:
            index = await self._load_index()
            if not index.remove(public_key, uuid):
                return False
            await self._client.set(INDEX_KEY, index.to_document())
            return True

    async def resolve_uuid_by_public_key(self, public_key: str) -> str | None:
        index = await self._load_index()
        return index.lookup(public_key)

    async def create_and_register(
        self,
        public_key: str,
        credential_hash: str,
        attempts: int = 3,
    ) -> User:
        if attempts < 1:
            raise ValueError("attempts must be >= 1")

        user = await self.create_user(public_key, credential_hash)
        last_error = StorageError("Index registration was not attempted")
        for attempt in range(1, attempts + 1):
            try:
                await self.register_public_key(public_key, user.uuid)
                return user
            except StorageError as exc:
                last_error = exc
                logger.warning(
                    "Index registration for user %s failed (attempt %d/%d)",
                    user.uuid,
                    attempt,
                    attempts,
                )

        await self._rollback_user(user.uuid)
        raise last_error

    async def _rollback_user(self, uuid: str) -> None:
        try:
            await self.delete_user(uuid)
        except StorageError:
            logger.exception("Rollback of user %s failed; record has no index entry", uuid)

    async def _fresh_uuid(self) -> str:
        for _ in range(_MAX_UUID_ATTEMPTS):
            candidate = self._uuid_factory()
            if await self._read_document(user_key(candidate)) is None:
                return candidate
            logger.warning("Generated uuid %s already in use; regenerating", candidate)
        raise StorageError("Could not allocate a unique user id")

    async def _read_document(self, key: str) -> object | None:
        try:
            return await self._client.get(key)
        except SerializationError:
            logger.warning("Document %s could not be decoded", key)
            return _UNDECODABLE

    async def _load_index(self) -> PublicKeyIndex:
        document = await self._read_document(INDEX_KEY)
        if document is _UNDECODABLE:
            return PublicKeyIndex()
        try:
            return PublicKeyIndex.from_document(document)
        except SerializationError:
            logger.warning("Public key index failed to decode; treating as empty")
            return PublicKeyIndex()


__all__ = ["DirectoryService"]
