"""Request handlers: parsed request in, ``DirectoryResponse`` out."""

from __future__ import annotations

import logging

from userdir.core.logging import request_scope
from userdir.directory.gate import AuthenticationGate
from userdir.directory.service import DirectoryService
from userdir.errors import AuthError, NotFoundError, SerializationError, StorageError
from userdir.models.requests import (
    CreateUserRequest,
    DeleteUserRequest,
    DirectoryResponse,
    UpdateHashRequest,
)

logger = logging.getLogger(__name__)


class DirectoryHandlers:
    def __init__(self, service: DirectoryService, gate: AuthenticationGate) -> None:
        self.service = service
        self.gate = gate

    async def create_user(self, request: CreateUserRequest) -> DirectoryResponse:
        with request_scope("create_user") as scope:
            response = await self._create_user(request)
            scope.complete(response.status, response.code)
            return response

    async def get_user(self, uuid: str) -> DirectoryResponse:
        with request_scope("get_user", user_uuid=uuid) as scope:
            response = await self._get_user(uuid)
            scope.complete(response.status, response.code)
            return response

    async def update_hash(self, request: UpdateHashRequest) -> DirectoryResponse:
        with request_scope("update_hash", user_uuid=request.uuid) as scope:
            response = await self._update_hash(request)
            scope.complete(response.status, response.code)
            return response

    async def delete_user(self, request: DeleteUserRequest) -> DirectoryResponse:
        with request_scope("delete_user", user_uuid=request.uuid) as scope:
            response = await self._delete_user(request)
            scope.complete(response.status, response.code)
            return response

    async def _create_user(self, request: CreateUserRequest) -> DirectoryResponse:
        try:
            user = await self.service.create_and_register(
                request.public_key,
                request.credential_hash,
            )
        except (StorageError, SerializationError) as exc:
            return _server_error(exc)
        return DirectoryResponse.success(201, user)

    async def _get_user(self, uuid: str) -> DirectoryResponse:
        try:
            user = await self.service.get_user(uuid)
        except StorageError as exc:
            return _server_error(exc)
        if user is None:
            return DirectoryResponse.not_found()
        return DirectoryResponse.success(200, user)

    async def _update_hash(self, request: UpdateHashRequest) -> DirectoryResponse:
        try:
            await self.gate.authorize(
                request.timestamp,
                request.uuid,
                request.credential_hash,
                request.signature,
            )
            user = await self.service.update_credential_hash(
                request.uuid,
                request.credential_hash,
            )
        except AuthError:
            return DirectoryResponse.auth_error()
        except NotFoundError:
            return DirectoryResponse.not_found()
        except (StorageError, SerializationError) as exc:
            return _server_error(exc)
        return DirectoryResponse.success(202, user)

    async def _delete_user(self, request: DeleteUserRequest) -> DirectoryResponse:
        try:
            user = await self.gate.authorize(
                request.timestamp,
                request.uuid,
                request.credential_hash,
                request.signature,
            )
        except AuthError:
            return DirectoryResponse.auth_error()
        except NotFoundError:
            return DirectoryResponse.not_found()

        try:
            removed = await self.service.delete_user(user.uuid)
        except StorageError as exc:
            return _server_error(exc)
        if not removed:
            return DirectoryResponse.server_error("Failed to delete user")

        try:
            await self.service.unregister_public_key(user.public_key, user.uuid)
        except StorageError:
            logger.exception("Index cleanup failed after deleting user %s", user.uuid)
            return DirectoryResponse.server_error("Failed to delete key")
        return DirectoryResponse.success(202)


def _server_error(exc: StorageError | SerializationError) -> DirectoryResponse:
    logger.error("Request failed: %s", exc, exc_info=exc)
    return DirectoryResponse.server_error(exc.public_message)


__all__ = ["DirectoryHandlers"]
