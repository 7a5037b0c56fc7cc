from __future__ import annotations

from userdir.models.requests import (
    CreateUserRequest,
    DeleteUserRequest,
    DirectoryResponse,
    SignedRequest,
    UpdateHashRequest,
)
from userdir.models.users import INDEX_KEY, USER_KEY_PREFIX, PublicKeyIndex, User, user_key

__all__ = [
    "CreateUserRequest",
    "DeleteUserRequest",
    "DirectoryResponse",
    "INDEX_KEY",
    "PublicKeyIndex",
    "SignedRequest",
    "USER_KEY_PREFIX",
    "UpdateHashRequest",
    "User",
    "user_key",
]
