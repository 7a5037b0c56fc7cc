"""Parsed request bodies and the response envelope handed back to the transport."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from userdir.models.users import User

ResponseStatus = Literal["success", "authError", "notFound", "serverError"]


class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class CreateUserRequest(_RequestModel):
    public_key: str = Field(alias="publicKey")
    credential_hash: str = Field(alias="credentialHash")

    @field_validator("public_key")
    @classmethod
    def _validate_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("publicKey must not be empty")
        return value


class SignedRequest(_RequestModel):
    timestamp: str
    uuid: str
    signature: str

    @field_validator("timestamp", mode="before")
    @classmethod
    def _stringify_timestamp(cls, value: object) -> object:
        # Clients commonly send epoch seconds as a JSON number.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class UpdateHashRequest(SignedRequest):
    credential_hash: str = Field(alias="credentialHash")


class DeleteUserRequest(SignedRequest):
    credential_hash: str = Field(alias="credentialHash")


class DirectoryResponse(BaseModel):
    status: ResponseStatus
    code: int
    user: User | None = None
    message: str | None = None

    @classmethod
    def success(cls, code: int = 200, user: User | None = None) -> DirectoryResponse:
        return cls(status="success", code=code, user=user)

    @classmethod
    def auth_error(cls) -> DirectoryResponse:
        return cls(status="authError", code=403, message="Unauthorized")

    @classmethod
    def not_found(cls) -> DirectoryResponse:
        return cls(status="notFound", code=404, message="Not found")

    @classmethod
    def server_error(cls, message: str) -> DirectoryResponse:
        return cls(status="serverError", code=500, message=message)

    def to_body(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


__all__ = [
    "CreateUserRequest",
    "DeleteUserRequest",
    "DirectoryResponse",
    "ResponseStatus",
    "SignedRequest",
    "UpdateHashRequest",
]
