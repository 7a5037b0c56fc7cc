from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from userdir.errors import SerializationError

USER_KEY_PREFIX = "user:"
INDEX_KEY = "keys"


def user_key(uuid: str) -> str:
    return f"{USER_KEY_PREFIX}{uuid}"


class User(BaseModel):
    """A directory entry. ``uuid`` and ``public_key`` never change after creation."""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    public_key: str = Field(alias="publicKey")
    credential_hash: str = Field(alias="credentialHash")

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_document(cls, document: object) -> User:
        try:
            return cls.model_validate(document)
        except ValidationError as exc:
            raise SerializationError("Stored user record is malformed") from exc

    def with_credential_hash(self, credential_hash: str) -> User:
        return self.model_copy(update={"credential_hash": credential_hash})


class PublicKeyIndex(BaseModel):
    """Public key -> uuid mapping, persisted as one bare JSON object."""

    entries: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, document: object) -> PublicKeyIndex:
        if document is None:
            return cls()
        try:
            return cls.model_validate({"entries": document})
        except ValidationError as exc:
            raise SerializationError("Stored public key index is malformed") from exc

    def to_document(self) -> dict[str, str]:
        return dict(self.entries)

    def lookup(self, public_key: str) -> str | None:
        return self.entries.get(public_key)

    def assign(self, public_key: str, uuid: str) -> None:
        # Last write wins for a key already mapped elsewhere.
        self.entries[public_key] = uuid

    def remove(self, public_key: str, uuid: str | None = None) -> bool:
        current = self.entries.get(public_key)
        if current is None:
            return False
        if uuid is not None and current != uuid:
            return False
        del self.entries[public_key]
        return True


__all__ = ["INDEX_KEY", "USER_KEY_PREFIX", "PublicKeyIndex", "User", "user_key"]
