from __future__ import annotations

import json

from userdir.errors import SerializationError
from userdir.protocols.storage import Document


def encode_document(value: Document) -> str:
    try:
        return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError("Document is not JSON-serializable") from exc


def decode_document(raw: str | bytes) -> Document:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SerializationError("Stored document is not valid UTF-8") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SerializationError("Stored document is not valid JSON") from exc


__all__ = ["decode_document", "encode_document"]
