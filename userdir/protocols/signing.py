from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SignatureVerifier(Protocol):
    def parse_signature(self, signature: str) -> bytes: ...

    def verify(self, message: str, public_key: str, signature: bytes) -> bool: ...


__all__ = ["SignatureVerifier"]
