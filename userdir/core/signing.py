from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

_KEY_LENGTH = 32
_SIGNATURE_LENGTH = 64


class Ed25519Signer:
    """Ed25519 sign/verify over UTF-8 messages with hex-encoded keys and signatures."""

    def generate_keypair(self) -> tuple[str, str]:
        private_key = Ed25519PrivateKey.generate()
        private_key_raw = private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return private_key_raw.hex(), self._public_hex(private_key)

    def sign(self, message: str, private_key_hex: str) -> str:
        private_key = self._load_private_key(private_key_hex)
        return private_key.sign(message.encode("utf-8")).hex()

    def parse_signature(self, signature: str) -> bytes:
        try:
            raw = bytes.fromhex(signature)
        except ValueError as exc:
            raise ValueError("signature is not valid hex") from exc
        if len(raw) != _SIGNATURE_LENGTH:
            raise ValueError("signature has invalid length")
        return raw

    def verify(self, message: str, public_key: str, signature: bytes) -> bool:
        try:
            public_key_raw = bytes.fromhex(public_key)
        except ValueError:
            return False
        if len(public_key_raw) != _KEY_LENGTH:
            return False

        try:
            Ed25519PublicKey.from_public_bytes(public_key_raw).verify(
                signature, message.encode("utf-8")
            )
        except InvalidSignature:
            return False
        return True

    @staticmethod
    def _public_hex(private_key: Ed25519PrivateKey) -> str:
        public_key_raw = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return public_key_raw.hex()

    @staticmethod
    def _load_private_key(private_key_hex: str) -> Ed25519PrivateKey:
        try:
            private_key_raw = bytes.fromhex(private_key_hex)
        except ValueError as exc:
            raise ValueError("private key is not valid hex") from exc
        if len(private_key_raw) != _KEY_LENGTH:
            raise ValueError("private key has invalid length")
        return Ed25519PrivateKey.from_private_bytes(private_key_raw)


__all__ = ["Ed25519Signer"]
