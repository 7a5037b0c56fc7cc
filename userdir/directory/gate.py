"""Signature gate in front of mutating directory operations."""

from __future__ import annotations

import logging
import time

from userdir.directory.service import DirectoryService
from userdir.errors import AuthError, NotFoundError, StorageError
from userdir.models.users import User
from userdir.protocols.signing import SignatureVerifier

logger = logging.getLogger(__name__)


def canonical_message(timestamp: str, uuid: str, payload: str) -> str:
    """Signed bytes are timestamp, uuid and payload concatenated with no separator."""
    return f"{timestamp}{uuid}{payload}"


class AuthenticationGate:
    """Verifies a request signature against the target user's stored public key.

    A malformed signature and a signature that does not verify both raise
    the same ``AuthError``. A missing user raises ``NotFoundError``.
    """

    def __init__(
        self,
        service: DirectoryService,
        verifier: SignatureVerifier,
        max_signature_age_s: float | None = None,
    ) -> None:
        self._service = service
        self._verifier = verifier
        self._max_signature_age_s = max_signature_age_s

    async def authorize(self, timestamp: str, uuid: str, payload: str, signature: str) -> User:
        message = canonical_message(timestamp, uuid, payload)

        try:
            parsed_signature = self._verifier.parse_signature(signature)
        except ValueError as exc:
            logger.warning("Rejected request for %s: unparseable signature", uuid)
            raise AuthError() from exc

        try:
            user = await self._service.get_user(uuid)
        except StorageError as exc:
            logger.warning("Rejected request for %s: user lookup failed", uuid)
            raise AuthError() from exc
        if user is None:
            raise NotFoundError(f"User {uuid} not found")

        self._check_freshness(timestamp, uuid)

        try:
            verified = self._verifier.verify(message, user.public_key, parsed_signature)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Rejected request for %s: verifier error", uuid)
            raise AuthError() from exc
        if not verified:
            logger.warning("Rejected request for %s: signature mismatch", uuid)
            raise AuthError()
        return user

    def _check_freshness(self, timestamp: str, uuid: str) -> None:
        if self._max_signature_age_s is None:
            return
        try:
            signed_at = int(timestamp)
        except ValueError as exc:
            logger.warning("Rejected request for %s: non-numeric timestamp", uuid)
            raise AuthError() from exc
        if abs(time.time() - signed_at) > self._max_signature_age_s:
            logger.warning("Rejected request for %s: stale timestamp", uuid)
            raise AuthError()


__all__ = ["AuthenticationGate", "canonical_message"]
