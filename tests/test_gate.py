from __future__ import annotations

import time

import pytest
from userdir.core.signing import Ed25519Signer
from userdir.directory.gate import AuthenticationGate, canonical_message
from userdir.directory.service import DirectoryService
from userdir.errors import AuthError, NotFoundError
from userdir.models.users import user_key
from userdir.storage.client import StorageClient

from tests.fakes import FlakyBackend, Keypair, RaisingVerifier


def test_canonical_message_concatenates_without_delimiters() -> None:
    assert canonical_message("1700000000", "abc-123", "h2") == "1700000000abc-123h2"
    assert canonical_message(" 1", "u ", " p") == " 1u  p"


class TestAuthorize:
    async def test_valid_signature_returns_stored_user(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        signer: Ed25519Signer,
        keypair: Keypair,
    ) -> None:
        user = await service.create_user(keypair.public_key, "h1")
        signature = signer.sign(canonical_message("100", user.uuid, "h2"), keypair.private_key)

        assert await gate.authorize("100", user.uuid, "h2", signature) == user

    async def test_signature_from_other_key_is_rejected(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        signer: Ed25519Signer,
        keypair: Keypair,
        other_keypair: Keypair,
    ) -> None:
        user = await service.create_user(keypair.public_key, "h1")
        signature = signer.sign(
            canonical_message("100", user.uuid, "h2"), other_keypair.private_key
        )

        with pytest.raises(AuthError):
            await gate.authorize("100", user.uuid, "h2", signature)

    async def test_message_fields_are_bound_by_signature(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        signer: Ed25519Signer,
        keypair: Keypair,
    ) -> None:
        user = await service.create_user(keypair.public_key, "h1")
        signature = signer.sign(canonical_message("100", user.uuid, "h2"), keypair.private_key)

        with pytest.raises(AuthError):
            await gate.authorize("101", user.uuid, "h2", signature)
        with pytest.raises(AuthError):
            await gate.authorize("100", user.uuid, "h3", signature)

    @pytest.mark.parametrize("signature", ["", "zz-not-hex", "abcd", "00" * 63])
    async def test_malformed_signature_collapses_to_auth_error(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        keypair: Keypair,
        signature: str,
    ) -> None:
        user = await service.create_user(keypair.public_key, "h1")

        with pytest.raises(AuthError) as excinfo:
            await gate.authorize("100", user.uuid, "h2", signature)
        assert str(excinfo.value) == "Unauthorized"

    async def test_mismatch_and_malformed_errors_are_indistinguishable(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        signer: Ed25519Signer,
        keypair: Keypair,
        other_keypair: Keypair,
    ) -> None:
        user = await service.create_user(keypair.public_key, "h1")
        wrong = signer.sign(canonical_message("1", user.uuid, "p"), other_keypair.private_key)

        with pytest.raises(AuthError) as mismatch:
            await gate.authorize("1", user.uuid, "p", wrong)
        with pytest.raises(AuthError) as malformed:
            await gate.authorize("1", user.uuid, "p", "not-a-signature")

        assert type(mismatch.value) is type(malformed.value)
        assert mismatch.value.public_message == malformed.value.public_message

    async def test_missing_user_raises_not_found(
        self, gate: AuthenticationGate, signer: Ed25519Signer, keypair: Keypair
    ) -> None:
        signature = signer.sign(canonical_message("1", "ghost", "p"), keypair.private_key)

        with pytest.raises(NotFoundError):
            await gate.authorize("1", "ghost", "p", signature)

    async def test_stored_key_that_is_not_a_key_is_rejected(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        signer: Ed25519Signer,
        keypair: Keypair,
    ) -> None:
        user = await service.create_user("not-a-public-key", "h1")
        signature = signer.sign(canonical_message("1", user.uuid, "p"), keypair.private_key)

        with pytest.raises(AuthError):
            await gate.authorize("1", user.uuid, "p", signature)

    async def test_verifier_crash_is_auth_error(self, service: DirectoryService) -> None:
        user = await service.create_user("pk", "h1")
        gate = AuthenticationGate(service, RaisingVerifier())

        with pytest.raises(AuthError):
            await gate.authorize("1", user.uuid, "p", "sig")

    async def test_storage_failure_during_lookup_is_auth_error(self) -> None:
        backend = FlakyBackend(failing_get_keys={user_key("u-1")})
        service = DirectoryService(StorageClient(backend))
        gate = AuthenticationGate(service, Ed25519Signer())

        with pytest.raises(AuthError):
            await gate.authorize("1", "u-1", "p", "00" * 64)


class TestFreshnessWindow:
    async def test_recent_timestamp_is_accepted(
        self, service: DirectoryService, signer: Ed25519Signer, keypair: Keypair
    ) -> None:
        gate = AuthenticationGate(service, signer, max_signature_age_s=60)
        user = await service.create_user(keypair.public_key, "h1")
        timestamp = str(int(time.time()))
        signature = signer.sign(canonical_message(timestamp, user.uuid, "p"), keypair.private_key)

        assert await gate.authorize(timestamp, user.uuid, "p", signature) == user

    @pytest.mark.parametrize("timestamp", ["1000", "yesterday"])
    async def test_stale_or_non_numeric_timestamp_is_rejected(
        self,
        service: DirectoryService,
        signer: Ed25519Signer,
        keypair: Keypair,
        timestamp: str,
    ) -> None:
        gate = AuthenticationGate(service, signer, max_signature_age_s=60)
        user = await service.create_user(keypair.public_key, "h1")
        signature = signer.sign(canonical_message(timestamp, user.uuid, "p"), keypair.private_key)

        with pytest.raises(AuthError):
            await gate.authorize(timestamp, user.uuid, "p", signature)

    async def test_window_disabled_accepts_old_timestamp(
        self,
        service: DirectoryService,
        gate: AuthenticationGate,
        signer: Ed25519Signer,
        keypair: Keypair,
    ) -> None:
        user = await service.create_user(keypair.public_key, "h1")
        signature = signer.sign(canonical_message("1000", user.uuid, "p"), keypair.private_key)

        assert await gate.authorize("1000", user.uuid, "p", signature) == user
