from __future__ import annotations

import pytest
from userdir.core.signing import Ed25519Signer
from userdir.directory.gate import AuthenticationGate
from userdir.directory.handlers import DirectoryHandlers
from userdir.directory.service import DirectoryService
from userdir.storage.client import StorageClient

from tests.fakes import InspectableMemoryBackend, Keypair


@pytest.fixture
def memory_backend() -> InspectableMemoryBackend:
    return InspectableMemoryBackend()


@pytest.fixture
def storage_client(memory_backend: InspectableMemoryBackend) -> StorageClient:
    return StorageClient(memory_backend)


@pytest.fixture
def service(storage_client: StorageClient) -> DirectoryService:
    return DirectoryService(storage_client)


@pytest.fixture
def signer() -> Ed25519Signer:
    return Ed25519Signer()


@pytest.fixture
def gate(service: DirectoryService, signer: Ed25519Signer) -> AuthenticationGate:
    return AuthenticationGate(service, signer)


@pytest.fixture
def handlers(service: DirectoryService, gate: AuthenticationGate) -> DirectoryHandlers:
    return DirectoryHandlers(service, gate)


@pytest.fixture
def keypair(signer: Ed25519Signer) -> Keypair:
    private_key, public_key = signer.generate_keypair()
    return Keypair(private_key=private_key, public_key=public_key)


@pytest.fixture
def other_keypair(signer: Ed25519Signer) -> Keypair:
    private_key, public_key = signer.generate_keypair()
    return Keypair(private_key=private_key, public_key=public_key)
