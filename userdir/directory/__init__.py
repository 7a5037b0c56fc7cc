from userdir.directory.gate import AuthenticationGate, canonical_message
from userdir.directory.handlers import DirectoryHandlers
from userdir.directory.service import DirectoryService

__all__ = [
    "AuthenticationGate",
    "DirectoryHandlers",
    "DirectoryService",
    "canonical_message",
]
