"""Authentication and session management"""

from .store import SessionStore, FileKeyValueStore, MemoryKeyValueStore
from .refresh import RefreshCoordinator
from .client import AuthenticatedClient
from .service import AuthService
from .session import Session

__all__ = [
    "SessionStore",
    "FileKeyValueStore",
    "MemoryKeyValueStore",
    "RefreshCoordinator",
    "AuthenticatedClient",
    "AuthService",
    "Session",
]
