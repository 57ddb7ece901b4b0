"""Process-wide session wiring"""

from typing import Optional

import httpx

from config import settings
from core.enums import SessionState
from core.interfaces import KeyValueStore
from .client import AuthenticatedClient
from .refresh import RefreshCoordinator
from .service import AuthService
from .store import FileKeyValueStore, SessionStore


class Session:
    """
    Everything that shares the credential pair: the store, the refresh
    coordinator, the authenticated client and the login service.

    Create one per running client and pass it to whatever needs to talk
    to the service.
    """

    def __init__(
        self,
        kv: Optional[KeyValueStore] = None,
        transport: Optional[httpx.AsyncClient] = None,
        base_url: Optional[str] = None
    ):
        self.store = SessionStore(kv or FileKeyValueStore(settings.get_session_path()))
        self.transport = transport or httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=settings.API_TIMEOUT,
        )
        self.coordinator = RefreshCoordinator(self.store, self.transport)
        self.client = AuthenticatedClient(self.store, self.transport, self.coordinator)
        self.auth = AuthService(self.store, self.transport)

    @property
    def state(self) -> SessionState:
        return self.store.state

    def init(self) -> "Session":
        """Restore a persisted session, if a complete one exists"""
        self.store.restore()
        return self

    def teardown(self) -> None:
        """Log out: clear credentials and every persisted key"""
        self.store.clear()

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "Session":
        return self.init()

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
