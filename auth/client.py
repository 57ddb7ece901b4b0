"""HTTP client that carries the session's bearer token"""

import logging
from typing import Any

import httpx

from core.exceptions import AuthError, NetworkError, SessionEndedError
from .refresh import RefreshCoordinator
from .store import SessionStore


logger = logging.getLogger(__name__)


class AuthenticatedClient:
    """
    Wraps an httpx.AsyncClient and authenticates every call.

    A 401 triggers one coordinated token refresh and one retry. A second
    401 on the retry is terminal: the session is cleared and AuthError is
    raised. Any other status is returned to the caller untouched.
    """

    def __init__(
        self,
        store: SessionStore,
        transport: httpx.AsyncClient,
        coordinator: RefreshCoordinator = None
    ):
        self.store = store
        self.transport = transport
        self.coordinator = coordinator or RefreshCoordinator(store, transport)

    async def request(
        self,
        method: str,
        url: str,
        operation: str = None,
        **kwargs: Any
    ) -> httpx.Response:
        """
        Send an authenticated request
        
        Args:
            method: HTTP method
            url: Path relative to the service base URL
            operation: Name used in error messages (defaults to the URL)
            **kwargs: Passed through to httpx

        Returns:
            The response of the first attempt, or of the single retry

        Raises:
            AuthError: Not logged in, refresh failed, or retry rejected
            SessionEndedError: Session was cleared while the call ran
            NetworkError: Transport failure
        """
        operation = operation or url
        token = self.store.access
        if token is None:
            raise AuthError("Please login first")
        generation = self.store.generation

        response = await self._send(method, url, token, operation, **kwargs)
        self._check_generation(generation, operation)

        if response.status_code != httpx.codes.UNAUTHORIZED:
            return response

        logger.info("%s rejected with 401, refreshing token", operation)
        token = await self.coordinator.refresh(rejected=token)
        self._check_generation(generation, operation)

        response = await self._send(method, url, token, operation, **kwargs)
        self._check_generation(generation, operation)

        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("%s rejected again after refresh", operation)
            self.store.clear()
            raise AuthError("Authentication failed. Please login again.")

        return response

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    async def _send(
        self,
        method: str,
        url: str,
        token: str,
        operation: str,
        **kwargs: Any
    ) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {token}"
        try:
            return await self.transport.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or type(e).__name__, operation) from e

    def _check_generation(self, generation: int, operation: str) -> None:
        if self.store.generation != generation:
            raise SessionEndedError(f"{operation}: session ended while the request was running")
