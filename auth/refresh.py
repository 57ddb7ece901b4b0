"""Single-flight access token renewal"""

import asyncio
import logging
from typing import Optional

import httpx

from core.exceptions import RefreshFailure
from .store import SessionStore


logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh/"


class RefreshCoordinator:
    """
    Renews the access token, sharing one renewal among concurrent callers.

    The refresh token may rotate server-side, so two renewals in flight at
    once could invalidate the session. While a renewal is underway every
    caller awaits the same task. The task is shielded: a caller that is
    cancelled stops waiting, but the renewal still finishes for the others.
    """

    def __init__(self, store: SessionStore, transport: httpx.AsyncClient):
        self.store = store
        self.transport = transport
        self._inflight: Optional[asyncio.Task] = None

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def refresh(self, rejected: Optional[str] = None) -> str:
        """
        Get a renewed access token.

        Args:
            rejected: The access token the server just refused. If the
                store already holds a different one, it was renewed in the
                meantime and is returned without another renewal call.

        Returns:
            The new access token

        Raises:
            RefreshFailure: Renewal failed; the session has been cleared
        """
        if not self.in_flight:
            current = self.store.access
            if current is None:
                raise RefreshFailure("Not logged in")
            if rejected is not None and current != rejected:
                return current
            self._inflight = asyncio.ensure_future(self._renew())
            self._inflight.add_done_callback(_retrieve_result)

        return await asyncio.shield(self._inflight)

    async def _renew(self) -> str:
        pair = self.store.pair
        if pair is None:
            raise RefreshFailure("Session ended before token refresh")
        generation = self.store.generation
        self.store.mark_refreshing()
        logger.info("Refreshing access token")

        try:
            response = await self.transport.post(
                REFRESH_PATH, json={"refresh": pair.refresh}
            )
        except httpx.HTTPError as e:
            self._fail(generation, f"Token refresh failed: {e}")

        if response.status_code != 200:
            self._fail(
                generation,
                f"Refresh token rejected (HTTP {response.status_code})"
            )

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            self._fail(generation, "Refresh response was not a JSON object")

        access = body.get("access")
        if not isinstance(access, str) or not access:
            self._fail(generation, "Refresh response did not include an access token")

        if self.store.generation != generation:
            # Logout or a new login happened meanwhile; drop this token
            raise RefreshFailure("Session ended during token refresh")

        self.store.update(access)
        logger.info("Access token refreshed")
        return access

    def _fail(self, generation: int, message: str):
        logger.warning(message)
        if self.store.generation == generation:
            self.store.clear()
        raise RefreshFailure(message)


def _retrieve_result(task: asyncio.Task) -> None:
    # Mark the outcome as seen even when every waiter was cancelled
    if not task.cancelled():
        task.exception()
