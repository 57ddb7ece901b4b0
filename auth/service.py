"""Authentication service"""

import logging
from typing import Optional

import httpx

from core.exceptions import AuthError, NetworkError, UpstreamError
from core.models import CredentialPair
from .store import SessionStore


logger = logging.getLogger(__name__)

LOGIN_PATH = "/auth/login/"


class AuthService:
    """Logs the operator in and out of the optimization service"""
    
    def __init__(self, store: SessionStore, transport: httpx.AsyncClient):
        self.store = store
        self.transport = transport
    
    async def login(self, username: str, password: str) -> CredentialPair:
        """
        Authenticate and establish a session
        
        Args:
            username: Account name
            password: Account password
            
        Returns:
            The new credential pair
            
        Raises:
            AuthError: Credentials refused
            NetworkError: Service unreachable
            UpstreamError: Unexpected response
        """
        if not username or not password:
            raise AuthError("Username and password are required")
        
        self.store.begin_authentication()
        try:
            pair = await self._request_tokens(username, password)
        except Exception:
            self.store.abort_authentication()
            raise
        
        self.store.establish(pair)
        return pair
    
    async def _request_tokens(self, username: str, password: str) -> CredentialPair:
        try:
            response = await self.transport.post(
                LOGIN_PATH,
                json={"username": username, "password": password}
            )
        except httpx.HTTPError as e:
            raise NetworkError(str(e) or type(e).__name__, "login") from e
        
        if response.status_code in (httpx.codes.BAD_REQUEST, httpx.codes.UNAUTHORIZED):
            raise AuthError("Invalid username or password")
        if response.status_code != httpx.codes.OK:
            raise UpstreamError(
                f"Login failed: HTTP {response.status_code}",
                operation="login",
                status_code=response.status_code,
                detail=response.text
            )
        
        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("Login response was not JSON", operation="login") from e
        
        access = body.get("access")
        refresh = body.get("refresh")
        if not access or not refresh:
            raise UpstreamError("Login response is missing tokens", operation="login")
        
        return CredentialPair(access=access, refresh=refresh, subject=username)
    
    def logout(self) -> None:
        """Drop the session locally"""
        self.store.clear()
    
    def whoami(self) -> Optional[str]:
        """Current username, if logged in"""
        return self.store.subject
