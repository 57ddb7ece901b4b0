import asyncio
import json
from io import BytesIO
from typing import Any, Optional

import httpx
import pytest
from openpyxl import Workbook

from auth import MemoryKeyValueStore, Session
from core.models import CredentialPair


HEADERS = [
    "MARK", "A(W1)", "B(W2)", "C(angle)", "D(length)", "Thickness", "α",
    "Volume", "AD", "UW-(Kg)", "Nos", "TOT V", "TOT KG",
]


def workbook_bytes(rows: list[list]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(row)
    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class FakeService:
    """Stand-in for the optimization service behind httpx.MockTransport"""

    def __init__(self, valid_access: str = "access-1", renewed_access: str = "access-2"):
        self.valid_access = valid_access
        self.renewed_access = renewed_access
        self.refresh_token = "refresh-1"
        self.refresh_status = 200
        self.refresh_calls = 0
        self.refresh_gate: Optional[asyncio.Event] = None
        self.refresh_body: Any = None
        self.always_reject = False
        self.requests: list[httpx.Request] = []
        self.optimize_response = {"configurations": []}
        self.upload_response = {"success": True, "data": []}
        self.upload_status = 200
        self.visualizations: dict[str, str] = {}

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="http://service.test",
            transport=httpx.MockTransport(self.handle),
        )

    def authorized(self, request: httpx.Request) -> bool:
        if self.always_reject:
            return False
        return request.headers.get("Authorization") == f"Bearer {self.valid_access}"

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/login/":
            body = json.loads(request.content)
            if body.get("password") != "secret":
                return httpx.Response(401, json={"detail": "No active account"})
            return httpx.Response(200, json={"access": self.valid_access, "refresh": self.refresh_token})

        if path == "/auth/refresh/":
            self.refresh_calls += 1
            if self.refresh_gate is not None:
                await self.refresh_gate.wait()
            body = json.loads(request.content)
            if self.refresh_status != 200 or body.get("refresh") != self.refresh_token:
                return httpx.Response(self.refresh_status if self.refresh_status != 200 else 401,
                                      json={"detail": "Token is invalid or expired"})
            if self.refresh_body is not None:
                return httpx.Response(200, json=self.refresh_body)
            self.valid_access = self.renewed_access
            return httpx.Response(200, json={"access": self.renewed_access})

        if not self.authorized(request):
            return httpx.Response(401, json={"detail": "Given token not valid"})

        if path == "/api/upload":
            return httpx.Response(self.upload_status, json=self.upload_response)
        if path == "/api/configurations/top3/":
            return httpx.Response(200, json=self.optimize_response)
        if path.startswith("/api/visualizations/"):
            name = path.rsplit("/", 1)[-1]
            if name not in self.visualizations:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, text=self.visualizations[name])
        if path == "/api/echo":
            return httpx.Response(200, json={"auth": request.headers.get("Authorization")})
        return httpx.Response(404)

    def calls_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def service() -> FakeService:
    return FakeService()


def session_kv(service: FakeService, access: str = "stale") -> MemoryKeyValueStore:
    """Persisted state of a logged-in operator"""
    return MemoryKeyValueStore({
        "isLoggedIn": "true",
        "userInitial": "O",
        "accessToken": access,
        "refreshToken": service.refresh_token,
        "username": "operator",
    })


def logged_in_session(service: FakeService, access: str = "stale") -> Session:
    """Session restored from storage, holding the given access token"""
    return Session(kv=session_kv(service, access), transport=service.client()).init()


@pytest.fixture
def pair() -> CredentialPair:
    return CredentialPair(access="a-token", refresh="r-token", subject="operator")
