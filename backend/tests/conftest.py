from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from app.main import app, lifespan

TEST_BASE_URL = "http://upstream.test/api/v1"

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    return json.loads((FIXTURES_DIR / name).read_text(encoding="utf-8"))


def mock_response(status: int = 200, raw: bytes = b"", reason: str | None = None) -> MagicMock:
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.read = AsyncMock(return_value=raw)
    return response


class FakeUpstream:
    """Stands in for ``aiohttp.ClientSession``, answering by (method, url)."""

    def __init__(self, base_url: str = TEST_BASE_URL) -> None:
        self.base_url = base_url
        self.routes: dict[tuple[str, str], MagicMock | BaseException] = {}
        self.calls: list[tuple[str, str, Any]] = []
        self.sessions: list[dict[str, Any]] = []

    def reply(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        status: int = 200,
        reason: str | None = None,
    ) -> None:
        if body is None:
            raw = b""
        elif isinstance(body, bytes):
            raw = body
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        else:
            raw = json.dumps(body).encode("utf-8")
        self.routes[(method, self.base_url + endpoint)] = mock_response(status, raw, reason)

    def fail(self, method: str, endpoint: str, exc: BaseException) -> None:
        self.routes[(method, self.base_url + endpoint)] = exc

    def calls_for(self, method: str) -> list[tuple[str, str, Any]]:
        return [c for c in self.calls if c[0] == method]

    def _request(self, method: str, url: str, json: Any = None) -> AsyncMock:
        self.calls.append((method, url, json))
        outcome = self.routes.get((method, url))
        if outcome is None:
            outcome = mock_response(404, b'{"status":"error","message":"Route not mocked"}', "Not Found")

        context = AsyncMock()
        if isinstance(outcome, BaseException):
            context.__aenter__.side_effect = outcome
        else:
            context.__aenter__.return_value = outcome
        context.__aexit__.return_value = None
        return context

    def session_factory(self, *args: Any, **kwargs: Any) -> AsyncMock:
        self.sessions.append(kwargs)
        session = MagicMock()
        session.request.side_effect = self._request

        client_session = AsyncMock()
        client_session.__aenter__.return_value = session
        client_session.__aexit__.return_value = None
        return client_session


@pytest.fixture(autouse=True)
def _upstream_settings():
    from app.core.config import settings

    original_base_url = settings.API_BASE_URL
    settings.API_BASE_URL = TEST_BASE_URL
    yield
    settings.API_BASE_URL = original_base_url


@pytest.fixture
def fake_upstream():
    upstream = FakeUpstream()
    with patch(
        "app.services.upstream_client.aiohttp.ClientSession",
        side_effect=upstream.session_factory,
    ):
        yield upstream


@pytest.fixture
def all_employees_json() -> dict[str, Any]:
    return load_fixture("all-employees.json")


@pytest.fixture
def single_employee_json() -> dict[str, Any]:
    return load_fixture("single-employee.json")


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with lifespan(app):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()
