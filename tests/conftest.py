"""Shared fixtures and utilities for akiclient tests.

This module provides:
- `FakeApi`, a scripted stand-in for the game API served through
  `httpx.MockTransport`, which records every call it receives
- Payload builders for the upstream response envelopes
- The `requires_live_api` decorator to skip tests that need the real API
- Shared fixtures for endpoints, groups, transports and engines
"""

import os
from typing import Any

import httpx
import pytest

from akiclient.credentials import StaticCredentials
from akiclient.models import Category, Endpoint, EndpointGroup, Language
from akiclient.session import SessionEngine
from akiclient.transport import ApiTransport


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring the live API",
    )


LIVE_API_ENABLED = bool(os.environ.get("AKICLIENT_LIVE_TESTS"))

# Skip decorator for tests that talk to the real game servers
requires_live_api = pytest.mark.skipif(
    not LIVE_API_ENABLED,
    reason="Set AKICLIENT_LIVE_TESTS=1 to run tests against the live API",
)

TEST_CREDENTIAL = "test-credential"


# =============================================================================
# Payload builders
# =============================================================================

SERVER_DOWN = {"completion": "KO - SERVER DOWN"}
NO_QUESTION = {"completion": "WARN - NO QUESTION"}


def error_payload(reason: str) -> dict[str, Any]:
    return {"completion": f"KO - {reason.upper()}"}


def step_information(
    question: str = "Is your character real?",
    step: int = 0,
    progression: float = 0.0,
) -> dict[str, Any]:
    return {
        "question": question,
        "answers": [{"answer": "Yes"}, {"answer": "No"}],
        "step": str(step),
        "progression": f"{progression:.5f}",
        "questionid": str(100 + step),
        "infogain": "0.6",
    }


def new_session_payload(
    session: str = "123",
    signature: str = "456789",
    question: str = "Is your character real?",
) -> dict[str, Any]:
    return {
        "completion": "OK",
        "parameters": {
            "identification": {
                "channel": 0,
                "session": session,
                "signature": signature,
                "challenge_auth": "abc",
            },
            "step_information": step_information(question, 0, 0.0),
        },
    }


def step_payload(
    question: str, step: int, progression: float = 10.0
) -> dict[str, Any]:
    return {
        "completion": "OK",
        "parameters": step_information(question, step, progression),
    }


def guess_element(
    guess_id: str,
    name: str,
    proba: float,
    description: str | None = "Some description",
    picture: str | None = "https://photos.example/pic.jpg",
    corrupt: bool = False,
) -> dict[str, Any]:
    return {
        "element": {
            "id": guess_id,
            "name": name,
            "proba": f"{proba:.5f}",
            "description": description,
            "absolute_picture_path": picture,
            "corrupt": "1" if corrupt else "0",
            "ranking": "100",
            "pseudo": "none",
        }
    }


def list_payload(*elements: dict[str, Any]) -> dict[str, Any]:
    return {
        "completion": "OK",
        "parameters": {
            "elements": list(elements),
            "NbObjetsPertinents": str(len(elements)),
        },
    }


# =============================================================================
# Fake API
# =============================================================================


class FakeApi:
    """Scripted game API keyed by host and route.

    Responses queued for a (host, route) pair are served in order; the last
    one keeps being served. Items may be envelope dicts, `httpx.Response`
    objects, or exceptions to raise. Hosts marked unreachable refuse every
    connection. Unscripted calls answer "server down".
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, str]]] = []
        self.unreachable: set[str] = set()
        self._responses: dict[tuple[str, str], list[Any]] = {}

    def add(self, host: str, route: str, *responses: Any) -> None:
        self._responses.setdefault((host, route), []).extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if request.url.port is not None:
            host = f"{host}:{request.url.port}"
        route = request.url.path.rstrip("/").rsplit("/", 1)[-1]
        self.calls.append((host, route, dict(request.url.params)))

        if host in self.unreachable:
            raise httpx.ConnectError("Connection refused", request=request)

        queue = self._responses.get((host, route))
        if not queue:
            return httpx.Response(200, json=SERVER_DOWN)
        item = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    def http_client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def calls_to(self, host: str, route: str | None = None) -> list[dict[str, str]]:
        return [
            params
            for call_host, call_route, params in self.calls
            if call_host == host and (route is None or call_route == route)
        ]

    def hosts_called(self) -> list[str]:
        return [host for host, _, _ in self.calls]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_api() -> FakeApi:
    """Provide an empty scripted API."""
    return FakeApi()


@pytest.fixture
def endpoint() -> Endpoint:
    return Endpoint("api-a.test", Language.ENGLISH, Category.CHARACTER)


@pytest.fixture
def group() -> EndpointGroup:
    """Three-member English character group."""
    return EndpointGroup.from_hosts(
        Language.ENGLISH,
        Category.CHARACTER,
        ["api-a.test", "api-b.test", "api-c.test"],
    )


@pytest.fixture
def credentials() -> StaticCredentials:
    return StaticCredentials(TEST_CREDENTIAL)


@pytest.fixture
def transport(fake_api: FakeApi):
    """Transport sending requests to the fake API."""
    with fake_api.http_client() as http_client:
        yield ApiTransport(http_client)


@pytest.fixture
def engine(transport: ApiTransport, credentials: StaticCredentials) -> SessionEngine:
    return SessionEngine(transport, credentials)
