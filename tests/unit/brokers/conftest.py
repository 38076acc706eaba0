"""Pytest fixtures for Schwab broker unit tests"""

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from schwabweb.infrastructure.brokers.schwab import (
    SchwabClient,
    build_credential_bundle,
)


@dataclass
class _Reply:
    status_code: int = 200
    json: Any = None
    text: str | None = None


@dataclass
class MockSchwabAPI:
    """Routes mocked requests by URL fragment and records every request

    Each fragment holds a queue of replies; the last reply is reused once
    the queue is down to one entry. Unrouted requests get a 404.
    """

    routes: dict[str, list[_Reply]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def add(
        self,
        fragment: str,
        status_code: int = 200,
        json: Any = None,
        text: str | None = None,
    ) -> None:
        self.routes.setdefault(fragment, []).append(
            _Reply(status_code=status_code, json=json, text=text)
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for fragment, replies in self.routes.items():
            if fragment in str(request.url):
                reply = replies.pop(0) if len(replies) > 1 else replies[0]
                if reply.text is not None:
                    return httpx.Response(reply.status_code, text=reply.text)
                return httpx.Response(reply.status_code, json=reply.json)
        return httpx.Response(404, text="no route")

    def requests_to(self, fragment: str) -> list[httpx.Request]:
        return [r for r in self.requests if fragment in str(r.url)]

    def json_bodies(self, fragment: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests_to(fragment)]


@pytest.fixture
def api() -> MockSchwabAPI:
    """Mocked Schwab endpoints with a working token refresh"""
    mock_api = MockSchwabAPI()
    mock_api.add("authorize/scope", json={"token": "fresh-token"})
    return mock_api


@pytest.fixture
def logged_in_bundle(captured_headers):
    return build_credential_bundle(captured_headers, "SESSION=abc; TOKEN=def")


@pytest.fixture
def make_client(api, logged_in_bundle):
    """Factory for clients wired to the mocked API with a captured session"""

    def _make(**kwargs) -> SchwabClient:
        client = SchwabClient(**kwargs)
        client.credentials.replace(logged_in_bundle)
        http_client = client.request_client._build_http_client(
            timeout=5, transport=httpx.MockTransport(api.handler)
        )
        client.set_http_client(http_client)
        return client

    return _make


@pytest.fixture
def client(make_client) -> SchwabClient:
    return make_client()
