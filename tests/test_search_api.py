"""Tests for GET /api/search: query validation and relaying the NZBGeek response."""

import logging
import os
from collections.abc import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient

# Set env before importing app so pydantic-settings picks them up.
os.environ.setdefault("NZBGEEK_API_KEY", "test-api-key")

from app.main import app, get_nzbgeek_client
from app.nzbgeek import NzbGeekClient

client = TestClient(app)

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def upstream() -> Iterator[Callable[[Handler], list[httpx.Request]]]:
    """Install a fake upstream; returns the list of requests it received."""

    def install(handler: Handler) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def recording(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        fake = NzbGeekClient(
            api_key="test-api-key",
            transport=httpx.MockTransport(recording),
        )
        app.dependency_overrides[get_nzbgeek_client] = lambda: fake
        return seen

    yield install
    app.dependency_overrides.pop(get_nzbgeek_client, None)


def test_search_without_q_returns_400_and_skips_upstream(upstream) -> None:
    seen = upstream(lambda request: httpx.Response(200, json={}))
    response = client.get("/api/search")
    assert response.status_code == 400
    assert response.json() == {"error": "Missing query parameter `q`"}
    assert len(seen) == 0


def test_search_with_empty_q_returns_400(upstream) -> None:
    seen = upstream(lambda request: httpx.Response(200, json={}))
    response = client.get("/api/search", params={"q": ""})
    assert response.status_code == 400
    assert response.json() == {"error": "Missing query parameter `q`"}
    assert len(seen) == 0


def test_search_returns_upstream_body_exactly(upstream) -> None:
    seen = upstream(lambda request: httpx.Response(200, json={"results": []}))
    response = client.get("/api/search", params={"q": "test"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"results": []}
    assert len(seen) == 1


def test_search_outbound_url_carries_query_and_fixed_params(upstream) -> None:
    seen = upstream(lambda request: httpx.Response(200, json={"results": []}))
    client.get("/api/search", params={"q": "big buck bunny & friends"})
    assert len(seen) == 1
    url = seen[0].url
    assert url.host == "api.nzbgeek.info"
    assert url.path == "/api"
    assert url.params["t"] == "search"
    assert url.params["q"] == "big buck bunny & friends"
    assert url.params["apikey"] == "test-api-key"
    assert "limit=200&extended=1&o=json" in str(url)


def test_search_network_error_returns_500(upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    upstream(handler)
    response = client.get("/api/search", params={"q": "test"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch from NZBgeek"}


def test_search_non_json_upstream_returns_500(upstream) -> None:
    upstream(lambda request: httpx.Response(502, text="Bad Gateway"))
    response = client.get("/api/search", params={"q": "test"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch from NZBgeek"}


def test_search_timeout_returns_500(upstream) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    upstream(handler)
    response = client.get("/api/search", params={"q": "test"})
    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch from NZBgeek"}


def test_search_does_not_log_api_key(upstream, caplog: pytest.LogCaptureFixture) -> None:
    """The outbound URL carries the key; no log record may repeat it."""
    upstream(lambda request: httpx.Response(200, json={"results": []}))
    with caplog.at_level(logging.DEBUG):
        response = client.get("/api/search", params={"q": "test"})
    assert response.status_code == 200
    assert "test-api-key" not in caplog.text
    assert "apikey=" not in caplog.text


def test_search_failure_does_not_log_api_key(upstream, caplog: pytest.LogCaptureFixture) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"could not reach {request.url}", request=request)

    upstream(handler)
    with caplog.at_level(logging.DEBUG):
        response = client.get("/api/search", params={"q": "test"})
    assert response.status_code == 500
    assert "test-api-key" not in caplog.text
