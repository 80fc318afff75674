# tests/test_graph_client.py
from http import HTTPStatus
from typing import Any, Dict, Optional

import httpx
import pytest

from meeting_days.services import graph_client as graph_client_module
from meeting_days.services.graph_client import (
    GraphAuthError,
    GraphClient,
    GraphClientError,
    GraphNotConfiguredError,
    GraphThrottledError,
)


class _FakeResponse:
    def __init__(self, status_code: int, json_data: Dict[str, Any]):
        self.status_code = status_code
        self._json_data = json_data
        # For error messages
        self.text = str(json_data)

    def json(self) -> Dict[str, Any]:
        return self._json_data


class _FakeAsyncClient:
    """
    Minimal stand-in for httpx.AsyncClient used in tests.

    Captures method/url/headers and returns predictable responses without
    real I/O.
    """

    last_request: Dict[str, Any] = {}
    token_call_count: int = 0
    graph_call_count: int = 0
    graph_status: int = HTTPStatus.OK

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    async def __aenter__(self) -> "_FakeAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def post(self, url: str, data: Optional[Dict[str, Any]] = None, **kwargs) -> _FakeResponse:
        _FakeAsyncClient.last_request = {"method": "POST", "url": url, "data": data}
        _FakeAsyncClient.token_call_count += 1

        return _FakeResponse(
            status_code=HTTPStatus.OK,
            json_data={
                "access_token": "fake-token-123",
                "expires_in": 300,
                "token_type": "Bearer",
            },
        )

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> _FakeResponse:
        _FakeAsyncClient.last_request = {
            "method": method,
            "url": url,
            "headers": headers,
            "params": params,
        }
        _FakeAsyncClient.graph_call_count += 1

        if _FakeAsyncClient.graph_status != HTTPStatus.OK:
            return _FakeResponse(
                status_code=_FakeAsyncClient.graph_status,
                json_data={"error": {"code": "failure"}},
            )
        return _FakeResponse(status_code=HTTPStatus.OK, json_data={"ok": True, "value": []})


@pytest.fixture
def fake_httpx(monkeypatch):
    _FakeAsyncClient.last_request = {}
    _FakeAsyncClient.token_call_count = 0
    _FakeAsyncClient.graph_call_count = 0
    _FakeAsyncClient.graph_status = HTTPStatus.OK
    monkeypatch.setattr(httpx, "AsyncClient", _FakeAsyncClient)
    return _FakeAsyncClient


def _client(**kwargs) -> GraphClient:
    return GraphClient(
        tenant_id="tenant-123",
        client_id="client-123",
        client_secret="secret-xyz",
        **kwargs,
    )


def test_graph_client_requires_credentials():
    with pytest.raises(ValueError):
        GraphClient(tenant_id="", client_id="client", client_secret="secret")


@pytest.mark.asyncio
async def test_graph_client_fetches_and_caches_token(fake_httpx):
    """
    First call to get_access_token() should hit the token endpoint.
    Subsequent calls within the expiry window reuse the cached token.
    """
    client = _client()

    token1 = await client.get_access_token()
    token2 = await client.get_access_token()

    assert token1 == token2 == "fake-token-123"
    assert fake_httpx.token_call_count == 1
    assert fake_httpx.last_request["url"] == (
        "https://login.microsoftonline.com/tenant-123/oauth2/v2.0/token"
    )
    assert fake_httpx.last_request["data"]["grant_type"] == "client_credentials"


@pytest.mark.asyncio
async def test_get_json_builds_correct_url_and_headers(fake_httpx):
    client = _client(base_url="https://graph.microsoft.com/")

    data = await client.get_json("/v1.0/users/someone/calendarView", params={"$top": 5})

    assert data["ok"] is True
    last = fake_httpx.last_request
    assert last["method"].upper() == "GET"
    assert last["url"] == "https://graph.microsoft.com/v1.0/users/someone/calendarView"
    assert last["params"] == {"$top": 5}
    assert last["headers"]["Authorization"] == "Bearer fake-token-123"


@pytest.mark.asyncio
async def test_get_json_passes_absolute_urls_through(fake_httpx):
    client = _client()
    next_link = "https://graph.microsoft.com/v1.0/users/x/calendarView?$skiptoken=abc"

    await client.get_json(next_link)

    assert fake_httpx.last_request["url"] == next_link


@pytest.mark.asyncio
async def test_bad_token_response_raises_auth_error(monkeypatch):
    class _BadTokenClient(_FakeAsyncClient):
        async def post(self, url: str, data=None, **kwargs) -> _FakeResponse:
            return _FakeResponse(
                status_code=HTTPStatus.BAD_REQUEST,
                json_data={"error": "invalid_client"},
            )

    monkeypatch.setattr(httpx, "AsyncClient", _BadTokenClient)

    with pytest.raises(GraphAuthError):
        await _client().get_access_token()


@pytest.mark.asyncio
async def test_token_response_without_access_token_raises(monkeypatch):
    class _EmptyTokenClient(_FakeAsyncClient):
        async def post(self, url: str, data=None, **kwargs) -> _FakeResponse:
            return _FakeResponse(status_code=HTTPStatus.OK, json_data={"token_type": "Bearer"})

    monkeypatch.setattr(httpx, "AsyncClient", _EmptyTokenClient)

    with pytest.raises(GraphClientError):
        await _client().get_access_token()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status,error_type",
    [
        (HTTPStatus.UNAUTHORIZED, GraphAuthError),
        (HTTPStatus.FORBIDDEN, GraphAuthError),
        (HTTPStatus.TOO_MANY_REQUESTS, GraphThrottledError),
        (HTTPStatus.INTERNAL_SERVER_ERROR, GraphClientError),
    ],
)
async def test_get_json_maps_error_statuses(fake_httpx, status, error_type):
    fake_httpx.graph_status = status

    with pytest.raises(error_type) as exc_info:
        await _client().get_json("/v1.0/users/x/calendarView")

    assert exc_info.value.status_code == status


@pytest.mark.asyncio
async def test_forbidden_message_mentions_permissions(fake_httpx):
    fake_httpx.graph_status = HTTPStatus.FORBIDDEN

    with pytest.raises(GraphAuthError, match="Insufficient permissions"):
        await _client().get_json("/v1.0/users/x/calendarView")


@pytest.mark.asyncio
async def test_network_failure_becomes_graph_client_error(fake_httpx, monkeypatch):
    async def _boom(self, *args, **kwargs):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(_FakeAsyncClient, "request", _boom)

    with pytest.raises(GraphClientError, match="Network error"):
        await _client().get_json("/v1.0/users/x/calendarView")


def test_get_graph_client_without_settings_raises(monkeypatch):
    class DummySettings:
        GRAPH_TENANT_ID = None
        GRAPH_CLIENT_ID = None
        GRAPH_CLIENT_SECRET = None

    monkeypatch.setattr(graph_client_module, "_graph_client_instance", None)
    monkeypatch.setattr(graph_client_module, "get_settings", lambda: DummySettings())

    with pytest.raises(GraphNotConfiguredError):
        graph_client_module.get_graph_client()
