"""Tests for the authenticated podcast API client."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from tests.helpers import json_response
from xyzmcp.core.auth import RefreshFailedError, UnauthenticatedError
from xyzmcp.core.client import XiaoyuzhouAPIError, XiaoyuzhouClient, create_http_client
from xyzmcp.core.client.headers import authenticated_headers
from xyzmcp.models.config import ClientConfig
from xyzmcp.models.requests import EpisodeLoadMoreKey, SearchLoadMoreKey

CONFIG = ClientConfig()


class StaticTokens:
    def __init__(self, token: str = "A1", error: Exception | None = None) -> None:
        self.token = token
        self.error = error
        self.calls = 0

    def get_valid_access_token(self) -> str:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.token


class Recorder:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.response = response or json_response({"data": {"ok": True}})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    def body(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)


def _client(recorder: Recorder, tokens: StaticTokens | None = None) -> XiaoyuzhouClient:
    http = create_http_client(CONFIG, transport=httpx.MockTransport(recorder))
    return XiaoyuzhouClient(tokens or StaticTokens(), http, CONFIG)


# --- Authentication ---

def test_requests_carry_current_access_token() -> None:
    recorder = Recorder()
    tokens = StaticTokens("A7")
    _client(recorder, tokens).get_podcast_details("p-1")

    request = recorder.requests[0]
    assert tokens.calls == 1
    assert request.headers["x-jike-access-token"] == "A7"
    assert request.headers["x-jike-device-id"] == CONFIG.device_id
    assert request.headers["Timezone"] == "Asia/Shanghai"


@pytest.mark.parametrize(
    "error",
    [UnauthenticatedError("no credential"), RefreshFailedError("refresh rejected")],
)
def test_token_failure_prevents_http_call(error: Exception) -> None:
    recorder = Recorder()
    client = _client(recorder, StaticTokens(error=error))
    with pytest.raises(type(error)):
        client.search_podcasts("news")
    assert recorder.requests == []


def test_authenticated_headers_use_configured_timezone() -> None:
    headers = authenticated_headers(CONFIG, "A1", json_body=True)
    assert headers["Local-Time"].endswith("+08:00")
    assert headers["Content-Type"] == "application/json"


# --- Endpoints ---

@pytest.mark.parametrize(
    ("method_name", "arg", "path", "param"),
    [
        ("get_user_profile", "u-1", "/v1/profile/get", ("uid", "u-1")),
        ("get_user_stats", "u-1", "/v1/user-stats/get", ("uid", "u-1")),
        ("get_podcast_details", "p-1", "/v1/podcast/get", ("pid", "p-1")),
        ("get_episode_details", "e-1", "/v1/episode/get", ("eid", "e-1")),
    ],
)
def test_get_endpoints_unwrap_data(method_name: str, arg: str, path: str, param: tuple[str, str]) -> None:
    recorder = Recorder(json_response({"data": {"id": arg}}))
    result = getattr(_client(recorder), method_name)(arg)

    request = recorder.requests[0]
    assert request.method == "GET"
    assert request.url.path == path
    assert request.url.params[param[0]] == param[1]
    assert result == {"id": arg}


def test_empty_identifier_is_rejected_before_any_request() -> None:
    recorder = Recorder()
    tokens = StaticTokens()
    with pytest.raises(ValueError):
        _client(recorder, tokens).get_episode_details("")
    assert recorder.requests == []
    assert tokens.calls == 0


def test_list_episodes_default_body() -> None:
    recorder = Recorder(json_response({"data": [], "loadMoreKey": None}))
    result = _client(recorder).list_podcast_episodes("p-1")

    assert recorder.requests[0].url.path == "/v1/episode/list"
    assert recorder.body() == {"pid": "p-1", "order": "desc", "limit": 20}
    assert result == {"data": [], "loadMoreKey": None}


def test_list_episodes_with_load_more_key() -> None:
    recorder = Recorder()
    key = EpisodeLoadMoreKey(direction="NEXT", pub_date="2024-01-01T00:00:00Z", id="e-9")
    _client(recorder).list_podcast_episodes("p-1", order="asc", load_more_key=key)

    assert recorder.body() == {
        "pid": "p-1",
        "order": "asc",
        "limit": 20,
        "loadMoreKey": {"direction": "NEXT", "pubDate": "2024-01-01T00:00:00Z", "id": "e-9"},
    }


def test_list_episodes_ignores_empty_load_more_key() -> None:
    recorder = Recorder()
    _client(recorder).list_podcast_episodes("p-1", load_more_key=EpisodeLoadMoreKey())
    assert "loadMoreKey" not in recorder.body()


def test_search_episodes_within_podcast() -> None:
    recorder = Recorder(
        json_response(
            {"data": [{"eid": "e-1"}], "highlightWord": {"words": ["ai"]}, "loadMoreKey": {"loadMoreKey": 20}}
        )
    )
    result = _client(recorder).search_episodes("ai", pid="p-1")

    assert recorder.requests[0].url.path == "/v1/search/create"
    assert recorder.body() == {"keyword": "ai", "type": "EPISODE", "pid": "p-1"}
    assert result == {
        "data": [{"eid": "e-1"}],
        "highlightWord": {"words": ["ai"]},
        "loadMoreKey": {"loadMoreKey": 20},
    }


def test_search_with_pagination_sends_both_keys() -> None:
    recorder = Recorder(json_response({}))
    key = SearchLoadMoreKey(search_id="s-1")
    result = _client(recorder).search_users("alice", load_more_key=key)

    assert recorder.body() == {
        "keyword": "alice",
        "type": "USER",
        "loadMoreKey": {"loadMoreKey": None, "searchId": "s-1"},
    }
    assert result == {"data": [], "highlightWord": None, "loadMoreKey": None}


def test_search_podcasts_omits_pid() -> None:
    recorder = Recorder()
    _client(recorder).search_podcasts("news")
    assert recorder.body() == {"keyword": "news", "type": "PODCAST"}


# --- Upstream failures ---

def test_non_200_is_api_error() -> None:
    recorder = Recorder(httpx.Response(401, text="token expired"))
    with pytest.raises(XiaoyuzhouAPIError) as excinfo:
        _client(recorder).get_user_profile("u-1")
    assert excinfo.value.status_code == 401
    assert excinfo.value.operation == "GetUserProfile"


def test_non_json_body_is_api_error() -> None:
    recorder = Recorder(httpx.Response(200, text="not json"))
    with pytest.raises(XiaoyuzhouAPIError):
        _client(recorder).get_user_stats("u-1")


def test_network_failure_is_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    http = create_http_client(CONFIG, transport=httpx.MockTransport(handler))
    client = XiaoyuzhouClient(StaticTokens(), http, CONFIG)
    with pytest.raises(XiaoyuzhouAPIError, match="HTTP request failed"):
        client.get_podcast_details("p-1")
