"""Authenticated podcast API operations.

Every operation obtains a token from the ``AccessTokenProvider`` before it
builds its request. If the provider fails, the operation fails with the same
error and no HTTP call is made.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from xyzmcp.core.client.headers import authenticated_headers
from xyzmcp.core.client.http import XiaoyuzhouAPIError, parse_json, send
from xyzmcp.models.config import ClientConfig
from xyzmcp.models.requests import (
    EpisodeListRequest,
    EpisodeLoadMoreKey,
    SearchLoadMoreKey,
    SearchRequest,
    SearchType,
)

logger = logging.getLogger(__name__)


class AccessTokenProvider(Protocol):
    def get_valid_access_token(self) -> str: ...


class XiaoyuzhouClient:
    """Client for the authenticated podcast, episode, user and search endpoints."""

    def __init__(
        self,
        tokens: AccessTokenProvider,
        http: httpx.Client,
        config: ClientConfig,
    ) -> None:
        self.tokens = tokens
        self.http = http
        self.config = config

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user_profile(self, uid: str) -> Any:
        _require("uid", uid)
        body = self._get("GetUserProfile", "/v1/profile/get", {"uid": uid})
        return _data(body)

    def get_user_stats(self, uid: str) -> Any:
        _require("uid", uid)
        body = self._get("GetUserStats", "/v1/user-stats/get", {"uid": uid})
        return _data(body)

    # ------------------------------------------------------------------
    # Podcasts and episodes
    # ------------------------------------------------------------------

    def get_podcast_details(self, pid: str) -> Any:
        _require("pid", pid)
        body = self._get("GetPodcastDetails", "/v1/podcast/get", {"pid": pid})
        return _data(body)

    def list_podcast_episodes(
        self,
        pid: str,
        order: str = "desc",
        load_more_key: EpisodeLoadMoreKey | None = None,
    ) -> Any:
        _require("pid", pid)
        request = EpisodeListRequest(
            pid=pid,
            order=order,
            load_more_key=load_more_key if load_more_key and load_more_key.is_set() else None,
        )
        return self._post("ListPodcastEpisodes", "/v1/episode/list", request.to_body())

    def get_episode_details(self, eid: str) -> Any:
        _require("eid", eid)
        body = self._get("GetEpisodeDetails", "/v1/episode/get", {"eid": eid})
        return _data(body)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search_podcasts(
        self,
        keyword: str,
        load_more_key: SearchLoadMoreKey | None = None,
    ) -> dict[str, Any]:
        return self._search(SearchType.PODCAST, keyword, load_more_key=load_more_key)

    def search_episodes(
        self,
        keyword: str,
        pid: str | None = None,
        load_more_key: SearchLoadMoreKey | None = None,
    ) -> dict[str, Any]:
        return self._search(SearchType.EPISODE, keyword, pid=pid, load_more_key=load_more_key)

    def search_users(
        self,
        keyword: str,
        load_more_key: SearchLoadMoreKey | None = None,
    ) -> dict[str, Any]:
        return self._search(SearchType.USER, keyword, load_more_key=load_more_key)

    def _search(
        self,
        search_type: SearchType,
        keyword: str,
        *,
        pid: str | None = None,
        load_more_key: SearchLoadMoreKey | None = None,
    ) -> dict[str, Any]:
        _require("keyword", keyword)
        request = SearchRequest(
            keyword=keyword,
            type=search_type,
            pid=pid or None,
            load_more_key=load_more_key if load_more_key and load_more_key.is_set() else None,
        )
        body = self._post("Search", "/v1/search/create", request.to_body())
        if not isinstance(body, dict):
            raise XiaoyuzhouAPIError("Search", "expected a JSON object")
        return {
            "data": body.get("data") or [],
            "highlightWord": body.get("highlightWord"),
            "loadMoreKey": body.get("loadMoreKey"),
        }

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get(self, operation: str, path: str, params: dict[str, str]) -> Any:
        headers = authenticated_headers(self.config, self.tokens.get_valid_access_token())
        response = send(self.http, operation, "GET", path, params=params, headers=headers)
        return parse_json(response, operation)

    def _post(self, operation: str, path: str, body: dict[str, Any]) -> Any:
        headers = authenticated_headers(
            self.config,
            self.tokens.get_valid_access_token(),
            json_body=True,
        )
        logger.debug("%s request body: %s", operation, body)
        response = send(self.http, operation, "POST", path, json=body, headers=headers)
        return parse_json(response, operation)


def _require(name: str, value: str | None) -> None:
    if not value:
        raise ValueError(f"{name} cannot be empty")


def _data(body: Any) -> Any:
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body
