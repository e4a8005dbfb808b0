"""Pydantic data models for the Xiaoyuzhou MCP bridge."""

from xyzmcp.models.config import ClientConfig
from xyzmcp.models.credential import Credential
from xyzmcp.models.requests import (
    EpisodeListRequest,
    EpisodeLoadMoreKey,
    SearchLoadMoreKey,
    SearchRequest,
    SearchType,
)

__all__ = [
    "ClientConfig",
    "Credential",
    "EpisodeListRequest",
    "EpisodeLoadMoreKey",
    "SearchLoadMoreKey",
    "SearchRequest",
    "SearchType",
]
