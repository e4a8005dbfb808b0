"""Request bodies for the paginated API endpoints."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class SearchType(StrEnum):
    """Result kind requested from the search endpoint."""

    PODCAST = "PODCAST"
    EPISODE = "EPISODE"
    USER = "USER"


class EpisodeLoadMoreKey(BaseModel):
    """Pagination anchor for episode listings."""

    model_config = ConfigDict(populate_by_name=True)

    direction: str | None = None
    pub_date: str | None = Field(default=None, alias="pubDate")
    id: str | None = None

    def is_set(self) -> bool:
        return any((self.direction, self.pub_date, self.id))


class SearchLoadMoreKey(BaseModel):
    """Pagination anchor returned by a previous search response."""

    model_config = ConfigDict(populate_by_name=True)

    load_more_key: Any | None = Field(default=None, alias="loadMoreKey")
    search_id: str = Field(default="", alias="searchId")

    def is_set(self) -> bool:
        return self.load_more_key is not None or bool(self.search_id)


class EpisodeListRequest(BaseModel):
    """Body of ``POST /v1/episode/list``."""

    model_config = ConfigDict(populate_by_name=True)

    pid: str = Field(min_length=1)
    order: Literal["asc", "desc"] = "desc"
    limit: int = 20
    load_more_key: EpisodeLoadMoreKey | None = Field(default=None, alias="loadMoreKey")

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SearchRequest(BaseModel):
    """Body of ``POST /v1/search/create``."""

    model_config = ConfigDict(populate_by_name=True)

    keyword: str = Field(min_length=1)
    type: SearchType
    pid: str | None = None
    load_more_key: SearchLoadMoreKey | None = Field(default=None, alias="loadMoreKey")

    def to_body(self) -> dict[str, Any]:
        body = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        if not self.pid:
            body.pop("pid", None)
        if self.load_more_key is not None:
            # Both keys are sent once pagination has started, even when null.
            body["loadMoreKey"] = self.load_more_key.model_dump(mode="json", by_alias=True)
        return body
