"""Tool definitions advertised over MCP."""

from __future__ import annotations

from typing import Any

import mcp.types as types

_SEARCH_LOAD_MORE_KEY: dict[str, Any] = {
    "type": "object",
    "description": "Pagination key returned in the loadMoreKey field of a previous search response.",
    "properties": {
        "loadMoreKey": {
            "type": "integer",
            "description": "Page cursor (usually a number).",
        },
        "searchId": {
            "type": "string",
            "description": "Search session ID.",
        },
    },
}


def _string(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


TOOLS: list[types.Tool] = [
    types.Tool(
        name="get_user_profile_by_id",
        description="Fetch the public profile of a user by UID.",
        inputSchema=_schema({"user_id": _string("UID of the user to look up.")}, ["user_id"]),
    ),
    types.Tool(
        name="get_user_stats",
        description=(
            "Fetch a user's statistics (following, followers, subscribed podcasts, "
            "listening time)."
        ),
        inputSchema=_schema({"user_id": _string("UID of the user to look up.")}, ["user_id"]),
    ),
    types.Tool(
        name="get_podcast_details",
        description="Fetch details of a podcast.",
        inputSchema=_schema({"podcast_id": _string("Podcast ID (PID).")}, ["podcast_id"]),
    ),
    types.Tool(
        name="list_podcast_episodes",
        description="List the episodes of a podcast.",
        inputSchema=_schema(
            {
                "podcast_id": _string("Podcast ID (PID)."),
                "order": {
                    "type": "string",
                    "enum": ["asc", "desc"],
                    "description": "Sort order by publish date (default desc).",
                },
                "load_more_key": {
                    "type": "object",
                    "description": "Pagination key from the previous page's loadMoreKey.",
                    "properties": {
                        "direction": _string("Paging direction, e.g. 'NEXT'."),
                        "pubDate": _string("Publish date of the anchor episode (ISO 8601)."),
                        "id": _string("Episode ID of the anchor episode."),
                    },
                },
            },
            ["podcast_id"],
        ),
    ),
    types.Tool(
        name="get_episode_details",
        description="Fetch details of an episode.",
        inputSchema=_schema({"episode_id": _string("Episode ID (EID).")}, ["episode_id"]),
    ),
    types.Tool(
        name="search_podcasts",
        description="Search podcasts by keyword.",
        inputSchema=_schema(
            {
                "keyword": _string("Search keyword."),
                "load_more_key": _SEARCH_LOAD_MORE_KEY,
            },
            ["keyword"],
        ),
    ),
    types.Tool(
        name="search_episodes",
        description="Search episodes by keyword, optionally within one podcast (pid).",
        inputSchema=_schema(
            {
                "keyword": _string("Search keyword."),
                "pid": _string("Optional podcast ID to search within."),
                "load_more_key": _SEARCH_LOAD_MORE_KEY,
            },
            ["keyword"],
        ),
    ),
    types.Tool(
        name="search_users",
        description="Search users by keyword.",
        inputSchema=_schema(
            {
                "keyword": _string("Search keyword."),
                "load_more_key": _SEARCH_LOAD_MORE_KEY,
            },
            ["keyword"],
        ),
    ),
]
