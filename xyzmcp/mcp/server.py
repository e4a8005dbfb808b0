"""MCP stdio server exposing the podcast API as tools."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable
from typing import Any

import mcp.server.stdio as mcp_stdio
import mcp.types as types
from mcp.server.lowlevel import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from xyzmcp import __version__
from xyzmcp.core.auth.errors import CredentialError
from xyzmcp.core.client.api import XiaoyuzhouClient
from xyzmcp.core.client.http import XiaoyuzhouAPIError
from xyzmcp.mcp.tools import TOOLS
from xyzmcp.models.requests import EpisodeLoadMoreKey, SearchLoadMoreKey

logger = logging.getLogger(__name__)

SERVER_NAME = "xiaoyuzhoufm-mcp"


class ToolArgumentError(ValueError):
    """Raised when a tool call carries missing or malformed arguments."""


class XiaoyuzhouMCPServer:
    """MCP server dispatching tool calls to a ``XiaoyuzhouClient``.

    Client calls block on HTTP, so each one runs in a worker thread. Parallel
    tool calls therefore share the client's token manager concurrently.
    """

    def __init__(self, client: XiaoyuzhouClient) -> None:
        self.client = client
        self.handlers: dict[str, Callable[[dict[str, Any]], Any]] = {
            "get_user_profile_by_id": self._get_user_profile,
            "get_user_stats": self._get_user_stats,
            "get_podcast_details": self._get_podcast_details,
            "list_podcast_episodes": self._list_podcast_episodes,
            "get_episode_details": self._get_episode_details,
            "search_podcasts": self._search_podcasts,
            "search_episodes": self._search_episodes,
            "search_users": self._search_users,
        }
        self.server = Server(SERVER_NAME)
        self._register_handlers()
        logger.info("Initialized MCP server with %s tools", len(self.handlers))

    def list_tools(self) -> list[types.Tool]:
        return [tool for tool in TOOLS if tool.name in self.handlers]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        arguments = arguments or {}
        handler = self.handlers.get(name)
        if handler is None:
            return _error_result(name, "unknown_tool", f"Unknown tool: {name}")

        logger.debug("Executing %s with arguments %s", name, arguments)
        try:
            result = await asyncio.to_thread(handler, arguments)
        except ValueError as exc:
            return _error_result(name, "invalid_arguments", str(exc))
        except CredentialError as exc:
            logger.warning("%s aborted: %s", name, exc)
            return _error_result(name, "authentication_required", str(exc))
        except XiaoyuzhouAPIError as exc:
            logger.warning("%s failed upstream: %s", name, exc)
            return _error_result(name, "upstream_error", str(exc))
        except Exception as exc:
            logger.exception("Error executing %s", name)
            return _error_result(name, "error_internal", str(exc))

        return types.CallToolResult(
            content=[
                types.TextContent(type="text", text=json.dumps(result, ensure_ascii=False))
            ],
            isError=False,
        )

    def _register_handlers(self) -> None:
        @self.server.list_tools()  # type: ignore
        async def handle_list_tools() -> list[types.Tool]:
            return self.list_tools()

        @self.server.call_tool()  # type: ignore
        async def handle_call_tool(
            name: str,
            arguments: dict[str, Any] | None,
        ) -> types.CallToolResult:
            return await self.call_tool(name, arguments)

    # ------------------------------------------------------------------
    # Tool handlers (run in worker threads)
    # ------------------------------------------------------------------

    def _get_user_profile(self, args: dict[str, Any]) -> Any:
        return self.client.get_user_profile(_required_str(args, "user_id"))

    def _get_user_stats(self, args: dict[str, Any]) -> Any:
        return self.client.get_user_stats(_required_str(args, "user_id"))

    def _get_podcast_details(self, args: dict[str, Any]) -> Any:
        return self.client.get_podcast_details(_required_str(args, "podcast_id"))

    def _list_podcast_episodes(self, args: dict[str, Any]) -> Any:
        pid = _required_str(args, "podcast_id")
        order = args.get("order") or "desc"
        if order not in ("asc", "desc"):
            raise ToolArgumentError("'order' must be 'asc' or 'desc'")
        load_more_key = _object_arg(args, "load_more_key", EpisodeLoadMoreKey)
        return self.client.list_podcast_episodes(pid, order=order, load_more_key=load_more_key)

    def _get_episode_details(self, args: dict[str, Any]) -> Any:
        return self.client.get_episode_details(_required_str(args, "episode_id"))

    def _search_podcasts(self, args: dict[str, Any]) -> Any:
        return self.client.search_podcasts(
            _required_str(args, "keyword"),
            load_more_key=_object_arg(args, "load_more_key", SearchLoadMoreKey),
        )

    def _search_episodes(self, args: dict[str, Any]) -> Any:
        pid = args.get("pid")
        if pid is not None and not isinstance(pid, str):
            raise ToolArgumentError("'pid' must be a string")
        return self.client.search_episodes(
            _required_str(args, "keyword"),
            pid=pid or None,
            load_more_key=_object_arg(args, "load_more_key", SearchLoadMoreKey),
        )

    def _search_users(self, args: dict[str, Any]) -> Any:
        return self.client.search_users(
            _required_str(args, "keyword"),
            load_more_key=_object_arg(args, "load_more_key", SearchLoadMoreKey),
        )

    async def run_stdio(self) -> None:
        async with mcp_stdio.stdio_server() as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                InitializationOptions(
                    server_name=SERVER_NAME,
                    server_version=__version__,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )


def run_mcp_server(client: XiaoyuzhouClient) -> None:
    """Serve *client* over MCP stdio until the peer disconnects."""
    server = XiaoyuzhouMCPServer(client)
    asyncio.run(server.run_stdio())
    logger.debug("MCP stdio server stopped")


def _required_str(args: dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value:
        raise ToolArgumentError(f"'{key}' is required and must be a non-empty string")
    return value


def _object_arg(args: dict[str, Any], key: str, model: type[Any]) -> Any:
    value = args.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ToolArgumentError(f"'{key}' must be an object")
    try:
        parsed = model.model_validate(value)
    except ValueError as exc:
        raise ToolArgumentError(f"'{key}' is malformed: {exc}") from exc
    return parsed if parsed.is_set() else None


def _error_result(action: str, reason_code: str, message: str) -> types.CallToolResult:
    payload = {
        "status": "error",
        "action": action,
        "reason_code": reason_code,
        "error": message,
    }
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(payload, ensure_ascii=False))],
        isError=True,
    )
