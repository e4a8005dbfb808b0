"""MCP server module for the Xiaoyuzhou FM bridge."""

from xyzmcp.mcp.server import XiaoyuzhouMCPServer, run_mcp_server

__all__ = ["XiaoyuzhouMCPServer", "run_mcp_server"]
