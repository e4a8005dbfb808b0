"""Xiaoyuzhou FM MCP bridge."""

__version__ = "0.1.0"
