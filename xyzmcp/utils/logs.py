"""Logging configuration for CLI entry points."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from xyzmcp.ui.console import err_console

_NOISY_LOGGERS = ("httpx", "httpcore", "mcp")


def configure_logging(verbose: bool = False, console: Console | None = None) -> None:
    """Route all log records to stderr through Rich.

    DEBUG when *verbose*, INFO otherwise. HTTP and MCP library loggers stay at
    WARNING so request chatter never drowns out credential events.
    """
    handler = RichHandler(
        console=console or err_console,
        show_path=verbose,
        rich_tracebacks=True,
        markup=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%Y-%m-%d %H:%M:%S]",
        handlers=[handler],
        force=True,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
