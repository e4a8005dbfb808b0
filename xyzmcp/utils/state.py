"""Per-user state path helpers."""

from __future__ import annotations

from pathlib import Path

TOKEN_FILE_NAME = "token.json"


def default_state_dir() -> Path:
    """Return ``~/.mcp/xiaoyuzhoufm-mcp``."""
    return Path.home() / ".mcp" / "xiaoyuzhoufm-mcp"


def default_token_path() -> Path:
    """Return the well-known credential file location for the current user."""
    return default_state_dir() / TOKEN_FILE_NAME


def resolve_token_path(path: str | Path | None = None) -> Path:
    """Resolve an explicit token path, falling back to the per-user default."""
    if path is None or str(path) == "":
        return default_token_path()
    return Path(path).expanduser()
