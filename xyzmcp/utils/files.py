"""Filesystem helpers for owner-private atomic writes."""

from __future__ import annotations

import contextlib
import os
import platform
import tempfile
from pathlib import Path

PRIVATE_DIR_MODE = 0o700
PRIVATE_FILE_MODE = 0o600


def ensure_private_dir(path: Path) -> None:
    """Create *path* and any missing parents, each one owner-only.

    Directories that already exist keep their permissions.
    """
    if path.is_dir():
        return
    missing: list[Path] = []
    current = path
    while not current.exists():
        missing.append(current)
        if current.parent == current:
            break
        current = current.parent
    for directory in reversed(missing):
        directory.mkdir(mode=PRIVATE_DIR_MODE, exist_ok=True)
        set_private_permissions(directory, PRIVATE_DIR_MODE)


def atomic_write_private_text(path: Path, data: str) -> None:
    """Atomically replace *path* with *data*, readable only by the owner.

    The payload goes to a sibling temp file (created 0600), is fsynced, then
    renamed over the target. A crash leaves either the old file or the new
    one, never a mix of both.
    """
    ensure_private_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        set_private_permissions(tmp_path, PRIVATE_FILE_MODE)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise
    _fsync_directory(path.parent)


def set_private_permissions(path: Path, mode: int) -> None:
    """Apply *mode* on POSIX systems; no-op on Windows."""
    if platform.system() == "Windows":
        return
    os.chmod(path, mode)


def _fsync_directory(path: Path) -> None:
    """Best-effort fsync on a directory after atomic replace."""
    try:
        fd = os.open(path, os.O_DIRECTORY)
    except OSError:
        return
    try:
        os.fsync(fd)
    finally:
        os.close(fd)
