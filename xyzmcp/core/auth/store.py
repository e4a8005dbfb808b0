"""File-backed credential persistence."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from xyzmcp.core.auth.errors import (
    CredentialCorruptError,
    CredentialIOError,
    CredentialNotFoundError,
    InvalidCredentialStateError,
)
from xyzmcp.models.credential import Credential
from xyzmcp.utils.files import atomic_write_private_text

logger = logging.getLogger(__name__)


class CredentialStore:
    """Reads and writes a single credential JSON file.

    Writes to the same path are serialized within the process; across
    processes the atomic rename in ``atomic_write_private_text`` keeps readers
    from ever seeing a half-written file.
    """

    def __init__(self) -> None:
        self._locks: dict[Path, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def load(self, path: str | Path) -> Credential:
        """Load a complete credential from *path*.

        Raises:
            CredentialNotFoundError: the file does not exist.
            CredentialCorruptError: content is not a complete credential.
            CredentialIOError: any other read failure.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise CredentialNotFoundError(path) from exc
        except UnicodeDecodeError as exc:
            raise CredentialCorruptError(path, "not valid UTF-8") from exc
        except OSError as exc:
            raise CredentialIOError(path, "read", exc) from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CredentialCorruptError(path, f"invalid JSON ({exc.msg})") from exc
        if not isinstance(payload, dict):
            raise CredentialCorruptError(path, "expected a JSON object")

        try:
            credential = Credential.from_payload(payload)
        except ValidationError as exc:
            raise CredentialCorruptError(path, f"{exc.error_count()} invalid field(s)") from exc

        if not credential.is_complete:
            logger.warning("Credential file %s is incomplete", path)
            raise CredentialCorruptError(path, "access_token and refresh_token are both required")

        credential.source_path = path
        logger.debug("Credential loaded from %s (uid=%s)", path, credential.uid)
        return credential

    def save(self, credential: Credential, path: str | Path) -> None:
        """Persist *credential* to *path* with owner-only permissions.

        Missing parent directories are created. On success the credential's
        ``source_path`` points at *path*.
        """
        path = Path(path)
        if not credential.is_complete:
            raise InvalidCredentialStateError("Refusing to save an incomplete credential")

        data = json.dumps(credential.to_payload(), indent=2, ensure_ascii=False)
        with self._lock_for(path):
            try:
                atomic_write_private_text(path, data + "\n")
            except OSError as exc:
                raise CredentialIOError(path, "write", exc) from exc

        credential.source_path = path
        logger.debug("Credential saved to %s", path)

    def _lock_for(self, path: Path) -> threading.Lock:
        key = path.expanduser().absolute()
        with self._locks_guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock
