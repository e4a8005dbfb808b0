"""Shared test helpers."""

from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import Any

import httpx

from xyzmcp.core.auth.errors import RefreshTransportError

NOW = 1_750_000_000


class FakeClock:
    """Settable clock returning epoch seconds."""

    def __init__(self, now: float = NOW) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport:
    """Refresh transport returning queued token pairs and recording calls."""

    def __init__(
        self,
        pairs: list[tuple[str, str]] | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.pairs = list(pairs or [("A2", "R2")])
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def refresh(self, refresh_token: str) -> tuple[str, str]:
        with self._lock:
            self.calls.append(refresh_token)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.pairs.pop(0) if len(self.pairs) > 1 else self.pairs[0]


def rejecting_transport() -> RecordingTransport:
    return RecordingTransport(error=RefreshTransportError("rejected", status_code=401))


def write_token_file(path: Path, **fields: Any) -> Path:
    payload: dict[str, Any] = {
        "access_token": "A1",
        "refresh_token": "R1",
        "uid": "u-1",
        "nickname": "listener",
    }
    payload.update(fields)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def json_response(payload: Any, status_code: int = 200, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(status_code, json=payload, headers=headers)
