"""Shared fixtures for the xyzmcp test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from tests.helpers import FakeClock, RecordingTransport
from xyzmcp.core.auth import CredentialStore, TokenManager


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def token_path(tmp_path: Path) -> Path:
    return tmp_path / ".mcp" / "xiaoyuzhoufm-mcp" / "token.json"


@pytest.fixture
def manager(transport: RecordingTransport, clock: FakeClock) -> TokenManager:
    return TokenManager(transport, CredentialStore(), clock=clock)
