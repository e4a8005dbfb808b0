"""Credential persistence and token lifecycle."""

from xyzmcp.core.auth.errors import (
    CredentialCorruptError,
    CredentialError,
    CredentialIOError,
    CredentialNotFoundError,
    InvalidCredentialStateError,
    PersistFailedError,
    RefreshFailedError,
    RefreshTransportError,
    UnauthenticatedError,
)
from xyzmcp.core.auth.manager import FRESHNESS_WINDOW_SECONDS, RefreshTransport, TokenManager
from xyzmcp.core.auth.store import CredentialStore

__all__ = [
    "FRESHNESS_WINDOW_SECONDS",
    "CredentialCorruptError",
    "CredentialError",
    "CredentialIOError",
    "CredentialNotFoundError",
    "CredentialStore",
    "InvalidCredentialStateError",
    "PersistFailedError",
    "RefreshFailedError",
    "RefreshTransport",
    "RefreshTransportError",
    "TokenManager",
    "UnauthenticatedError",
]
