"""Credential error taxonomy.

Startup code distinguishes ``CredentialNotFoundError`` (never logged in) from
``CredentialCorruptError`` (log in again) to pick the right instruction for the
user. API-calling code treats ``RefreshFailedError`` as "re-authentication
required" and never retries the refresh itself.
"""

from __future__ import annotations

from pathlib import Path


class CredentialError(RuntimeError):
    """Base class for credential lifecycle failures."""


class CredentialNotFoundError(CredentialError):
    """No credential file exists at the requested path."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Credential file not found: {path}")
        self.path = path


class CredentialCorruptError(CredentialError):
    """Credential file exists but does not hold a complete credential."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"Credential file {path} is unusable: {detail}")
        self.path = path
        self.detail = detail


class CredentialIOError(CredentialError):
    """Credential file could not be read or written."""

    def __init__(self, path: Path, action: str, cause: OSError) -> None:
        super().__init__(f"Failed to {action} credential file {path}: {cause}")
        self.path = path
        self.action = action


class UnauthenticatedError(CredentialError):
    """No credential is loaded in memory."""


class InvalidCredentialStateError(CredentialError):
    """Operation is impossible with the credential's current contents."""


class RefreshTransportError(CredentialError):
    """The refresh exchange was rejected or never completed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RefreshFailedError(CredentialError):
    """Refreshing failed; the caller must re-authenticate."""


class PersistFailedError(CredentialError):
    """Refresh succeeded in memory but the result could not be saved."""

    def __init__(self, path: Path, access_token: str, cause: Exception) -> None:
        super().__init__(f"Refreshed credential could not be saved to {path}: {cause}")
        self.path = path
        self.access_token = access_token
