"""Token lifecycle management.

One ``TokenManager`` is constructed by the process entry point and handed to
every component that issues authenticated requests. It owns the single active
credential, decides when it is stale, and drives the refresh exchange.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from xyzmcp.core.auth.errors import (
    CredentialIOError,
    InvalidCredentialStateError,
    PersistFailedError,
    RefreshFailedError,
    RefreshTransportError,
    UnauthenticatedError,
)
from xyzmcp.core.auth.store import CredentialStore
from xyzmcp.models.credential import Credential

logger = logging.getLogger(__name__)

FRESHNESS_WINDOW_SECONDS = 20 * 60


class RefreshTransport(Protocol):
    """Exchanges a refresh token for a new ``(access_token, refresh_token)`` pair."""

    def refresh(self, refresh_token: str) -> tuple[str, str]: ...


class TokenManager:
    """Process-scoped authority over the active credential.

    ``get_valid_access_token`` runs its check-refresh-persist sequence under a
    single lock, so concurrent callers that find a stale credential wait for
    the first refresh and then see a fresh token instead of refreshing again.
    """

    def __init__(
        self,
        transport: RefreshTransport,
        store: CredentialStore | None = None,
        *,
        freshness_window: float = FRESHNESS_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.transport = transport
        self.store = store or CredentialStore()
        self.freshness_window = freshness_window
        self._clock = clock
        self._credential = Credential()
        self._lock = threading.RLock()

    def current(self) -> Credential:
        """Return the active credential (empty until loaded or logged in)."""
        return self._credential

    def load_from(self, path: str | Path) -> None:
        """Replace the active credential with the one stored at *path*."""
        path = Path(path)
        credential = self.store.load(path)
        credential.source_path = path
        with self._lock:
            self._credential = credential
        logger.debug("Active credential loaded (uid=%s)", credential.uid)

    def accept_login(
        self,
        *,
        access_token: str,
        refresh_token: str,
        uid: str,
        nickname: str,
    ) -> Credential:
        """Install a freshly minted credential produced by the login flow."""
        if not access_token or not refresh_token:
            raise InvalidCredentialStateError("Login produced an incomplete token pair")
        with self._lock:
            cred = self._credential
            cred.access_token = access_token
            cred.refresh_token = refresh_token
            cred.uid = uid
            cred.nickname = nickname
            cred.last_refreshed_at = self._monotonic_now(cred)
            return cred

    def save(self, path: str | Path | None = None) -> Path:
        """Persist the active credential to *path* (default: its source path)."""
        with self._lock:
            target = Path(path) if path is not None else self._credential.source_path
            if target is None:
                raise InvalidCredentialStateError("No path to save the credential to")
            self.store.save(self._credential, target)
            return target

    def age(self) -> float | None:
        """Seconds since the last mint or refresh, or None when untracked."""
        stamp = self._credential.last_refreshed_at
        if not stamp:
            return None
        return max(0.0, self._clock() - stamp)

    def is_stale(self) -> bool:
        age = self.age()
        return age is not None and age > self.freshness_window

    def get_valid_access_token(self) -> str:
        """Return an access token believed valid, refreshing it first if stale.

        Raises:
            UnauthenticatedError: no complete credential is loaded.
            RefreshFailedError: the credential was stale and refreshing failed.
        """
        with self._lock:
            if not self._credential.is_complete:
                logger.warning("Access token requested but no complete credential is loaded")
                raise UnauthenticatedError("Not authenticated: no credential loaded")

            if self.is_stale():
                logger.debug(
                    "Access token is %.0fs old, refreshing",
                    self.age(),
                )
                try:
                    self.refresh()
                except RefreshTransportError as exc:
                    raise RefreshFailedError(
                        f"Failed to refresh token, authentication may be required: {exc}"
                    ) from exc
                except PersistFailedError as exc:
                    logger.warning("%s; continuing with the in-memory credential", exc)

                if not self._credential.access_token:
                    raise RefreshFailedError("Access token is empty after refresh")

            return self._credential.access_token

    def refresh(self) -> Credential:
        """Exchange the refresh token for a new pair and persist the result.

        Raises:
            InvalidCredentialStateError: there is no refresh token.
            RefreshTransportError: the exchange was rejected.
            RefreshFailedError: the exchange returned an empty token.
            PersistFailedError: the refreshed credential could not be saved;
                the in-memory credential is already updated.
        """
        with self._lock:
            cred = self._credential
            if not cred.refresh_token:
                raise InvalidCredentialStateError("Cannot refresh: refresh token is empty")

            logger.debug("Refreshing access token (uid=%s)", cred.uid)
            access_token, refresh_token = self.transport.refresh(cred.refresh_token)
            if not access_token or not refresh_token:
                raise RefreshFailedError("Refresh response contained an empty token")

            cred.access_token = access_token
            cred.refresh_token = refresh_token
            cred.last_refreshed_at = self._monotonic_now(cred)
            logger.debug("Access token refreshed")

            if cred.source_path is None:
                logger.warning(
                    "Refreshed credential has no source path; keeping it in memory only"
                )
                return cred

            try:
                self.store.save(cred, cred.source_path)
            except CredentialIOError as exc:
                raise PersistFailedError(cred.source_path, cred.access_token, exc) from exc
            return cred

    def _monotonic_now(self, cred: Credential) -> int:
        return max(int(self._clock()), cred.last_refreshed_at)
