"""SMS login and token refresh endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from xyzmcp.core.auth.errors import RefreshTransportError
from xyzmcp.core.client.headers import (
    ACCESS_TOKEN_HEADER,
    REFRESH_TOKEN_HEADER,
    login_headers,
    refresh_headers,
)
from xyzmcp.core.client.http import XiaoyuzhouAPIError, parse_json, send
from xyzmcp.models.config import ClientConfig

logger = logging.getLogger(__name__)

SEND_CODE_PATH = "/v1/auth/sendCode"
LOGIN_PATH = "/v1/auth/loginOrSignUpWithSMS"
REFRESH_PATH = "/app_auth_tokens.refresh"


@dataclass(frozen=True)
class LoginResult:
    """Tokens and identity returned by a successful SMS login."""

    access_token: str
    refresh_token: str
    uid: str
    nickname: str


class AuthAPI:
    """Unauthenticated endpoints used by the interactive login flow."""

    def __init__(self, http: httpx.Client, config: ClientConfig) -> None:
        self.http = http
        self.config = config

    def request_verification_code(self, area_code: str, phone_number: str) -> None:
        """Ask the API to text a verification code to the phone number."""
        operation = "sendCode"
        logger.debug("Requesting verification code")
        response = send(
            self.http,
            operation,
            "POST",
            SEND_CODE_PATH,
            headers=login_headers(self.config),
            json={"mobilePhoneNumber": phone_number, "areaCode": area_code},
        )
        if response.status_code != httpx.codes.OK:
            raise XiaoyuzhouAPIError(
                operation,
                f"status {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

    def login_with_code(self, area_code: str, phone_number: str, code: str) -> LoginResult:
        """Exchange a verification code for a credential.

        Tokens arrive in response headers; identity arrives in the body.
        """
        operation = "loginOrSignUpWithSMS"
        response = send(
            self.http,
            operation,
            "POST",
            LOGIN_PATH,
            headers=login_headers(self.config),
            json={
                "areaCode": area_code,
                "verifyCode": code,
                "mobilePhoneNumber": phone_number,
            },
        )
        body = parse_json(response, operation)
        user = _dig(body, "data", "user")

        access_token = response.headers.get(ACCESS_TOKEN_HEADER, "")
        refresh_token = response.headers.get(REFRESH_TOKEN_HEADER, "")
        if not access_token or not refresh_token:
            raise XiaoyuzhouAPIError(operation, "login succeeded but tokens are missing from headers")
        uid = str(user.get("uid") or "")
        if not uid:
            raise XiaoyuzhouAPIError(operation, "login succeeded but UID is missing from body")

        nickname = str(user.get("nickname") or "")
        logger.debug("Login successful (uid=%s, nickname=%s)", uid, nickname)
        return LoginResult(
            access_token=access_token,
            refresh_token=refresh_token,
            uid=uid,
            nickname=nickname,
        )


class HttpRefreshTransport:
    """Refresh transport backed by ``POST /app_auth_tokens.refresh``."""

    def __init__(self, http: httpx.Client, config: ClientConfig) -> None:
        self.http = http
        self.config = config

    def refresh(self, refresh_token: str) -> tuple[str, str]:
        logger.debug("Sending token refresh request")
        try:
            response = self.http.post(
                REFRESH_PATH,
                headers=refresh_headers(self.config, refresh_token),
            )
        except httpx.HTTPError as exc:
            raise RefreshTransportError(f"Refresh request failed: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise RefreshTransportError(
                f"Refresh rejected with status {response.status_code}",
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise RefreshTransportError("Refresh response is not JSON") from exc
        if not isinstance(body, dict) or body.get("success") is not True:
            raise RefreshTransportError("Refresh response reported success: false")

        access_token = str(body.get(ACCESS_TOKEN_HEADER) or "")
        new_refresh_token = str(body.get(REFRESH_TOKEN_HEADER) or "")
        if not access_token or not new_refresh_token:
            raise RefreshTransportError("Refresh response is missing new tokens")
        return access_token, new_refresh_token


def _dig(body: Any, *keys: str) -> dict[str, Any]:
    node = body
    for key in keys:
        node = node.get(key) if isinstance(node, dict) else None
    return node if isinstance(node, dict) else {}
