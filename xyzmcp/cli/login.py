"""Interactive SMS login flow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TextIO

from rich.console import Console

from xyzmcp.core.auth.manager import TokenManager
from xyzmcp.core.client.auth_api import AuthAPI
from xyzmcp.core.client.http import XiaoyuzhouAPIError
from xyzmcp.models.credential import Credential
from xyzmcp.ui.console import err_console
from xyzmcp.ui.prompts import ask_area_code, ask_phone_number, ask_verification_code

logger = logging.getLogger(__name__)

MAX_VERIFICATION_ATTEMPTS = 3


class LoginError(RuntimeError):
    """The interactive login did not produce a credential."""


def run_login(
    manager: TokenManager,
    auth_api: AuthAPI,
    token_path: Path,
    *,
    console: Console | None = None,
    input_stream: TextIO | None = None,
) -> Credential:
    """Log in by SMS code, install the credential, and save it to *token_path*."""
    con = console or err_console

    area_code = ask_area_code(console=con, input_stream=input_stream)
    phone_number = ask_phone_number(console=con, input_stream=input_stream)

    try:
        auth_api.request_verification_code(area_code, phone_number)
    except XiaoyuzhouAPIError as exc:
        raise LoginError(f"Error requesting verification code: {exc}") from exc
    con.print("[info]Verification code sent. Please check your phone.[/info]")

    for attempt in range(1, MAX_VERIFICATION_ATTEMPTS + 1):
        code = ask_verification_code(
            attempt,
            MAX_VERIFICATION_ATTEMPTS,
            console=con,
            input_stream=input_stream,
        )
        try:
            result = auth_api.login_with_code(area_code, phone_number, code)
        except XiaoyuzhouAPIError as exc:
            logger.warning("Login attempt %s failed: %s", attempt, exc)
            remaining = MAX_VERIFICATION_ATTEMPTS - attempt
            if remaining:
                con.print(f"[warning]Login failed: {exc}. {remaining} attempt(s) remaining.[/warning]")
            continue
        break
    else:
        raise LoginError("Maximum login attempts reached")

    credential = manager.accept_login(
        access_token=result.access_token,
        refresh_token=result.refresh_token,
        uid=result.uid,
        nickname=result.nickname,
    )
    manager.save(token_path)
    logger.debug("Credential saved to %s", token_path)
    return credential
