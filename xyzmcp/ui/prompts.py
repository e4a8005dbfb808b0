"""Prompt primitives for the interactive login flow.

Every function accepts an optional *console* (for output) and *input_stream*
(for deterministic test input) so that tests never need to monkeypatch stdin.
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from rich.console import Console

from xyzmcp.ui.console import err_console

AREA_CODE_RE = re.compile(r"^\+\d{1,3}$")
PHONE_NUMBER_RE = re.compile(r"^\d{7,15}$")
VERIFICATION_CODE_RE = re.compile(r"^\d{4}$")

DEFAULT_AREA_CODE = "+86"


def ask_validated(
    prompt: str,
    pattern: re.Pattern[str],
    error: str,
    *,
    default: str | None = None,
    console: Console | None = None,
    input_stream: TextIO | None = None,
) -> str:
    """Prompt until the answer matches *pattern*.

    Raises ``KeyboardInterrupt`` on EOF.
    """
    con = console or err_console
    stream = input_stream or sys.stdin
    while True:
        con.print(f"{prompt}: ", end="")
        line = stream.readline()
        if not line:
            raise KeyboardInterrupt
        value = line.strip()
        if not value and default is not None:
            value = default
        if pattern.match(value):
            return value
        con.print(f"[warning]{error}[/warning]")


def ask_area_code(
    *,
    console: Console | None = None,
    input_stream: TextIO | None = None,
) -> str:
    return ask_validated(
        f"Area code [muted](Enter for {DEFAULT_AREA_CODE})[/muted]",
        AREA_CODE_RE,
        "Invalid area code. Use '+' followed by 1 to 3 digits (e.g. +86).",
        default=DEFAULT_AREA_CODE,
        console=console,
        input_stream=input_stream,
    )


def ask_phone_number(
    *,
    console: Console | None = None,
    input_stream: TextIO | None = None,
) -> str:
    return ask_validated(
        "Phone number (digits only)",
        PHONE_NUMBER_RE,
        "Invalid phone number. Enter 7 to 15 digits.",
        console=console,
        input_stream=input_stream,
    )


def ask_verification_code(
    attempt: int,
    max_attempts: int,
    *,
    console: Console | None = None,
    input_stream: TextIO | None = None,
) -> str:
    return ask_validated(
        f"4-digit verification code [muted](attempt {attempt}/{max_attempts})[/muted]",
        VERIFICATION_CODE_RE,
        "Invalid verification code. It must be 4 digits.",
        console=console,
        input_stream=input_stream,
    )
