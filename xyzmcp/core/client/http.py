"""Shared HTTP plumbing for the podcast API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from xyzmcp.models.config import ClientConfig

logger = logging.getLogger(__name__)

_BODY_EXCERPT = 500


class XiaoyuzhouAPIError(RuntimeError):
    """Upstream API call failed or returned an unusable response."""

    def __init__(self, operation: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.status_code = status_code


def create_http_client(
    config: ClientConfig,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Build the process-wide HTTP client with a bounded timeout."""
    return httpx.Client(
        base_url=config.base_url,
        timeout=config.timeout,
        transport=transport,
        follow_redirects=False,
    )


def send(
    http: httpx.Client,
    operation: str,
    method: str,
    path: str,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, converting transport failures to ``XiaoyuzhouAPIError``."""
    try:
        response = http.request(method, path, **kwargs)
    except httpx.HTTPError as exc:
        raise XiaoyuzhouAPIError(operation, f"HTTP request failed: {exc}") from exc
    logger.debug("%s -> HTTP %s", operation, response.status_code)
    return response


def parse_json(response: httpx.Response, operation: str) -> Any:
    """Return the JSON body of a 200 response or raise ``XiaoyuzhouAPIError``."""
    if response.status_code != httpx.codes.OK:
        raise XiaoyuzhouAPIError(
            operation,
            f"status {response.status_code}: {response.text[:_BODY_EXCERPT]}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as exc:
        logger.error("%s returned a non-JSON body", operation)
        raise XiaoyuzhouAPIError(
            operation,
            f"invalid JSON body: {response.text[:_BODY_EXCERPT]}",
            status_code=response.status_code,
        ) from exc
