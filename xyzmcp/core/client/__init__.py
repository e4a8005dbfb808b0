"""HTTP client for the Xiaoyuzhou FM API."""

from xyzmcp.core.client.api import AccessTokenProvider, XiaoyuzhouClient
from xyzmcp.core.client.auth_api import AuthAPI, HttpRefreshTransport, LoginResult
from xyzmcp.core.client.http import XiaoyuzhouAPIError, create_http_client

__all__ = [
    "AccessTokenProvider",
    "AuthAPI",
    "HttpRefreshTransport",
    "LoginResult",
    "XiaoyuzhouAPIError",
    "XiaoyuzhouClient",
    "create_http_client",
]
