"""Static request header sets mimicking the official iOS app."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

from xyzmcp.models.config import ClientConfig

ACCESS_TOKEN_HEADER = "x-jike-access-token"
REFRESH_TOKEN_HEADER = "x-jike-refresh-token"
DEVICE_ID_HEADER = "x-jike-device-id"


def app_headers(config: ClientConfig) -> dict[str, str]:
    """Headers sent on every request, authenticated or not."""
    return {
        "Host": config.host,
        "User-Agent": config.user_agent,
        "Market": "AppStore",
        "App-BuildNo": config.app_build,
        "OS": "ios",
        "Manufacturer": "Apple",
        "BundleID": "app.podcast.cosmos",
        "abtest-info": '{"old_user_discovery_feed":"enable"}',
        "Model": config.device_model,
        "app-permissions": "4",
        "Accept": "*/*",
        "App-Version": config.app_version,
        "WifiConnected": "true",
        "OS-Version": config.os_version,
        "x-custom-xiaoyuzhou-app-dev": "",
    }


def login_headers(config: ClientConfig) -> dict[str, str]:
    headers = app_headers(config)
    headers["Content-Type"] = "application/json"
    headers["Accept-Language"] = "zh-Hant-HK;q=1.0, zh-Hans-CN;q=0.9"
    return headers


def refresh_headers(config: ClientConfig, refresh_token: str) -> dict[str, str]:
    headers = app_headers(config)
    headers["Content-Type"] = "application/x-www-form-urlencoded; charset=utf-8"
    headers["Accept-Language"] = "zh-Hant-HK;q=1.0, zh-Hans-CN;q=0.9"
    headers[REFRESH_TOKEN_HEADER] = refresh_token
    return headers


def authenticated_headers(
    config: ClientConfig,
    access_token: str,
    *,
    json_body: bool = False,
    now: datetime | None = None,
) -> dict[str, str]:
    """Headers for API calls that carry the user's access token."""
    local_time = (now or datetime.now(ZoneInfo(config.timezone))).replace(microsecond=0)
    headers = app_headers(config)
    headers.update(
        {
            ACCESS_TOKEN_HEADER: access_token,
            DEVICE_ID_HEADER: config.device_id,
            "Accept-Language": "zh-Hans-CN;q=1.0",
            "Local-Time": local_time.isoformat(),
            "Timezone": config.timezone,
        }
    )
    if json_body:
        headers["Accept"] = "application/json"
        headers["Content-Type"] = "application/json"
    return headers
