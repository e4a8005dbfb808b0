"""Runtime configuration for the upstream API client."""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_BASE_URL = "https://api.xiaoyuzhoufm.com"
DEFAULT_DEVICE_ID = "81ADBFD6-6921-482B-9AB9-A29E7CC7BB55"


class ClientConfig(BaseModel):
    """Settings shared by every request sent to the podcast API."""

    base_url: str = DEFAULT_BASE_URL
    device_id: str = DEFAULT_DEVICE_ID
    timeout: float = Field(default=30.0, gt=0)
    timezone: str = "Asia/Shanghai"
    app_version: str = "2.57.1"
    app_build: str = "1576"
    os_version: str = "17.4.1"
    device_model: str = "iPhone14,2"

    @property
    def host(self) -> str:
        return self.base_url.split("://", 1)[-1].split("/", 1)[0]

    @property
    def user_agent(self) -> str:
        return f"Xiaoyuzhou/{self.app_version} (build:{self.app_build}; iOS {self.os_version})"
