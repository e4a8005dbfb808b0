"""Credential model persisted to the token file."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Credential(BaseModel):
    """Access/refresh token pair plus the identity it belongs to.

    A credential is either empty (unauthenticated) or complete (both tokens
    set). ``source_path`` records where the credential was loaded from or last
    saved to; it is never serialized.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: str = ""
    refresh_token: str = ""
    uid: str = ""
    nickname: str = ""
    last_refreshed_at: int = Field(default=0, ge=0, alias="last_updated_timestamp")
    source_path: Path | None = Field(default=None, exclude=True)

    @property
    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token

    @property
    def is_complete(self) -> bool:
        return bool(self.access_token) and bool(self.refresh_token)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the on-disk JSON object."""
        payload = self.model_dump(mode="json", by_alias=True)
        if not payload.get("last_updated_timestamp"):
            payload.pop("last_updated_timestamp", None)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Credential:
        return cls.model_validate(payload)
