from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_WS_URL = "ws://localhost:8081"


class FeedSettings(BaseSettings):
    """Settings populated from ``EDISON_*`` environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EDISON_",
        extra="ignore",
    )

    ws_url: str = DEFAULT_WS_URL
    request_timeout: float = Field(default=10.0, gt=0)
    """Seconds the CLI waits for a dictionary or history reply."""
    output_format: Literal["rich", "json", "quiet"] | None = None

    def merge_overrides(
        self,
        *,
        ws_url: str | None = None,
        request_timeout: float | None = None,
    ) -> FeedSettings:
        """Return a copy with CLI flag overrides applied."""
        data = self.model_dump()
        if ws_url is not None:
            data["ws_url"] = ws_url
        if request_timeout is not None:
            data["request_timeout"] = request_timeout
        return FeedSettings(**data)
