"""Process settings for feishu-reply, loaded from env / .env."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeishuReplySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FEISHU_REPLY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- general ---
    log_level: str = "INFO"

    # --- file-system paths ---
    state_dir: Path = Field(default_factory=lambda: Path.home() / ".feishu_reply")


@lru_cache
def get_settings() -> FeishuReplySettings:
    return FeishuReplySettings()
