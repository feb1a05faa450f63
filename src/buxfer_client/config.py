from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="https://www.buxfer.com/api", alias="BUXFER_BASE_URL")
    timeout_s: float = Field(default=20.0, alias="BUXFER_TIMEOUT")

    token: Optional[str] = Field(default=None, alias="BUXFER_TOKEN")
    username: Optional[str] = Field(default=None, alias="BUXFER_USERNAME")
    password: Optional[str] = Field(default=None, alias="BUXFER_PASSWORD")

    master_key: Optional[str] = Field(default=None, alias="MASTER_KEY")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    cache_dir: Path = Field(default=Path(".cache"), alias="CACHE_DIR")

    def validate_required(self) -> None:
        if not self.base_url:
            raise ValueError("BUXFER_BASE_URL is required")

        if self.timeout_s <= 0:
            raise ValueError("BUXFER_TIMEOUT must be > 0")


@lru_cache
def load_settings() -> Settings:
    settings = Settings()
    settings.validate_required()
    return settings
