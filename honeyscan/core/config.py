"""Runtime settings, read from ``HONEYSCAN_*`` environment variables or ``.env``."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from honeyscan.core.chains import ChainConfig, get_chain_config

APP_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Process-wide settings; use :func:`get_settings` for the shared instance."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HONEYSCAN_",
        case_sensitive=False,
    )

    # service
    app_name: str = "honeyscan"
    app_env: Literal["development", "staging", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    cors_allowed_origins: str = "http://localhost:3000"

    # chain access
    chain: str = "base"
    rpc_urls: str = ""  # comma-separated; empty uses the chain's defaults
    rpc_timeout_seconds: float = 15.0
    rpc_connect_timeout_seconds: float = 5.0

    @property
    def chain_config(self) -> ChainConfig:
        config = get_chain_config(self.chain)
        if config is None:
            raise ValueError(f"Unsupported chain: {self.chain}")
        return config

    @property
    def rpc_url_list(self) -> list[str]:
        urls = [u.strip() for u in self.rpc_urls.split(",") if u.strip()]
        return urls or list(self.chain_config.rpc_urls)

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
