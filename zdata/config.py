"""Configuration for the zdata client."""

import logging
from typing import Any, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings, read from ZDATA_* environment variables or .env."""

    model_config = SettingsConfigDict(
        env_prefix="ZDATA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    base_url: str = "http://localhost:3000"
    workspace_id: str = ""
    timeout_ms: float = 10_000

    # Cache
    enable_cache: bool = False
    cache_default_ttl_ms: int = 300_000  # 5 minutes
    cache_max_entries: Optional[int] = None

    # Retry
    enable_retry: bool = False
    retry_max_attempts: int = 3
    retry_base_delay_ms: float = 1000.0
    retry_max_delay_ms: float = 10_000.0
    retry_backoff_multiplier: float = 2.0
    retry_jitter_ms: float = 100.0

    # Logging
    log_level: str = "INFO"

    def to_client_config(self) -> dict[str, Any]:
        """Render the config dict accepted by ZDataClient."""
        cache_config: dict[str, Any] = {"default_ttl_ms": self.cache_default_ttl_ms}
        if self.cache_max_entries is not None:
            cache_config["max_entries"] = self.cache_max_entries

        return {
            "base_url": self.base_url,
            "workspace_id": self.workspace_id,
            "timeout": self.timeout_ms,
            "enable_cache": self.enable_cache,
            "enable_retry": self.enable_retry,
            "cache_config": cache_config,
            "retry_config": {
                "max_attempts": self.retry_max_attempts,
                "base_delay_ms": self.retry_base_delay_ms,
                "max_delay_ms": self.retry_max_delay_ms,
                "backoff_multiplier": self.retry_backoff_multiplier,
                "jitter_ms": self.retry_jitter_ms,
            },
        }


def configure_logging(level: Optional[str] = None) -> None:
    """Install a basic handler for applications that do not configure logging."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
