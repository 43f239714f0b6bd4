"""
Application configuration from environment variables.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when the secret or the script path cannot be resolved."""


class AppConfig(BaseSettings):
    # Left optional so a missing value surfaces per request as a server error
    webhook_secret: Optional[str] = None
    webhook_script: Optional[str] = None
    webhook_interpreter: str = "bash"
    # Max body size in bytes. Default 32KiB, plenty for a push event
    webhook_max_body_size: int = 32 * 1024
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8080
    webhook_log_level: str = "DEBUG"
    # One JSON object per line, for container log collectors
    webhook_log_json: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()


@dataclass(frozen=True)
class WebhookSettings:
    """Immutable values the request path needs, resolved once at startup."""
    secret: bytes
    script: Path
    interpreter: str = "bash"

    def __repr__(self) -> str:
        return f"WebhookSettings(script={self.script!r}, interpreter={self.interpreter!r})"


def resolve_webhook_settings(config: AppConfig) -> WebhookSettings:
    """
    Build the webhook settings from the raw configuration.

    Raises:
        ConfigurationError: If WEBHOOK_SECRET or WEBHOOK_SCRIPT is unset or empty
    """
    if not config.webhook_script:
        raise ConfigurationError("WEBHOOK_SCRIPT environment variable is not set")
    if not config.webhook_secret:
        raise ConfigurationError("WEBHOOK_SECRET environment variable is not set")
    return WebhookSettings(
        secret=config.webhook_secret.encode("utf-8"),
        script=Path(config.webhook_script),
        interpreter=config.webhook_interpreter,
    )
