"""Configuration management for the chat completion client."""

import logging
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Client settings with environment variable support."""

    # Provider settings
    api_key: Optional[str] = Field(default=None, description="API key", alias="OPENAI_API_KEY")
    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="API base URL",
        alias="OPENAI_BASE_URL"
    )
    organization: Optional[str] = Field(default=None, description="Organization ID", alias="OPENAI_ORGANIZATION")

    # Request settings
    default_model: str = Field(default="gpt-3.5-turbo", description="Model used by the CLI", alias="OPENAI_CHAT_DEFAULT_MODEL")
    request_timeout: float = Field(default=90, gt=0, description="Request timeout in seconds", alias="OPENAI_CHAT_REQUEST_TIMEOUT")
    empty_messages_limit: int = Field(
        default=300,
        ge=0,
        description="Consecutive blank stream lines tolerated before failing",
        alias="OPENAI_CHAT_EMPTY_MESSAGES_LIMIT"
    )
    log_level: str = Field(default="INFO", description="Log level", alias="OPENAI_CHAT_LOG_LEVEL")

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore", "populate_by_name": True}


# Global settings instance
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get client settings (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
        if not _settings.api_key:
            logger.warning("OPENAI_API_KEY is not configured; requests will be sent without credentials.")
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
