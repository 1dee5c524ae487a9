# ABOUTME: Application configuration using pydantic-settings
# ABOUTME: Loads credentials, lookahead window and chapter mapping from environment and .env file

from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, SettingsError
from errors import ConfigurationError
from models import ChapterMapping


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Required settings
    solidarity_tech_api_key: str = Field(min_length=1)
    slack_bot_token: str = Field(min_length=1)
    # JSON array of {"chapterId", "channelId", "name", "pageUrl"} objects
    chapter_channel_mapping: List[ChapterMapping]

    # Optional settings with defaults
    events_days_ahead: int = Field(default=7, ge=1)
    exclude_tag: str = "slack-exclude"
    display_timezone: str = "America/New_York"

    # Upstream endpoints
    solidarity_tech_base_url: str = "https://api.solidarity.tech"
    slack_api_base_url: str = "https://slack.com/api"
    http_timeout_seconds: float = 30.0

    log_level: str = "INFO"

    # Langfuse observability settings (optional)
    langfuse_public_key: Optional[str] = None
    langfuse_secret_key: Optional[str] = None
    langfuse_host: str = "https://us.cloud.langfuse.com"

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore'
    )

    @field_validator('chapter_channel_mapping')
    @classmethod
    def mapping_not_empty(cls, value: List[ChapterMapping]) -> List[ChapterMapping]:
        if not value:
            raise ValueError('CHAPTER_CHANNEL_MAPPING must be a non-empty JSON array')
        return value

    @field_validator('display_timezone')
    @classmethod
    def timezone_exists(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f'Unknown time zone: {value}')
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.display_timezone)


# Lazy singleton instance
_settings = None


def get_settings() -> Settings:
    """
    Get or create the settings singleton.

    Raises:
        ConfigurationError: If a credential or the chapter mapping is
            missing, empty or malformed
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except (ValidationError, SettingsError) as e:
            raise ConfigurationError(str(e)) from e
    return _settings
