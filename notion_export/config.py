"""
Notion Export - Configuration

Pydantic Settings for all configuration via environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Optional, Literal


class NotionSettings(BaseSettings):
    """Notion API configuration."""
    api_key: Optional[str] = Field(None, alias="NOTION_API_KEY")
    base_url: str = Field("https://api.notion.com/v1", alias="NOTION_BASE_URL")
    version: str = Field("2022-06-28", alias="NOTION_VERSION")
    timeout_seconds: float = Field(30.0, alias="NOTION_TIMEOUT_SECONDS")

    model_config = {"env_prefix": "", "extra": "ignore"}


class ExportSettings(BaseSettings):
    """Tree building and output configuration."""
    max_depth: int = Field(10, alias="EXPORT_MAX_DEPTH")
    max_retries: int = Field(3, ge=0, alias="EXPORT_MAX_RETRIES")
    default_retry_delay: float = Field(1.0, gt=0, alias="EXPORT_DEFAULT_RETRY_DELAY")
    format: Literal["json", "markdown"] = Field("json", alias="EXPORT_FORMAT")

    model_config = {"env_prefix": "", "extra": "ignore"}


class LogSettings(BaseSettings):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "WARNING", alias="LOG_LEVEL"
    )
    format: Literal["json", "text"] = Field("text", alias="LOG_FORMAT")

    model_config = {"env_prefix": "", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings aggregating all configuration."""
    notion: NotionSettings = Field(default_factory=NotionSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = {"env_prefix": "", "extra": "ignore"}


def get_settings() -> Settings:
    """Load settings from environment variables."""
    from dotenv import load_dotenv
    load_dotenv()
    return Settings()
