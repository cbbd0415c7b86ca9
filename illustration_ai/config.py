"""Application configuration."""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from illustration_ai.utils.logging import get_logger

LOGGER = get_logger(__name__)


def find_env_file() -> Optional[Path]:
    """Find .env file in the package directory or the project root."""
    current_dir = os.path.dirname(os.path.abspath(__file__))

    possible_paths = [
        os.path.join(current_dir, ".env"),
        os.path.join(os.path.dirname(current_dir), ".env"),
    ]

    for path_str in possible_paths:
        if os.path.exists(path_str):
            path = Path(path_str)
            LOGGER.info(f"Found .env file at: {path}")
            return path

    return None


ENV_FILE = find_env_file()


class AnthropicSettings(BaseSettings):
    """Vision model service settings."""

    api_key: str = Field(default="", validation_alias="ANTHROPIC_API_KEY")
    api_url: str = Field(default="https://api.anthropic.com/v1/messages", validation_alias="ANTHROPIC_API_URL")
    model: str = Field(default="claude-sonnet-4-20250514", validation_alias="ANTHROPIC_MODEL")
    api_version: str = Field(default="2023-06-01", validation_alias="ANTHROPIC_VERSION")
    max_tokens: int = Field(default=8000, validation_alias="ANTHROPIC_MAX_TOKENS")
    timeout: int = Field(default=60, validation_alias="ANTHROPIC_TIMEOUT")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
    )

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


class SupabaseSettings(BaseSettings):
    """Template datastore settings. Templating is off unless both url and key are set."""

    url: str = Field(default="", validation_alias="SUPABASE_URL")
    key: str = Field(default="", validation_alias="SUPABASE_KEY")
    timeout: int = Field(default=15, validation_alias="SUPABASE_TIMEOUT")
    template_table: str = Field(default="illustration_templates", validation_alias="TEMPLATE_TABLE")
    usage_rpc: str = Field(default="increment_template_usage", validation_alias="TEMPLATE_USAGE_RPC")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
    )

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)


class ExtractionSettings(BaseSettings):
    """Pipeline behaviour switches."""

    parallel_stages: bool = Field(default=False, validation_alias="EXTRACTION_PARALLEL_STAGES")
    template_min_projections: int = Field(default=5, validation_alias="TEMPLATE_MIN_PROJECTIONS")

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_prefix="",
    )


class Settings(BaseSettings):
    """Unified application settings with nested models."""

    app_name: str = Field(default="Illustration AI", validation_alias="APP_NAME")
    app_version: str = "0.1.0"
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # API Settings
    api_prefix: str = "/api"
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")

    anthropic: AnthropicSettings = Field(default_factory=lambda: AnthropicSettings())
    supabase: SupabaseSettings = Field(default_factory=lambda: SupabaseSettings())
    extraction: ExtractionSettings = Field(default_factory=lambda: ExtractionSettings())

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def model_post_init(self, __context) -> None:
        """Log which collaborators are configured."""
        LOGGER.info(f"Anthropic API key present: {self.anthropic.configured}")
        if not self.supabase.configured:
            LOGGER.info("SUPABASE_URL/SUPABASE_KEY not set - running without template storage")


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
