"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    http_proxy: str | None = Field(default=None, validation_alias="SAPOCI_HTTP_PROXY")
    user_agent: str | None = Field(default=None, validation_alias="SAPOCI_USER_AGENT")
    log_level: str = Field(default="INFO", validation_alias="SAPOCI_LOG_LEVEL")


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
