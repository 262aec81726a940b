"""
Server configuration using Pydantic settings.

Server options are loaded from environment variables with the CHATRELAY_
prefix. Provider API keys use their own unprefixed variables. A YAML config
file can override server options and per-provider default models.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Server configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="CHATRELAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="127.0.0.1", description="Server bind host")
    port: int = Field(default=8787, description="Server bind port")
    log_level: str = Field(default="INFO", description="Log level")
    reload: bool = Field(default=False, description="Enable hot reload (dev mode)")

    # Static homepage served for every non-API path
    homepage_path: Path | None = Field(
        default=None, description="HTML file to serve instead of the bundled homepage"
    )

    # Upstream calls
    upstream_timeout: float | None = Field(
        default=None, description="Upstream timeout in seconds (unset: no timeout)"
    )

    # Config file path
    config_path: Path | None = Field(default=None, description="Path to YAML config file")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v


class ProviderSettings(BaseSettings):
    """Provider credential settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    grok_api_key: str | None = Field(
        default=None, alias="GROK_API_KEY", description="OpenRouter key used for grok"
    )
    gpt5_api_key: str | None = Field(
        default=None, alias="GPT5_API_KEY", description="OpenRouter key used for gpt5"
    )
    gemini_api_key: str | None = Field(
        default=None, alias="GEMINI_API_KEY", description="Google Gemini API key"
    )

    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        alias="CHATRELAY_GEMINI_BASE_URL",
        description="Gemini API base URL",
    )
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        alias="CHATRELAY_OPENROUTER_BASE_URL",
        description="OpenRouter API base URL",
    )

    def api_keys(self) -> dict[str, str | None]:
        """API key per provider name."""
        return {
            "grok": self.grok_api_key,
            "gpt5": self.gpt5_api_key,
            "gemini": self.gemini_api_key,
        }


class Settings(BaseSettings):
    """Combined application settings."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)

    def load_from_yaml(self, path: Path) -> None:
        """
        Load server settings from YAML file.

        The ``server`` section is merged over the current values and validated
        again, so YAML strings become the typed values the fields declare.

        Raises:
            pydantic.ValidationError: If a server value has the wrong type
        """
        if not path.exists():
            return

        with open(path) as f:
            config = yaml.safe_load(f)

        if not config:
            return

        if config.get("server"):
            self.server = ServerSettings.model_validate(
                {**self.server.model_dump(), **config["server"]}
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()

    # Load from config file if specified
    if settings.server.config_path:
        settings.load_from_yaml(settings.server.config_path)

    return settings
