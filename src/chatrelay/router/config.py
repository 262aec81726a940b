"""
Provider table configuration.

The provider table maps each chatbot name to its API key, wire protocol and
default upstream model. It is built once from settings (plus an optional
YAML overlay for default models) and handed to the router, which never
changes it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from chatrelay.providers.base import ProviderName, WireProtocol
from chatrelay.server.config import Settings

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


DEFAULT_MODELS = {
    ProviderName.GROK.value: "x-ai/grok-4.1-fast:free",
    ProviderName.GPT5.value: "openai/gpt-4-turbo",
    ProviderName.GEMINI.value: "gemini-2.5-flash",
}

PROVIDER_PROTOCOLS = {
    ProviderName.GROK.value: WireProtocol.OPENROUTER,
    ProviderName.GPT5.value: WireProtocol.OPENROUTER,
    ProviderName.GEMINI.value: WireProtocol.GEMINI,
}

# Keys allowed under providers.<name> in the YAML file
VALID_PROVIDER_KEYS = {"default_model"}


@dataclass(frozen=True)
class ProviderProfile:
    """Everything the router needs to call one provider."""

    name: str
    protocol: WireProtocol
    default_model: str
    api_key: str | None = None

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (without the key itself)."""
        return {
            "name": self.name,
            "protocol": self.protocol.value,
            "default_model": self.default_model,
            "configured": self.is_configured,
        }


class RouterConfig:
    """Read-only provider table."""

    def __init__(self, profiles: Mapping[str, ProviderProfile]):
        self._profiles = MappingProxyType(dict(profiles))

    @property
    def profiles(self) -> Mapping[str, ProviderProfile]:
        """Profiles keyed by provider name."""
        return self._profiles

    def get(self, name: str) -> ProviderProfile | None:
        """Get a provider profile, or None for unknown names."""
        return self._profiles.get(name)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {name: profile.to_dict() for name, profile in self._profiles.items()}

    @classmethod
    def from_keys(
        cls,
        api_keys: Mapping[str, str | None],
        default_models: Mapping[str, str] | None = None,
    ) -> "RouterConfig":
        """
        Build the provider table.

        Args:
            api_keys: API key per provider name (missing or None: unavailable)
            default_models: Overrides for DEFAULT_MODELS

        Returns:
            RouterConfig covering every ProviderName
        """
        models = {**DEFAULT_MODELS, **(default_models or {})}
        return cls(
            {
                provider.value: ProviderProfile(
                    name=provider.value,
                    protocol=PROVIDER_PROTOCOLS[provider.value],
                    default_model=models[provider.value],
                    api_key=api_keys.get(provider.value),
                )
                for provider in ProviderName
            }
        )


def validate_provider_overrides(providers_dict: dict[str, Any]) -> dict[str, str]:
    """
    Validate the ``providers`` section of a YAML config.

    Args:
        providers_dict: Raw ``providers`` mapping

    Returns:
        Default model override per provider name

    Raises:
        ConfigValidationError: If validation fails
    """
    if not isinstance(providers_dict, dict):
        raise ConfigValidationError("'providers' must be a mapping")

    overrides: dict[str, str] = {}
    for name, entry in providers_dict.items():
        if name not in DEFAULT_MODELS:
            raise ConfigValidationError(
                f"Unknown provider '{name}'. Valid providers: {sorted(DEFAULT_MODELS)}"
            )

        if not isinstance(entry, dict):
            raise ConfigValidationError(f"Provider '{name}': entry must be a mapping")

        for key in entry:
            if key not in VALID_PROVIDER_KEYS:
                raise ConfigValidationError(
                    f"Provider '{name}': unknown key '{key}'. "
                    f"Valid keys: {VALID_PROVIDER_KEYS}"
                )

        if "default_model" in entry:
            model = entry["default_model"]
            if not isinstance(model, str) or not model:
                raise ConfigValidationError(
                    f"Provider '{name}': default_model must be a non-empty string"
                )
            overrides[name] = model

    return overrides


def load_provider_overrides(config_path: Path) -> dict[str, str]:
    """
    Load default model overrides from a YAML file.

    Args:
        config_path: Path to YAML config file

    Returns:
        Default model override per provider name (empty if none)

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML syntax is invalid
        ConfigValidationError: If config validation fails
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        content = f.read()

    if not content.strip():
        return {}

    data = yaml.safe_load(content)

    if not isinstance(data, dict) or not data.get("providers"):
        return {}

    return validate_provider_overrides(data["providers"])


def build_router_config(settings: Settings) -> RouterConfig:
    """
    Build the provider table from settings.

    Args:
        settings: Application settings

    Returns:
        RouterConfig with keys from the environment and default models
        from the YAML file when one is configured
    """
    overrides: dict[str, str] = {}
    if settings.server.config_path:
        overrides = load_provider_overrides(settings.server.config_path)
        if overrides:
            logger.info(f"Default model overrides: {overrides}")

    return RouterConfig.from_keys(settings.providers.api_keys(), overrides)
