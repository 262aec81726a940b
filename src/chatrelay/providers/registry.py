"""
Provider registry for managing wire adapters.

Maps each wire protocol to the adapter instance that speaks it. The registry
is built once at startup and shared read-only by all requests.
"""

import logging
from typing import Any

from chatrelay.providers.base import BaseProvider
from chatrelay.providers.gemini import GeminiProvider
from chatrelay.providers.openrouter import OpenRouterProvider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of wire adapters keyed by protocol name."""

    def __init__(self):
        """Initialize empty registry."""
        self._providers: dict[str, BaseProvider] = {}

    def register(self, provider: BaseProvider) -> None:
        """
        Register an adapter.

        Args:
            provider: Adapter instance to register

        Raises:
            ValueError: If an adapter with the same name already exists
        """
        if provider.name in self._providers:
            raise ValueError(f"Provider '{provider.name}' already registered")

        self._providers[provider.name] = provider
        logger.info(f"Registered provider: {provider.name}")

    def get(self, name: str) -> BaseProvider | None:
        """Get an adapter by protocol name, or None if not found."""
        return self._providers.get(name)

    def get_or_raise(self, name: str) -> BaseProvider:
        """
        Get an adapter by protocol name, raising if not found.

        Raises:
            KeyError: If adapter not found
        """
        provider = self.get(name)
        if provider is None:
            raise KeyError(f"Provider '{name}' not found")
        return provider

    async def close(self) -> None:
        """Close every adapter's HTTP client."""
        for provider in self._providers.values():
            await provider.close()


def create_default_registry(
    gemini_base_url: str | None = None,
    openrouter_base_url: str | None = None,
    timeout: float | None = None,
) -> ProviderRegistry:
    """
    Create a registry holding one adapter per wire protocol.

    Args:
        gemini_base_url: Override for the Gemini API base URL
        openrouter_base_url: Override for the OpenRouter API base URL
        timeout: Upstream timeout in seconds, None for no timeout

    Returns:
        Populated registry
    """
    registry = ProviderRegistry()

    gemini_kwargs: dict[str, Any] = {"timeout": timeout}
    if gemini_base_url:
        gemini_kwargs["base_url"] = gemini_base_url
    registry.register(GeminiProvider(**gemini_kwargs))

    openrouter_kwargs: dict[str, Any] = {"timeout": timeout}
    if openrouter_base_url:
        openrouter_kwargs["base_url"] = openrouter_base_url
    registry.register(OpenRouterProvider(**openrouter_kwargs))

    return registry
