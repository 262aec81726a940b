"""
chatrelay.providers - Upstream wire adapters.

- Gemini: Google Gemini generateContent API
- OpenRouter: OpenAI-compatible chat completions (grok and gpt5)
"""

from chatrelay.providers.base import (
    BaseProvider,
    ProviderInfo,
    ProviderName,
    ProviderRequest,
    ProviderResponse,
    WireProtocol,
)
from chatrelay.providers.gemini import GeminiProvider, extract_content
from chatrelay.providers.openrouter import OpenRouterProvider
from chatrelay.providers.registry import ProviderRegistry, create_default_registry

__all__ = [
    # Base classes
    "BaseProvider",
    "ProviderInfo",
    "ProviderName",
    "ProviderRequest",
    "ProviderResponse",
    "WireProtocol",
    # Registry
    "ProviderRegistry",
    "create_default_registry",
    # Providers
    "GeminiProvider",
    "OpenRouterProvider",
    "extract_content",
]
