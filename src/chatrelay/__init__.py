"""
chatrelay - Chat relay with provider failover

Forwards chat requests to Grok, GPT-5 (both via OpenRouter) or Gemini,
normalizes the replies to a single ``{choices: [{message: {content}}]}``
shape, and in auto mode falls back to the other providers on failure.

Example usage:
    # Start the server
    $ chatrelay serve

    # Show which providers have API keys
    $ chatrelay providers

    # Send a message through a running server
    $ chatrelay chat "hello" --chatbot auto
"""

__version__ = "0.1.0"

from chatrelay.providers import (
    GeminiProvider,
    OpenRouterProvider,
    ProviderName,
    WireProtocol,
)
from chatrelay.router import (
    ChatRequest,
    ChatRouter,
    RouterConfig,
    RouterResponse,
    build_candidates,
)

__all__ = [
    # Version info
    "__version__",
    # Providers
    "GeminiProvider",
    "OpenRouterProvider",
    "ProviderName",
    "WireProtocol",
    # Router
    "ChatRequest",
    "ChatRouter",
    "RouterConfig",
    "RouterResponse",
    "build_candidates",
]
