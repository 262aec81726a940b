"""
Shared fixtures: a fake upstream behind httpx.MockTransport.
"""

from typing import Callable

import httpx
import pytest

from chatrelay.providers import GeminiProvider, OpenRouterProvider, ProviderRegistry
from chatrelay.router import RouterConfig

GEMINI_HOST = "generativelanguage.googleapis.com"

ALL_KEYS = {"grok": "grok-key", "gpt5": "gpt5-key", "gemini": "gemini-key"}


class FakeUpstream:
    """
    Records upstream calls and answers them per provider.

    Routes are keyed by provider name; openrouter calls are told apart by
    their bearer token (``<provider>-key``).
    """

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.routes: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, provider: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[provider] = handler

    def reply(self, provider: str, status_code: int = 200, **kwargs) -> None:
        self.on(provider, lambda request: httpx.Response(status_code, **kwargs))

    def fail(self, provider: str, message: str = "connection refused") -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self.on(provider, handler)

    def provider_for(self, request: httpx.Request) -> str:
        if request.url.host == GEMINI_HOST:
            return "gemini"
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")
        return token.removesuffix("-key")

    def called_providers(self) -> list[str]:
        return [self.provider_for(r) for r in self.calls]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        provider = self.provider_for(request)
        handler = self.routes.get(provider)
        if handler is None:
            return httpx.Response(500, text=f"no fake route for {provider}")
        return handler(request)


@pytest.fixture
def upstream() -> FakeUpstream:
    """Fake upstream with no routes."""
    return FakeUpstream()


@pytest.fixture
def registry(upstream: FakeUpstream) -> ProviderRegistry:
    """Adapters wired to the fake upstream."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream))
    registry = ProviderRegistry()
    registry.register(GeminiProvider(client=client))
    registry.register(OpenRouterProvider(client=client))
    return registry


@pytest.fixture
def full_config() -> RouterConfig:
    """Provider table with every key set."""
    return RouterConfig.from_keys(ALL_KEYS)
