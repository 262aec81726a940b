"""
OpenRouter provider.

OpenRouter speaks the OpenAI chat-completions format, which already matches
the response shape callers expect, so replies are passed through unchanged.
"""

import logging
from typing import Any

import httpx

from chatrelay.providers.base import (
    BaseProvider,
    ProviderInfo,
    ProviderRequest,
    WireProtocol,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(BaseProvider):
    """
    OpenRouter chat-completions adapter.

    Forwards the full message history with bearer-token authorization.
    """

    forwards_raw_body = True

    def __init__(
        self,
        name: str = WireProtocol.OPENROUTER.value,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(name, base_url, timeout=timeout, client=client)

    @property
    def info(self) -> ProviderInfo:
        """Get provider metadata."""
        return ProviderInfo(
            name=self.name,
            display_name="OpenRouter",
            protocol=WireProtocol.OPENROUTER,
            base_url=self._base_url,
            description="OpenRouter OpenAI-compatible chat completions",
        )

    def _build_headers(self, api_key: str) -> dict[str, str]:
        """Build request headers."""
        return {"Authorization": f"Bearer {api_key}"}

    def build_request(
        self, api_key: str, model: str, messages: list[Any]
    ) -> ProviderRequest:
        """Build a chat-completions request."""
        return ProviderRequest(
            path="/chat/completions",
            headers=self._build_headers(api_key),
            body={"model": model, "messages": messages or []},
        )

    def normalize(self, payload: Any) -> Any:
        """Return the upstream body as-is."""
        return payload
