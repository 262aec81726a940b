"""
Google Gemini provider.

Sends the first chat message to the Gemini generateContent endpoint and
converts the reply into the ``{choices: [{message: {content}}]}`` shape.
"""

import logging
from typing import Any, Callable

import httpx

from chatrelay.providers.base import (
    BaseProvider,
    ProviderInfo,
    ProviderRequest,
    ProviderResponse,
    WireProtocol,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


def _candidate_part_text(payload: Any) -> Any:
    """candidates[0].content.parts[0].text"""
    try:
        return payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


def _output_content(payload: Any) -> Any:
    """output[0].content"""
    try:
        return payload["output"][0]["content"]
    except (KeyError, IndexError, TypeError):
        return None


# Tried in order, first non-empty result wins
CONTENT_EXTRACTORS: list[Callable[[Any], Any]] = [
    _candidate_part_text,
    _output_content,
]


def extract_content(payload: Any) -> Any:
    """
    Extract the reply text from a Gemini response body.

    Args:
        payload: Decoded Gemini response

    Returns:
        First non-empty value found by CONTENT_EXTRACTORS, or ""
    """
    for extractor in CONTENT_EXTRACTORS:
        content = extractor(payload)
        if content:
            return content
    return ""


def first_message_text(messages: list[Any]) -> Any:
    """Return messages[0].content, or "" when there is none."""
    if not messages or not isinstance(messages[0], dict):
        return ""
    return messages[0].get("content") or ""


class GeminiProvider(BaseProvider):
    """
    Google Gemini API adapter.

    Only the first message is forwarded; earlier turns are not part of the
    Gemini request.
    """

    def __init__(
        self,
        name: str = WireProtocol.GEMINI.value,
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
            display_name="Gemini",
            protocol=WireProtocol.GEMINI,
            base_url=self._base_url,
            description="Google Gemini generateContent API",
        )

    def build_request(
        self, api_key: str, model: str, messages: list[Any]
    ) -> ProviderRequest:
        """Build a generateContent request with the key as a query parameter."""
        return ProviderRequest(
            path=f"/v1beta/models/{model}:generateContent",
            params={"key": api_key},
            body={"contents": [{"parts": [{"text": first_message_text(messages)}]}]},
        )

    def normalize(self, payload: Any) -> dict[str, Any]:
        """Convert a Gemini response into the common choices envelope."""
        return {"choices": [{"message": {"content": extract_content(payload)}}]}

    def success_status(self, response: ProviderResponse) -> int:
        """Normalized Gemini replies are always reported as 200."""
        return 200
