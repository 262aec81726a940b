"""
Base provider interface and types.

All wire adapters implement the BaseProvider abstract class. An adapter turns
``(api_key, model, messages)`` into one upstream HTTP call and turns the
upstream reply into a ProviderResponse. Adapters never decide whether to fall
back; that policy lives in the router.
"""

import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ProviderName(str, Enum):
    """Chatbots a caller can select, in canonical fallback order."""

    GROK = "grok"
    GPT5 = "gpt5"
    GEMINI = "gemini"


class WireProtocol(str, Enum):
    """Upstream wire protocol."""

    GEMINI = "gemini"
    OPENROUTER = "openrouter"


@dataclass
class ProviderRequest:
    """Upstream request built by an adapter."""

    path: str
    body: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    method: str = "POST"


@dataclass
class ProviderResponse:
    """Reply from an upstream provider."""

    status_code: int
    text: str
    body: Any = None
    error: str | None = None
    latency_ms: float = 0.0

    @property
    def ok(self) -> bool:
        """True for 2xx upstream statuses."""
        return 200 <= self.status_code < 300

    @property
    def parsed(self) -> bool:
        """True when the body was decoded and normalized."""
        return self.ok and self.error is None


@dataclass
class ProviderInfo:
    """Adapter metadata."""

    name: str
    display_name: str
    protocol: WireProtocol
    base_url: str
    description: str = ""


class BaseProvider(ABC):
    """
    Abstract base class for upstream wire adapters.

    Each adapter handles:
    - Request construction in the upstream format
    - Decoding and normalizing a successful upstream body

    Transport errors raised by httpx are not caught here; callers decide
    what a failed call means.
    """

    # Reply with the upstream bytes instead of re-encoding the normalized body
    forwards_raw_body: bool = False

    def __init__(
        self,
        name: str,
        base_url: str,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize provider.

        Args:
            name: Adapter name (the wire protocol it speaks)
            base_url: Upstream API base URL
            timeout: Upstream timeout in seconds, None for no timeout
            client: Pre-built HTTP client (tests inject a mock transport)
        """
        self.name = name
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    @abstractmethod
    def info(self) -> ProviderInfo:
        """Get adapter metadata."""
        ...

    @abstractmethod
    def build_request(
        self, api_key: str, model: str, messages: list[Any]
    ) -> ProviderRequest:
        """
        Build the upstream request.

        Args:
            api_key: Credential for the upstream service
            model: Upstream model identifier
            messages: Caller's chat messages

        Returns:
            Request to send upstream
        """
        ...

    @abstractmethod
    def normalize(self, payload: Any) -> Any:
        """
        Convert a decoded upstream body into the response body to return.

        Args:
            payload: JSON-decoded upstream body

        Returns:
            Body for the caller
        """
        ...

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def send_chat(
        self, api_key: str, model: str, messages: list[Any]
    ) -> ProviderResponse:
        """
        Send one chat request upstream.

        Args:
            api_key: Credential for the upstream service
            model: Upstream model identifier
            messages: Caller's chat messages

        Returns:
            Upstream reply; ``body`` is set only when the reply was 2xx
            and decoded, ``error`` only when a 2xx body was not JSON

        Raises:
            httpx.HTTPError: On transport failure
        """
        upstream = self.build_request(api_key, model, messages)
        client = await self._get_client()
        start_time = time.monotonic()

        response = await client.request(
            upstream.method,
            f"{self._base_url}{upstream.path}",
            params=upstream.params or None,
            headers={"Content-Type": "application/json", **upstream.headers},
            json=upstream.body,
        )

        latency_ms = (time.monotonic() - start_time) * 1000
        text = response.text
        result = ProviderResponse(
            status_code=response.status_code,
            text=text,
            latency_ms=latency_ms,
        )

        if not result.ok:
            return result

        try:
            payload = json.loads(text)
        except ValueError as e:
            result.error = str(e)
            return result

        result.body = self.normalize(payload)
        return result

    def success_status(self, response: ProviderResponse) -> int:
        """HTTP status to report to the caller for a successful reply."""
        return response.status_code

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
