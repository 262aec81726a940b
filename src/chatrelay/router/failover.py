"""
Chat router with provider failover.

Handles:
- Candidate ordering (pinned provider or auto mode)
- One upstream attempt per candidate, strictly in order
- Early exit on success, and on any failure when a provider was pinned
- A generic error once every auto-mode candidate has failed
"""

import json
import logging
import random
import uuid
from dataclasses import dataclass, field
from typing import Any, Union

from chatrelay.providers.base import BaseProvider, ProviderResponse
from chatrelay.providers.registry import ProviderRegistry
from chatrelay.router.config import ProviderProfile, RouterConfig
from chatrelay.router.models import ChatRequest
from chatrelay.router.selection import build_candidates

logger = logging.getLogger(__name__)

ALL_FAILED_MESSAGE = "No response received or limit request."

# Only successful replies carry CORS headers
SUCCESS_HEADERS = {"Access-Control-Allow-Origin": "*"}

# Upstream body length kept in invalid-response details
INVALID_BODY_PREVIEW = 300


@dataclass
class RouterResponse:
    """Terminal response for one chat request."""

    status_code: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)
    raw: str | None = None

    def render(self) -> bytes:
        """Encode the body, preferring the untouched upstream text."""
        if self.raw is not None:
            return self.raw.encode("utf-8")
        return json.dumps(self.body).encode("utf-8")


@dataclass(frozen=True)
class Success:
    """Candidate answered; stop and return the response."""

    response: RouterResponse


@dataclass(frozen=True)
class Skip:
    """Candidate failed; move on to the next one."""

    reason: dict[str, Any]


@dataclass(frozen=True)
class Fatal:
    """Candidate failed and the caller pinned it; stop with this response."""

    response: RouterResponse
    reason: dict[str, Any]


AttemptOutcome = Union[Success, Skip, Fatal]


def _error_response(status_code: int, body: dict[str, Any]) -> RouterResponse:
    return RouterResponse(status_code=status_code, body=body)


class ChatRouter:
    """
    Routes chat requests to upstream providers.

    The provider table and adapter registry are fixed at construction.
    Per-request state (candidates, last failure) lives only inside route(),
    so one instance serves concurrent requests.
    """

    def __init__(
        self,
        config: RouterConfig,
        registry: ProviderRegistry,
        rng: random.Random | None = None,
    ):
        """
        Initialize router.

        Args:
            config: Provider table
            registry: Wire adapters keyed by protocol
            rng: Random source for the auto-mode first pick
        """
        self.config = config
        self.registry = registry
        self._rng = rng

    def candidates_for(self, request: ChatRequest) -> tuple[str, ...]:
        """Ordered providers to try for a request."""
        return build_candidates(request.chatbot, request.client_chosen, self._rng)

    async def route(self, request: ChatRequest, request_id: str | None = None) -> RouterResponse:
        """
        Route a chat request.

        Args:
            request: Parsed chat request
            request_id: Identifier used in log lines (generated if missing)

        Returns:
            Exactly one terminal response
        """
        request_id = request_id or f"req_{uuid.uuid4().hex[:24]}"
        requested = request.chatbot
        candidates = self.candidates_for(request)

        logger.info(
            f"[{request_id}] [START REQUEST] requested={requested} "
            f"candidates={list(candidates)} clientChosen={request.client_chosen}"
        )

        last_error: dict[str, Any] | None = None
        for candidate in candidates:
            outcome = await self._attempt(request_id, request, candidate)

            if isinstance(outcome, Success):
                return outcome.response
            if isinstance(outcome, Fatal):
                return outcome.response

            last_error = outcome.reason

        logger.error(
            f"[{request_id}] [ALL MODELS FAILED] candidates={list(candidates)} "
            f"last_error={last_error}"
        )
        return _error_response(502, {"error": ALL_FAILED_MESSAGE})

    async def _attempt(
        self, request_id: str, request: ChatRequest, candidate: str
    ) -> AttemptOutcome:
        """Try one candidate and classify the result."""
        pinned = not request.is_auto
        profile = self.config.get(candidate)
        model = request.model or (profile.default_model if profile else None)

        logger.info(
            f"[{request_id}] [ATTEMPT] requested={request.chatbot} trying={candidate} "
            f"protocol={profile.protocol.value if profile else None} model={model} "
            f"has_key={bool(profile and profile.is_configured)}"
        )

        if profile is None or not profile.is_configured:
            message = f"API key missing for {candidate}"
            reason = {"error": message}
            logger.warning(f"[{request_id}] [SKIP] {reason}")
            if pinned:
                return Fatal(_error_response(502, {"error": message}), reason)
            return Skip(reason)

        provider = self.registry.get_or_raise(profile.protocol.value)

        try:
            reply = await provider.send_chat(profile.api_key, model, request.messages)
        except Exception as e:
            reason = {"error": str(e)}
            logger.error(f"[{request_id}] [REQUEST ERROR] candidate={candidate} err={e}")
            if pinned:
                response = _error_response(502, {"error": "Request error", "detail": reason})
                return Fatal(response, reason)
            return Skip(reason)

        return self._classify(request_id, candidate, pinned, provider, reply, profile)

    def _classify(
        self,
        request_id: str,
        candidate: str,
        pinned: bool,
        provider: BaseProvider,
        reply: ProviderResponse,
        profile: ProviderProfile,
    ) -> AttemptOutcome:
        """Turn an upstream reply into an attempt outcome."""
        display_name = provider.info.display_name
        logger.info(
            f"[{request_id}] [{display_name.upper()} ATTEMPT RESULT] candidate={candidate} "
            f"status={reply.status_code} len={len(reply.text)} "
            f"latency_ms={reply.latency_ms:.0f}"
        )

        if not reply.ok:
            reason = {"status": reply.status_code, "body": reply.text}
            logger.warning(f"[{request_id}] [{display_name.upper()} ERROR] {reason}")
            if pinned:
                response = _error_response(
                    reply.status_code, {"error": "Model error", "detail": reason}
                )
                return Fatal(response, reason)
            return Skip(reason)

        if not reply.parsed:
            reason = {
                "error": f"Invalid JSON from {display_name}",
                "detail": reply.text[:INVALID_BODY_PREVIEW],
            }
            logger.error(f"[{request_id}] [{display_name.upper()} PARSE ERROR] {reason}")
            if pinned:
                response = _error_response(
                    502, {"error": f"Invalid response from {display_name}", "detail": reason}
                )
                return Fatal(response, reason)
            return Skip(reason)

        logger.info(
            f"[{request_id}] [SUCCESS] candidate={candidate} protocol={profile.protocol.value}"
        )
        return Success(
            RouterResponse(
                status_code=provider.success_status(reply),
                body=reply.body,
                headers=dict(SUCCESS_HEADERS),
                raw=reply.text if provider.forwards_raw_body else None,
            )
        )
