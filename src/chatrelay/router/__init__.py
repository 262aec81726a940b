"""
chatrelay.router - Provider selection and failover.

Picks the providers to try for a chat request and walks them in order
until one answers.
"""

from chatrelay.router.config import (
    ConfigValidationError,
    ProviderProfile,
    RouterConfig,
    build_router_config,
    load_provider_overrides,
    validate_provider_overrides,
)
from chatrelay.router.failover import (
    ALL_FAILED_MESSAGE,
    ChatRouter,
    Fatal,
    RouterResponse,
    Skip,
    Success,
)
from chatrelay.router.models import AUTO, DEFAULT_CHATBOT, ChatRequest
from chatrelay.router.selection import CANONICAL_ORDER, build_candidates, pick_initial

__all__ = [
    # Request
    "AUTO",
    "DEFAULT_CHATBOT",
    "ChatRequest",
    # Selection
    "CANONICAL_ORDER",
    "build_candidates",
    "pick_initial",
    # Config
    "ConfigValidationError",
    "ProviderProfile",
    "RouterConfig",
    "build_router_config",
    "load_provider_overrides",
    "validate_provider_overrides",
    # Failover
    "ALL_FAILED_MESSAGE",
    "ChatRouter",
    "Fatal",
    "RouterResponse",
    "Skip",
    "Success",
]
