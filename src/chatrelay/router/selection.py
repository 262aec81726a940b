"""
Candidate list construction.

Pinned requests get a single candidate. Auto requests get every provider,
starting with the caller's hint (or a random pick) and then the rest in
canonical order.
"""

import random

from chatrelay.providers.base import ProviderName
from chatrelay.router.models import AUTO

CANONICAL_ORDER: tuple[str, ...] = tuple(p.value for p in ProviderName)


def pick_initial(client_chosen: str | None, rng: random.Random | None = None) -> str:
    """
    Pick the first candidate for auto mode.

    Args:
        client_chosen: Caller's hint, honoured only if it names a known provider
        rng: Random source (module-level random when None)

    Returns:
        Provider name
    """
    if client_chosen in CANONICAL_ORDER:
        return client_chosen
    return (rng or random).choice(CANONICAL_ORDER)


def build_candidates(
    requested: str,
    client_chosen: str | None = None,
    rng: random.Random | None = None,
) -> tuple[str, ...]:
    """
    Build ordered list of providers to try.

    Args:
        requested: Requested chatbot name or "auto"
        client_chosen: Auto-mode hint
        rng: Random source for the auto-mode pick

    Returns:
        Candidates in attempt order; unknown pinned names pass through
    """
    if requested != AUTO:
        return (requested,)

    initial = pick_initial(client_chosen, rng)
    return (initial, *(p for p in CANONICAL_ORDER if p != initial))
