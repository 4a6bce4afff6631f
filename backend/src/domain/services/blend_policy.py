"""
Blend policies for combining live estimates with pre-match priors.

A policy maps the current match minute to the weight given to the live
estimate; the prior receives the remainder.
"""

from typing import Callable

from src.domain.constants import REGULATION_MINUTES


BlendPolicy = Callable[[int], float]


def fixed_blend(minute: int) -> float:
    """Unweighted average of live and prior, whatever the minute."""
    return 0.5


def ramped_blend(minute: int) -> float:
    """Live weight ramps from 0.5 at kickoff to 1.0 at full time."""
    progress = max(0, minute) / REGULATION_MINUTES
    return min(1.0, max(0.5, 0.5 + 0.5 * progress))


BLEND_POLICIES: dict[str, BlendPolicy] = {
    "fixed": fixed_blend,
    "ramped": ramped_blend,
}


def get_blend_policy(name: str) -> BlendPolicy:
    """Look up a policy by its configuration name."""
    try:
        return BLEND_POLICIES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown blend policy '{name}'. Available policies: {sorted(BLEND_POLICIES)}"
        ) from None


def blend(live: float, prior: float, live_weight: float) -> float:
    """Weighted average of a live and a prior probability, clamped to [0, 1]."""
    w = min(1.0, max(0.0, live_weight))
    return min(1.0, max(0.0, live * w + prior * (1 - w)))
