"""
Poisson helpers shared by the outcome engine and the goal market estimator.
"""

import math
import functools

import numpy as np


@functools.lru_cache(maxsize=1024)
def poisson_probability(expected: float, actual: int) -> float:
    """
    Calculate Poisson probability.

    P(X = k) = (λ^k * e^(-λ)) / k!

    Args:
        expected: Expected value (λ)
        actual: Actual value (k)

    Returns:
        Probability of exactly 'actual' events occurring
    """
    if expected <= 0:
        return 0.0 if actual > 0 else 1.0

    return (math.pow(expected, actual) * math.exp(-expected)) / math.factorial(actual)


def poisson_distribution(expected: float, max_goals: int) -> np.ndarray:
    """
    Generate the Poisson mass function for 0..max_goals.

    Built by recurrence to avoid repeated factorial/pow calculations.
    Mass beyond max_goals is dropped, not folded into the last cell.
    """
    probs = np.zeros(max_goals + 1)
    if expected <= 0:
        probs[0] = 1.0
        return probs

    current_prob = math.exp(-expected)
    probs[0] = current_prob
    for k in range(1, max_goals + 1):
        current_prob *= expected / k
        probs[k] = current_prob

    return probs


def poisson_at_least(expected: float, goals_needed: int) -> float:
    """
    P(X >= goals_needed) for X ~ Poisson(expected).

    Computed as the complement of the cumulative mass up to goals_needed - 1.
    """
    if goals_needed <= 0:
        return 1.0
    if expected <= 0:
        return 0.0

    cumulative = float(poisson_distribution(expected, goals_needed - 1).sum())
    return min(1.0, max(0.0, 1.0 - cumulative))
