"""
Domain Value Objects Module

Value objects are immutable objects that are defined by their attributes rather than identity.
They encapsulate validation logic and provide type safety.
"""

from dataclasses import dataclass
from typing import Optional


# Tolerance used when checking that an outcome triple sums to one
PROBABILITY_SUM_TOLERANCE = 1e-6


@dataclass(frozen=True)
class Probability:
    """
    Represents a probability value (0.0 to 1.0).

    This value object ensures probability values are always valid.
    """
    value: float

    def __post_init__(self):
        if not 0.0 <= self.value <= 1.0:
            raise ValueError(f"Probability must be between 0 and 1, got {self.value}")

    def as_percentage(self) -> float:
        """Convert to percentage (0-100)."""
        return self.value * 100

    def __str__(self) -> str:
        return f"{self.as_percentage():.1f}%"


@dataclass(frozen=True)
class Score:
    """
    Represents a match score.

    Immutable value object for home and away goals.
    """
    home: int
    away: int

    def __post_init__(self):
        if self.home < 0 or self.away < 0:
            raise ValueError("Goals cannot be negative")

    @property
    def total(self) -> int:
        """Total goals in the match."""
        return self.home + self.away

    @property
    def both_scored(self) -> bool:
        """Check if both sides have scored at least once."""
        return self.home > 0 and self.away > 0

    @property
    def leader(self) -> Optional[str]:
        """
        Get the side currently ahead.

        Returns:
            'home', 'away', or None when level
        """
        if self.home > self.away:
            return "home"
        elif self.away > self.home:
            return "away"
        return None

    def __str__(self) -> str:
        return f"{self.home}-{self.away}"


@dataclass(frozen=True)
class OutcomeProbabilities:
    """
    Full-time result probabilities (home win, draw, away win).

    The triple always sums to 1 within PROBABILITY_SUM_TOLERANCE.
    """
    home: float
    draw: float
    away: float

    def __post_init__(self):
        for prob in (self.home, self.draw, self.away):
            if not 0.0 <= prob <= 1.0:
                raise ValueError(f"Probability must be between 0 and 1, got {prob}")
        total = self.home + self.draw + self.away
        if abs(total - 1.0) > PROBABILITY_SUM_TOLERANCE:
            raise ValueError(f"Match outcome probabilities must sum to 1, got {total}")

    @classmethod
    def uniform(cls) -> "OutcomeProbabilities":
        """Equal thirds, used when nothing is known about the fixture."""
        return cls(home=1 / 3, draw=1 / 3, away=1 / 3)

    @classmethod
    def certain(cls, leader: Optional[str]) -> "OutcomeProbabilities":
        """Deterministic result for the given leader ('home', 'away' or None for a draw)."""
        if leader == "home":
            return cls(home=1.0, draw=0.0, away=0.0)
        if leader == "away":
            return cls(home=0.0, draw=0.0, away=1.0)
        return cls(home=0.0, draw=1.0, away=0.0)

    @classmethod
    def normalized(cls, home: float, draw: float, away: float) -> "OutcomeProbabilities":
        """
        Build a triple from unnormalized non-negative weights.

        Falls back to uniform thirds when the weights sum to zero.
        """
        home, draw, away = max(0.0, home), max(0.0, draw), max(0.0, away)
        total = home + draw + away
        if total <= 0:
            return cls.uniform()
        return cls(home=home / total, draw=draw / total, away=away / total)

    def blend(self, prior: "OutcomeProbabilities", live_weight: float) -> "OutcomeProbabilities":
        """Weighted average of this (live) triple with a prior triple."""
        w = min(1.0, max(0.0, live_weight))
        return OutcomeProbabilities.normalized(
            self.home * w + prior.home * (1 - w),
            self.draw * w + prior.draw * (1 - w),
            self.away * w + prior.away * (1 - w),
        )

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.home, self.draw, self.away)
