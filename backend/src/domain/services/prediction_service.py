"""
Prediction Service Module

This domain service contains the live outcome model:
1. Per-minute xG rates projected over the remaining minutes as Poisson rates
2. A Poisson score grid offset by the current score for win/draw/loss
3. A configurable blend with pre-match priors

This is a pure domain service with no external dependencies.
"""

from typing import Optional

import numpy as np

from src.domain.constants import MAX_ADDITIONAL_GOALS, REGULATION_MINUTES
from src.domain.entities.entities import LiveOutcome
from src.domain.services.blend_policy import BlendPolicy, fixed_blend
from src.domain.services.poisson import poisson_distribution
from src.domain.value_objects.value_objects import OutcomeProbabilities, Score


class PredictionService:
    """
    Domain service for live full-time result probabilities.

    The service never raises on valid inputs: every division is guarded and
    a missing prior falls back to uniform thirds.
    """

    def __init__(
        self,
        blend_policy: BlendPolicy = fixed_blend,
        max_goals: int = MAX_ADDITIONAL_GOALS,
    ):
        """
        Initialize the prediction service.

        Args:
            blend_policy: Maps the match minute to the live-estimate weight
            max_goals: Additional goals per side considered in the score grid
        """
        self.blend_policy = blend_policy
        self.max_goals = max_goals

    @staticmethod
    def project_remaining_rates(
        home_xg: float,
        away_xg: float,
        minute: int,
    ) -> tuple[float, float]:
        """
        Project each side's xG-per-minute rate over the remaining minutes.

        Args:
            home_xg: Home xG accumulated so far
            away_xg: Away xG accumulated so far
            minute: Elapsed minutes

        Returns:
            Tuple of (lambda_home, lambda_away) for the remaining time

        Example:
            minute 60, home xG 1.2 -> (1.2 / 60) * 30 = 0.6
        """
        if minute <= 0:
            return (0.0, 0.0)
        remaining = max(0, REGULATION_MINUTES - minute)
        return (
            (max(0.0, home_xg) / minute) * remaining,
            (max(0.0, away_xg) / minute) * remaining,
        )

    def calculate_outcome_probabilities(
        self,
        lambda_home: float,
        lambda_away: float,
        current_home: int = 0,
        current_away: int = 0,
    ) -> OutcomeProbabilities:
        """
        Calculate final result probabilities from the remaining-goal rates.

        Each cell (h, a) of the grid is the probability that the home side
        adds h goals and the away side adds a goals; it is credited to the
        outcome of the resulting final score.

        Args:
            lambda_home: Expected additional home goals
            lambda_away: Expected additional away goals
            current_home: Home goals already scored
            current_away: Away goals already scored

        Returns:
            OutcomeProbabilities normalized over the truncated grid
        """
        home_probs = poisson_distribution(lambda_home, self.max_goals)
        away_probs = poisson_distribution(lambda_away, self.max_goals)
        grid = np.outer(home_probs, away_probs)

        extra = np.arange(self.max_goals + 1)
        margin = np.subtract.outer(extra + current_home, extra + current_away)

        return OutcomeProbabilities.normalized(
            float(grid[margin > 0].sum()),
            float(grid[margin == 0].sum()),
            float(grid[margin < 0].sum()),
        )

    def calculate_live_outcome(
        self,
        score: Score,
        minute: int,
        home_xg: float,
        away_xg: float,
        prior: Optional[OutcomeProbabilities] = None,
    ) -> LiveOutcome:
        """
        Win/draw/loss probabilities for an in-progress fixture.

        - Kickoff (minute 0): the prior, or uniform thirds without one
        - No time remaining: certainty for the leader, or a certain draw
        - In progress: live Poisson grid blended with the prior

        Args:
            score: Current score
            minute: Elapsed minutes
            home_xg: Home xG accumulated so far
            away_xg: Away xG accumulated so far
            prior: Pre-match outcome probabilities, if available

        Returns:
            LiveOutcome with the probabilities and remaining-time rates
        """
        if minute <= 0:
            return LiveOutcome(probabilities=prior or OutcomeProbabilities.uniform())

        if minute >= REGULATION_MINUTES:
            return LiveOutcome(probabilities=OutcomeProbabilities.certain(score.leader))

        lambda_home, lambda_away = self.project_remaining_rates(home_xg, away_xg, minute)
        live = self.calculate_outcome_probabilities(
            lambda_home, lambda_away, score.home, score.away
        )
        blended = live.blend(prior or OutcomeProbabilities.uniform(), self.blend_policy(minute))

        return LiveOutcome(
            probabilities=blended,
            lambda_home=lambda_home,
            lambda_away=lambda_away,
        )
