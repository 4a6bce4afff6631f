"""
Goal Market Service Module

Over/under and both-teams-to-score probabilities from the same
remaining-time Poisson rates used by the outcome engine.
"""

import math
from typing import Optional

from src.domain.entities.entities import GoalMarketProbabilities, LiveOutcome, PreMatchPriors
from src.domain.services.blend_policy import blend
from src.domain.services.poisson import poisson_at_least
from src.domain.value_objects.value_objects import Score


class GoalMarketService:
    """
    Domain service for goal market probabilities.

    BTTS treats each side's "scores at least once more" as independent
    events; timing correlation between the two is ignored.
    """

    def over_probability(self, current_total: int, total_lambda: float, line: float) -> float:
        """
        Probability that the final total goes over a goal line.

        A line of 2.5 needs 3 goals in total. With X ~ Poisson(total_lambda)
        for the remaining goals, this is P(X >= floor(line) + 1 - current_total).

        Args:
            current_total: Goals already scored by both sides
            total_lambda: Combined expected remaining goals
            line: Goal line (1.5, 2.5, 3.5, ...)

        Returns:
            Probability in [0, 1]; exactly 1 once the line is already beaten
        """
        if current_total > line:
            return 1.0
        goals_needed = math.floor(line) + 1 - current_total
        return poisson_at_least(total_lambda, goals_needed)

    @staticmethod
    def scores_again_probability(current_goals: int, expected: float) -> float:
        """Probability a side has scored by full time: 1 if it already has, else 1 - e^(-λ)."""
        if current_goals >= 1:
            return 1.0
        return 1.0 - math.exp(-max(0.0, expected))

    def btts_probability(self, score: Score, lambda_home: float, lambda_away: float) -> float:
        return (
            self.scores_again_probability(score.home, lambda_home)
            * self.scores_again_probability(score.away, lambda_away)
        )

    def calculate_markets(
        self,
        score: Score,
        outcome: LiveOutcome,
        priors: Optional[PreMatchPriors] = None,
        live_weight: float = 0.5,
    ) -> GoalMarketProbabilities:
        """
        All goal markets for a fixture.

        Each live probability is blended with its pre-match counterpart when
        the provider supplied one; otherwise the live value stands alone.

        Args:
            score: Current score
            outcome: Live outcome carrying the remaining-time rates
            priors: Pre-match priors, if available
            live_weight: Weight of the live estimate in each blend
        """
        total_lambda = outcome.lambda_total
        live = {
            "over_15": self.over_probability(score.total, total_lambda, 1.5),
            "over_25": self.over_probability(score.total, total_lambda, 2.5),
            "over_35": self.over_probability(score.total, total_lambda, 3.5),
            "btts": self.btts_probability(score, outcome.lambda_home, outcome.lambda_away),
        }

        markets = {}
        for name, live_prob in live.items():
            prior = getattr(priors, name, None) if priors else None
            markets[name] = live_prob if prior is None else blend(live_prob, prior, live_weight)

        return GoalMarketProbabilities(**markets)
