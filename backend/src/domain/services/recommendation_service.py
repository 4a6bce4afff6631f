"""
Recommendation Service Module

Reduces outcome and goal-market probabilities to one recommended market,
a confidence score and human-readable reasons.
"""

from src.domain.constants import (
    BET_AWAY_WIN,
    BET_DRAW,
    BET_HOME_WIN,
    BET_NO_CLEAR,
    BET_OVER_25,
)
from src.domain.entities.entities import (
    GoalMarketProbabilities,
    MatchSnapshot,
    Recommendation,
)
from src.domain.value_objects.value_objects import OutcomeProbabilities


class RecommendationService:
    """
    Picks the recommended market.

    Decision order, first match wins:
    1. Home Win if P(home) > 0.6
    2. Away Win if P(away) > 0.6
    3. Draw if P(draw) > 0.5
    4. Over 2.5 Goals if P(over 2.5) > 0.7
    5. No Clear Bet with a fixed confidence of 0.5
    """

    WIN_THRESHOLD = 0.6
    DRAW_THRESHOLD = 0.5
    OVER_25_THRESHOLD = 0.7
    NO_CLEAR_BET_CONFIDENCE = 0.5

    POSSESSION_THRESHOLD = 60.0
    SHOTS_ON_TARGET_RATIO = 2.0
    ATTACKS_RATIO = 1.5

    FALLBACK_REASON = "Based on balanced match statistics"

    def select_bet(
        self,
        outcome: OutcomeProbabilities,
        goals: GoalMarketProbabilities,
    ) -> tuple[str, float]:
        """
        Select the recommended market.

        Returns:
            Tuple of (bet label, confidence)
        """
        if outcome.home > self.WIN_THRESHOLD:
            return BET_HOME_WIN, outcome.home
        if outcome.away > self.WIN_THRESHOLD:
            return BET_AWAY_WIN, outcome.away
        if outcome.draw > self.DRAW_THRESHOLD:
            return BET_DRAW, outcome.draw
        if goals.over_25 > self.OVER_25_THRESHOLD:
            return BET_OVER_25, goals.over_25
        return BET_NO_CLEAR, self.NO_CLEAR_BET_CONFIDENCE

    def build_reasons(self, snapshot: MatchSnapshot) -> list[str]:
        """
        Rationale strings from raw in-play statistics.

        Independent of the selected bet; always returns at least one reason.
        """
        home = snapshot.home_stats
        away = snapshot.away_stats
        reasons = []

        if home.possession > self.POSSESSION_THRESHOLD:
            reasons.append(f"Home team controlling possession ({home.possession:.0f}%)")
        if away.possession > self.POSSESSION_THRESHOLD:
            reasons.append(f"Away team controlling possession ({away.possession:.0f}%)")

        if home.shots_on_target > away.shots_on_target * self.SHOTS_ON_TARGET_RATIO:
            reasons.append(
                f"Home team creating better chances ({home.shots_on_target} shots on target)"
            )
        elif away.shots_on_target > home.shots_on_target * self.SHOTS_ON_TARGET_RATIO:
            reasons.append(
                f"Away team creating better chances ({away.shots_on_target} shots on target)"
            )

        if home.attacks > away.attacks * self.ATTACKS_RATIO:
            reasons.append(f"Home team dominating attacks ({home.attacks} attacks)")
        elif away.attacks > home.attacks * self.ATTACKS_RATIO:
            reasons.append(f"Away team dominating attacks ({away.attacks} attacks)")

        if snapshot.score.both_scored:
            reasons.append("Both teams have scored already")

        return reasons or [self.FALLBACK_REASON]

    def recommend(
        self,
        snapshot: MatchSnapshot,
        outcome: OutcomeProbabilities,
        goals: GoalMarketProbabilities,
    ) -> Recommendation:
        bet, confidence = self.select_bet(outcome, goals)
        return Recommendation(
            bet=bet,
            confidence=min(1.0, max(0.0, confidence)),
            reasons=tuple(self.build_reasons(snapshot)),
        )
