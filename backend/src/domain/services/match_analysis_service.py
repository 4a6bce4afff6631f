"""
Match Analysis Service Module

Composes the full prediction record for one live fixture from the xG
estimator, outcome engine, goal markets, temporal windows and the
recommendation selector.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from src.domain.entities.entities import FixtureContext, MatchPrediction, MatchSnapshot
from src.domain.services.blend_policy import BlendPolicy, fixed_blend
from src.domain.services.goal_market_service import GoalMarketService
from src.domain.services.prediction_service import PredictionService
from src.domain.services.recommendation_service import RecommendationService
from src.domain.services.temporal_analysis_service import TemporalAnalysisService
from src.domain.services.xg_service import ExpectedGoalsService
from src.utils.time_utils import get_current_time


logger = logging.getLogger(__name__)


class MatchAnalysisService:
    """
    Prediction aggregator.

    Pure and synchronous: the only non-deterministic input is the clock used
    to stamp `last_updated`. A missing or partial FixtureContext degrades to
    the live-only estimate instead of failing.
    """

    def __init__(
        self,
        blend_policy: BlendPolicy = fixed_blend,
        xg_service: Optional[ExpectedGoalsService] = None,
        prediction_service: Optional[PredictionService] = None,
        goal_market_service: Optional[GoalMarketService] = None,
        temporal_service: Optional[TemporalAnalysisService] = None,
        recommendation_service: Optional[RecommendationService] = None,
        clock: Callable[[], datetime] = get_current_time,
    ):
        self.blend_policy = blend_policy
        self.xg_service = xg_service or ExpectedGoalsService()
        self.prediction_service = prediction_service or PredictionService(blend_policy=blend_policy)
        self.goal_market_service = goal_market_service or GoalMarketService()
        self.temporal_service = temporal_service or TemporalAnalysisService()
        self.recommendation_service = recommendation_service or RecommendationService()
        self.clock = clock

    def analyze(
        self,
        snapshot: MatchSnapshot,
        context: Optional[FixtureContext] = None,
    ) -> MatchPrediction:
        """
        Run every estimator against one snapshot.

        Args:
            snapshot: Current fixture state
            context: Optional priors and season stats for the fixture

        Returns:
            MatchPrediction stamped with the injected clock
        """
        priors = context.priors if context else None

        home_xg = self.xg_service.team_xg(snapshot.events, snapshot.home_team.id, is_home_team=True)
        away_xg = self.xg_service.team_xg(snapshot.events, snapshot.away_team.id, is_home_team=False)

        outcome = self.prediction_service.calculate_live_outcome(
            score=snapshot.score,
            minute=snapshot.minute,
            home_xg=home_xg,
            away_xg=away_xg,
            prior=priors.outcome if priors else None,
        )

        goals = self.goal_market_service.calculate_markets(
            snapshot.score,
            outcome,
            priors=priors,
            live_weight=self.blend_policy(snapshot.minute),
        )

        temporal = self.temporal_service.build_temporal_goal_probability(snapshot, context)
        recommendation = self.recommendation_service.recommend(snapshot, outcome.probabilities, goals)

        logger.debug(
            f"Fixture {snapshot.id} @ {snapshot.minute}': {recommendation.bet} "
            f"({recommendation.confidence:.2f})"
        )

        return MatchPrediction(
            snapshot=snapshot,
            win_probability=outcome.probabilities,
            recommendation=recommendation,
            goals=goals,
            temporal=temporal,
            home_xg=home_xg,
            away_xg=away_xg,
            last_updated=self.clock(),
        )
