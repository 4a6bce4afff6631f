"""
Live Predictions Use Case Module

Use cases for generating predictions for live fixtures, combining the
live snapshot batch with per-fixture priors and season statistics.
"""

import asyncio
from typing import Optional, List
import logging

from src.domain.entities.entities import (
    FixtureContext,
    MatchEvent,
    MatchPrediction,
    MatchSnapshot,
    TeamWindowStats,
    WindowAnalysis,
)
from src.domain.exceptions import UpstreamFetchException
from src.domain.repositories.repositories import LiveFeedRepository
from src.domain.services.match_analysis_service import MatchAnalysisService
from src.application.dtos.dtos import (
    AttacksDTO,
    AttacksPairDTO,
    CardsDTO,
    CardsPairDTO,
    ExpectedGoalsDTO,
    GoalMarketsDTO,
    KeyMomentsDTO,
    LeagueDTO,
    MatchEventDTO,
    MatchPredictionDTO,
    MatchStatsDTO,
    MatchStatusDTO,
    MomentumAnalysisDTO,
    PredictionDTO,
    ShotsDTO,
    ShotsPairDTO,
    SidePairDTO,
    TeamComparisonDTO,
    TeamScoreDTO,
    TeamsDTO,
    TeamWindowStatsDTO,
    TemporalGoalProbabilityDTO,
    TemporalWindowDTO,
    WindowAnalysisDTO,
    WinProbabilityDTO,
)


logger = logging.getLogger(__name__)


class LivePredictionsBase:
    """Shared fetch and mapping logic for the live prediction use cases."""

    def __init__(
        self,
        feed: LiveFeedRepository,
        analysis_service: MatchAnalysisService,
    ):
        self.feed = feed
        self.analysis_service = analysis_service

    async def _get_context(self, fixture_id: int) -> Optional[FixtureContext]:
        """Fixture context, or None when the upstream fetch fails (live-only path)."""
        try:
            return await self.feed.get_fixture_context(fixture_id)
        except UpstreamFetchException as e:
            logger.warning(f"No fixture info for {fixture_id}, using live data only: {e}")
            return None

    def _predict(self, snapshot: MatchSnapshot, context: Optional[FixtureContext]) -> MatchPredictionDTO:
        prediction = self.analysis_service.analyze(snapshot, context)
        return self._prediction_to_dto(prediction)

    # --------------------------------------------------------------
    # Mapping
    # --------------------------------------------------------------

    @staticmethod
    def _event_to_dto(event: MatchEvent) -> MatchEventDTO:
        return MatchEventDTO(
            id=event.id,
            fixture_id=event.fixture_id,
            minute=event.minute,
            extra_minute=event.extra_minute,
            team_id=event.team_id,
            type=event.type.value,
            is_dangerous=event.is_dangerous,
            x=event.x,
            y=event.y,
            reason=event.reason,
        )

    @staticmethod
    def _window_to_dto(analysis: Optional[WindowAnalysis]) -> Optional[WindowAnalysisDTO]:
        if analysis is None:
            return None
        return WindowAnalysisDTO(
            window=TemporalWindowDTO(
                start=analysis.window.start,
                end=analysis.window.end,
                label=analysis.window.label,
            ),
            status=analysis.status.value,
            probability=analysis.probability,
            key_factors=list(analysis.key_factors),
            pressure_index=analysis.pressure_index,
            danger_ratio=analysis.danger_ratio,
            shot_frequency=analysis.shot_frequency,
            set_piece_count=analysis.set_piece_count,
            goal_intensity=analysis.goal_intensity,
            pattern_strength=analysis.pattern_strength,
            momentum=analysis.momentum,
        )

    @staticmethod
    def _team_window_to_dto(stats: TeamWindowStats) -> TeamWindowStatsDTO:
        return TeamWindowStatsDTO(
            pressure_intensity=stats.pressure_intensity,
            defensive_actions=stats.defensive_actions,
            transition_speed=stats.transition_speed,
            set_piece_efficiency=stats.set_piece_efficiency,
        )

    @staticmethod
    def _stats_to_dto(snapshot: MatchSnapshot) -> MatchStatsDTO:
        home = snapshot.home_stats
        away = snapshot.away_stats
        return MatchStatsDTO(
            possession=SidePairDTO(home=home.possession, away=away.possession),
            shots=ShotsPairDTO(
                home=ShotsDTO(
                    total=home.shots_total,
                    on_target=home.shots_on_target,
                    off_target=home.shots_off_target,
                ),
                away=ShotsDTO(
                    total=away.shots_total,
                    on_target=away.shots_on_target,
                    off_target=away.shots_off_target,
                ),
            ),
            attacks=AttacksPairDTO(
                home=AttacksDTO(total=home.attacks, dangerous=home.dangerous_attacks),
                away=AttacksDTO(total=away.attacks, dangerous=away.dangerous_attacks),
            ),
            corners=SidePairDTO(home=home.corners, away=away.corners),
            cards=CardsPairDTO(
                home=CardsDTO(yellow=home.yellow_cards, red=home.red_cards),
                away=CardsDTO(yellow=away.yellow_cards, red=away.red_cards),
            ),
        )

    def _prediction_to_dto(self, prediction: MatchPrediction) -> MatchPredictionDTO:
        """Convert a MatchPrediction entity to its API representation."""
        snapshot = prediction.snapshot
        temporal = prediction.temporal
        moments = temporal.key_moments

        return MatchPredictionDTO(
            fixture_id=snapshot.id,
            league=LeagueDTO(
                id=snapshot.league.id,
                name=snapshot.league.name,
                country=snapshot.league.country,
                logo_url=snapshot.league.logo_url,
            ),
            teams=TeamsDTO(
                home=TeamScoreDTO(
                    id=snapshot.home_team.id,
                    name=snapshot.home_team.name,
                    logo_url=snapshot.home_team.logo_url,
                    score=snapshot.score.home,
                ),
                away=TeamScoreDTO(
                    id=snapshot.away_team.id,
                    name=snapshot.away_team.name,
                    logo_url=snapshot.away_team.logo_url,
                    score=snapshot.score.away,
                ),
            ),
            status=MatchStatusDTO(
                minute=snapshot.minute,
                status=snapshot.status,
                is_live=snapshot.is_live,
            ),
            prediction=PredictionDTO(
                win_probability=WinProbabilityDTO(
                    home=prediction.win_probability.home,
                    draw=prediction.win_probability.draw,
                    away=prediction.win_probability.away,
                ),
                recommended_bet=prediction.recommendation.bet,
                confidence=prediction.recommendation.confidence,
                reasons=list(prediction.recommendation.reasons),
                goals=GoalMarketsDTO(
                    over_15=prediction.goals.over_15,
                    over_25=prediction.goals.over_25,
                    over_35=prediction.goals.over_35,
                    btts=prediction.goals.btts,
                ),
                expected_goals=ExpectedGoalsDTO(home=prediction.home_xg, away=prediction.away_xg),
            ),
            stats=self._stats_to_dto(snapshot),
            temporal_goal_probability=TemporalGoalProbabilityDTO(
                windows=[self._window_to_dto(w) for w in temporal.windows],
                key_moments=KeyMomentsDTO(
                    pre_window_goals=[self._event_to_dto(e) for e in moments.pre_window_goals],
                    pressure_build_up=[self._event_to_dto(e) for e in moments.pressure_build_up],
                    defensive_errors=[self._event_to_dto(e) for e in moments.defensive_errors],
                ),
                team_comparison=TeamComparisonDTO(
                    home=self._team_window_to_dto(temporal.home_comparison),
                    away=self._team_window_to_dto(temporal.away_comparison),
                ),
                momentum_analysis=MomentumAnalysisDTO(
                    attack_momentum=temporal.momentum_analysis.attack_momentum,
                    defense_stability=temporal.momentum_analysis.defense_stability,
                    fatigue_index=temporal.momentum_analysis.fatigue_index,
                ),
                summary=temporal.summary,
                highest_first_half=self._window_to_dto(temporal.highest_first_half),
                highest_second_half=self._window_to_dto(temporal.highest_second_half),
                last_updated=prediction.last_updated,
            ),
            last_updated=prediction.last_updated,
        )


class GetLivePredictionsUseCase(LivePredictionsBase):
    """
    Use case for getting predictions for every live fixture.

    Fixture info is fetched concurrently for the whole batch; a failed fetch
    only moves that fixture to the live-only path.
    """

    async def execute(self) -> List[MatchPredictionDTO]:
        """
        Get live fixtures with predictions.

        Returns:
            List of MatchPredictionDTO in live-feed order

        Raises:
            UpstreamFetchException: If the live batch itself cannot be fetched
        """
        snapshots = await self.feed.get_live_snapshots()
        if not snapshots:
            return []

        contexts = await asyncio.gather(*(self._get_context(s.id) for s in snapshots))

        results = [
            self._predict(snapshot, context)
            for snapshot, context in zip(snapshots, contexts)
        ]
        logger.info(f"Generated {len(results)} live predictions")
        return results


class GetLivePredictionUseCase(LivePredictionsBase):
    """Use case for getting the prediction of a single live fixture."""

    async def execute(self, fixture_id: int) -> Optional[MatchPredictionDTO]:
        """
        Get the prediction for one fixture of the current live batch.

        Returns:
            MatchPredictionDTO, or None when the fixture is not live
        """
        snapshots = await self.feed.get_live_snapshots()
        snapshot = next((s for s in snapshots if s.id == fixture_id), None)
        if snapshot is None:
            return None

        context = await self._get_context(fixture_id)
        return self._predict(snapshot, context)
