"""
Unit Tests for the live prediction use cases
"""

import asyncio
from datetime import datetime

import pytest

from src.application.use_cases.live_predictions_use_case import (
    GetLivePredictionsUseCase,
    GetLivePredictionUseCase,
)
from src.domain.entities.entities import FixtureContext, PreMatchPriors
from src.domain.exceptions import UpstreamFetchException
from src.domain.repositories.repositories import LiveFeedRepository
from src.domain.services.match_analysis_service import MatchAnalysisService
from src.domain.value_objects.value_objects import OutcomeProbabilities


class FakeFeed(LiveFeedRepository):
    """Live feed with canned snapshots; listed fixture ids fail their context fetch."""

    def __init__(self, snapshots, failing_contexts=(), live_error=None):
        self.snapshots = snapshots
        self.failing_contexts = set(failing_contexts)
        self.live_error = live_error
        self.context_requests = []

    async def get_live_snapshots(self):
        if self.live_error:
            raise self.live_error
        return list(self.snapshots)

    async def get_fixture_context(self, fixture_id):
        self.context_requests.append(fixture_id)
        if fixture_id in self.failing_contexts:
            raise UpstreamFetchException(f"info for {fixture_id} unavailable")
        return FixtureContext(
            fixture_id=fixture_id,
            priors=PreMatchPriors(outcome=OutcomeProbabilities(home=0.1, draw=0.2, away=0.7)),
        )


@pytest.fixture
def analysis_service():
    return MatchAnalysisService(clock=lambda: datetime(2026, 5, 1, 21, 0))


@pytest.fixture
def snapshots(snapshot_factory):
    return [
        snapshot_factory(fixture_id=1, minute=30),
        snapshot_factory(fixture_id=2, minute=75, home_goals=2),
        snapshot_factory(fixture_id=3, minute=10),
    ]


class TestGetLivePredictions:
    """Tests for the batch use case."""

    def test_one_prediction_per_fixture_in_order(self, snapshots, analysis_service):
        feed = FakeFeed(snapshots)
        results = asyncio.run(GetLivePredictionsUseCase(feed, analysis_service).execute())

        assert [r.fixture_id for r in results] == [1, 2, 3]
        assert sorted(feed.context_requests) == [1, 2, 3]
        assert results[1].teams.home.score == 2
        assert results[0].last_updated == datetime(2026, 5, 1, 21, 0)
        assert len(results[0].temporal_goal_probability.windows) == 4

    def test_context_failure_only_affects_that_fixture(self, snapshots, analysis_service):
        """Fixture 2 falls back to live-only, the others keep their priors."""
        use_case = GetLivePredictionsUseCase(FakeFeed(snapshots, failing_contexts={2}), analysis_service)
        results = asyncio.run(use_case.execute())

        live_only = asyncio.run(
            GetLivePredictionsUseCase(FakeFeed(snapshots, failing_contexts={1, 2, 3}), analysis_service).execute()
        )

        assert len(results) == 3
        assert results[1].prediction.win_probability == live_only[1].prediction.win_probability
        assert results[0].prediction.win_probability != live_only[0].prediction.win_probability

    def test_empty_batch(self, analysis_service):
        feed = FakeFeed([])
        assert asyncio.run(GetLivePredictionsUseCase(feed, analysis_service).execute()) == []
        assert feed.context_requests == []

    def test_live_feed_failure_propagates(self, analysis_service):
        feed = FakeFeed([], live_error=UpstreamFetchException("feed down"))
        with pytest.raises(UpstreamFetchException):
            asyncio.run(GetLivePredictionsUseCase(feed, analysis_service).execute())


class TestGetLivePrediction:
    """Tests for the single-fixture use case."""

    def test_found(self, snapshots, analysis_service):
        feed = FakeFeed(snapshots)
        result = asyncio.run(GetLivePredictionUseCase(feed, analysis_service).execute(2))

        assert result.fixture_id == 2
        assert result.status.minute == 75
        assert feed.context_requests == [2]

    def test_not_live(self, snapshots, analysis_service):
        feed = FakeFeed(snapshots)
        assert asyncio.run(GetLivePredictionUseCase(feed, analysis_service).execute(99)) is None
        assert feed.context_requests == []

    def test_mapped_payload(self, snapshot_factory, event_factory, analysis_service):
        snapshot = snapshot_factory(fixture_id=7, events=[event_factory(58, x=90.0, y=50.0, is_dangerous=True)])
        result = asyncio.run(
            GetLivePredictionUseCase(FakeFeed([snapshot]), analysis_service).execute(7)
        )

        assert result.league.name == "Premier League"
        assert result.status.is_live is True
        assert result.prediction.expected_goals.home > 0
        assert result.prediction.recommended_bet
        assert result.stats.possession.home == 50
        moments = result.temporal_goal_probability.key_moments
        assert [e.minute for e in moments.pressure_build_up] == [58]
