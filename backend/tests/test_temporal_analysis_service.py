"""
Unit Tests for Temporal Analysis Service

Tests window filtering, pressure, momentum, key factors and the
per-window goal probabilities.
"""

import math

import pytest

from src.domain.entities.entities import (
    EventType,
    FixtureContext,
    ScoringMinuteBucket,
    TeamSeasonStats,
    TemporalWindow,
    WindowStatus,
)
from src.domain.services.temporal_analysis_service import (
    PREDICTION_WINDOWS,
    TemporalAnalysisService,
    filter_events_by_window,
    split_attack_sequences,
)

from conftest import AWAY_ID, HOME_ID


FIRST_15 = TemporalWindow(0, 15, "First 15")
FIRST_HALF_END = TemporalWindow(35, 45, "First Half End")
SECOND_HALF_START = TemporalWindow(45, 55, "Second Half Start")
FINAL_10 = TemporalWindow(80, 90, "Final 10")


@pytest.fixture
def service():
    return TemporalAnalysisService()


@pytest.fixture
def context():
    """Season histograms: 0.6 + 0.4 goals per match in the 75-90 bucket."""
    return FixtureContext(
        fixture_id=1001,
        home_season_stats=TeamSeasonStats(
            team_id=HOME_ID,
            matches_played=10,
            scoring_minutes=(
                ScoringMinuteBucket("0-15", 2),
                ScoringMinuteBucket("75-90", 6),
            ),
        ),
        away_season_stats=TeamSeasonStats(
            team_id=AWAY_ID,
            matches_played=10,
            scoring_minutes=(ScoringMinuteBucket("75-90", 4),),
        ),
    )


class TestWindows:
    """Tests for the fixed window set and window status."""

    def test_fixed_window_set(self):
        assert [(w.start, w.end, w.label) for w in PREDICTION_WINDOWS] == [
            (0, 15, "First 15"),
            (35, 45, "First Half End"),
            (45, 55, "Second Half Start"),
            (80, 90, "Final 10"),
        ]

    def test_status_boundaries(self):
        """Bounds are inclusive: a window is active through its end minute."""
        assert FIRST_HALF_END.status_at(34) == WindowStatus.UPCOMING
        assert FIRST_HALF_END.status_at(35) == WindowStatus.ACTIVE
        assert FIRST_HALF_END.status_at(45) == WindowStatus.ACTIVE
        assert FIRST_HALF_END.status_at(46) == WindowStatus.ELAPSED


class TestFilterEventsByWindow:
    """Tests for event selection."""

    def test_events_inside_window(self, event_factory):
        events = [event_factory(m) for m in (10, 15, 16, 33)]
        result = filter_events_by_window(events, FIRST_15)
        assert [e.minute for e in result] == [10, 15]

    def test_build_up_widens_start(self, event_factory):
        """The lookback adds five minutes before the window start."""
        events = [event_factory(m) for m in (29, 30, 33, 45, 46)]
        result = filter_events_by_window(events, FIRST_HALF_END, include_build_up=True)
        assert [e.minute for e in result] == [30, 33, 45]

    def test_stoppage_time_counts(self, event_factory):
        """45+2 falls after the first-half window and inside the next one."""
        event = event_factory(45, extra_minute=2)
        assert filter_events_by_window([event], FIRST_HALF_END) == []
        assert filter_events_by_window([event], SECOND_HALF_START) == [event]

    def test_empty(self):
        assert filter_events_by_window([], FINAL_10) == []


class TestPressureIndex:
    """Tests for the pressure index."""

    def test_weighted_rates(self, service, event_factory):
        events = [event_factory(m) for m in (2, 5, 9)]
        assert service.calculate_pressure_index(events, 15) == pytest.approx(0.1)

        events += [
            event_factory(10, type=EventType.CORNER),
            event_factory(11, type=EventType.CORNER),
            event_factory(12, type=EventType.YELLOW_CARD),
        ]
        expected = 3 / 15 * 0.5 + 2 / 15 * 0.3 + 1 / 15 * 0.2
        assert service.calculate_pressure_index(events, 15) == pytest.approx(expected)

    def test_capped_at_one(self, service, event_factory):
        events = [event_factory(80 + i % 10) for i in range(20)]
        assert service.calculate_pressure_index(events, 10) == 1.0

    def test_zero_length_window(self, service, event_factory):
        assert service.calculate_pressure_index([event_factory(10)], 0) == 0.0


class TestAttackMomentum:
    """Tests for attack sequence momentum."""

    def test_split_sequences(self, event_factory):
        """A gap over two minutes starts a new sequence."""
        events = [event_factory(m) for m in (16, 10, 12, 15)]
        sequences = split_attack_sequences(events)
        assert [[e.minute for e in s] for s in sequences] == [[10, 12], [15, 16]]

    def test_no_events(self, service):
        assert service.analyze_attack_sequence([]) == 0.0

    def test_single_goal(self, service, event_factory):
        """Goal weight 1.0 times a length factor of 1/5."""
        events = [event_factory(20, type=EventType.GOAL)]
        assert service.analyze_attack_sequence(events) == pytest.approx(0.2)

    def test_averaged_over_sequences(self, service, event_factory):
        events = [event_factory(10), event_factory(20, type=EventType.GOAL)]
        assert service.analyze_attack_sequence(events) == pytest.approx((0.1 * 0.2 + 1.0 * 0.2) / 2)

    def test_capped_at_one(self, service, event_factory):
        events = [event_factory(m, type=EventType.GOAL) for m in (10, 11, 12, 13, 14)]
        assert service.analyze_attack_sequence(events) == 1.0

    def test_event_weights(self, service, event_factory):
        """Dangerous free kicks outweigh routine ones."""
        dangerous = [event_factory(10, type=EventType.FREEKICK, is_dangerous=True)]
        routine = [event_factory(10, type=EventType.FREEKICK)]
        assert service.analyze_attack_sequence(dangerous) == pytest.approx(0.4 * 0.2)
        assert service.analyze_attack_sequence(routine) == pytest.approx(0.2 * 0.2)

    def test_team_filter(self, service, event_factory):
        events = [event_factory(85, type=EventType.GOAL, team_id=AWAY_ID)]
        assert service.calculate_attack_momentum(events, FINAL_10, team_id=HOME_ID) == 0.0
        assert service.calculate_attack_momentum(events, FINAL_10, team_id=AWAY_ID) == pytest.approx(0.2)


class TestKeyFactors:
    """Tests for key factor rules."""

    def test_no_events_is_normal_play(self, service):
        assert service.identify_key_factors([], FINAL_10) == ["Normal play"]

    def test_early_pressure(self, service, event_factory):
        events = [event_factory(m) for m in (3, 6, 9)]
        assert service.identify_key_factors(events, FIRST_15) == [
            "3 shots in last 15min",
            "Early pressure",
        ]

    def test_late_game_corners_and_cards(self, service, event_factory):
        events = [
            event_factory(81, type=EventType.FREEKICK, reason="Corner"),
            event_factory(83, type=EventType.FREEKICK, reason="corner kick"),
            event_factory(84, type=EventType.YELLOW_CARD),
        ]
        assert service.identify_key_factors(events, FINAL_10) == [
            "2 corners",
            "1 cards",
            "Late game pressure",
        ]

    def test_high_foul_count(self, service, event_factory):
        events = [event_factory(m, type=EventType.FREEKICK) for m in (36, 38, 40)]
        assert service.identify_key_factors(events, FIRST_HALF_END) == ["High foul count"]


class TestWindowProbability:
    """Tests for window probabilities and status handling."""

    def test_zero_events_every_window_normal_play(self, service):
        analyses = service.analyze([], minute=0)
        assert len(analyses) == 4
        for analysis in analyses:
            assert list(analysis.key_factors) == ["Normal play"]

    def test_base_probability_scaled_by_window_weight(self, service):
        analyses = service.analyze([], minute=0)
        assert [a.probability for a in analyses] == pytest.approx([0.06, 0.045, 0.045, 0.06])

    def test_live_path_bounds(self, service, event_factory):
        """Live probabilities stay within [0.01, 0.95] however busy the match."""
        events = [
            event_factory(m, type=t, is_dangerous=True)
            for m in range(0, 91, 2)
            for t in (EventType.SHOT, EventType.FREEKICK, EventType.RED_CARD, EventType.GOAL)
        ]
        for minute in (0, 30, 50, 85):
            for analysis in service.analyze(events, minute):
                if analysis.status != WindowStatus.ELAPSED:
                    assert 0.01 <= analysis.probability <= 0.95

    def test_elapsed_windows_are_zero(self, service, event_factory):
        events = [event_factory(m) for m in (5, 10, 40, 50)]
        analyses = service.analyze(events, minute=60)

        statuses = [a.status for a in analyses]
        assert statuses == [
            WindowStatus.ELAPSED,
            WindowStatus.ELAPSED,
            WindowStatus.ELAPSED,
            WindowStatus.UPCOMING,
        ]
        assert [a.probability for a in analyses[:3]] == [0.0, 0.0, 0.0]
        assert analyses[3].probability > 0

    def test_elapsed_from_minute_after_end(self, service):
        at_end = service.analyze_window([], FIRST_15, minute=15)
        after = service.analyze_window([], FIRST_15, minute=16)
        assert at_end.status == WindowStatus.ACTIVE
        assert at_end.probability > 0
        assert after.status == WindowStatus.ELAPSED
        assert after.probability == 0.0

    def test_historical_probability(self, service, context):
        """Bucket rates add up to λ; P(goal) = 1 - e^(-λ)."""
        historical = service.calculate_historical_probability(
            FINAL_10, context.home_season_stats, context.away_season_stats
        )
        assert historical == pytest.approx(1 - math.exp(-1.0))

    def test_historical_probability_one_team(self, service, context):
        historical = service.calculate_historical_probability(FIRST_15, context.home_season_stats, None)
        assert historical == pytest.approx(1 - math.exp(-0.2))

    def test_historical_probability_missing(self, service):
        assert service.calculate_historical_probability(FINAL_10, None, None) is None

    def test_upcoming_window_favours_history(self, service, context):
        analysis = service.analyze_window([], FINAL_10, minute=60, context=context)
        expected = 0.8 * (1 - math.exp(-1.0)) + 0.2 * 0.06
        assert analysis.status == WindowStatus.UPCOMING
        assert analysis.probability == pytest.approx(expected)

    def test_active_window_weight_decays(self, service, context):
        """Halfway through the window history and live count equally."""
        assert service.historical_weight(FINAL_10, 80) == pytest.approx(0.8)
        assert service.historical_weight(FINAL_10, 85) == pytest.approx(0.5)
        assert service.historical_weight(FINAL_10, 90) == pytest.approx(0.2)

        analysis = service.analyze_window([], FINAL_10, minute=85, context=context)
        assert analysis.probability == pytest.approx(0.5 * (1 - math.exp(-1.0)) + 0.5 * 0.06)

    def test_lookback_only_feeds_pressure(self, service, event_factory):
        """Events just before the window raise pressure but are not window factors."""
        events = [event_factory(m, is_dangerous=True) for m in (31, 32, 33)]
        analysis = service.analyze_window(events, FIRST_HALF_END, minute=40)

        assert list(analysis.key_factors) == ["Normal play"]
        assert analysis.pressure_index == pytest.approx(3 / 10 * 0.5)
        assert analysis.danger_ratio == 0.0

    def test_lookback_cards_do_not_add_to_probability(self, service, event_factory):
        """Set pieces and cards only count inside the window."""
        card = [event_factory(33, type=EventType.YELLOW_CARD)]
        inside = [event_factory(38, type=EventType.YELLOW_CARD)]

        assert service.calculate_live_probability(FIRST_HALF_END, [], 0.0, 0.0) == pytest.approx(0.045)
        lookback = service.analyze_window(card, FIRST_HALF_END, minute=36)
        window = service.analyze_window(inside, FIRST_HALF_END, minute=36)

        assert lookback.pressure_index == window.pressure_index
        assert window.probability - lookback.probability == pytest.approx(0.05 * 0.3)

    def test_descriptive_fields(self, service, event_factory):
        events = [
            event_factory(82, is_dangerous=True),
            event_factory(84),
            event_factory(86, type=EventType.FREEKICK),
            event_factory(88, type=EventType.SUBSTITUTION),
        ]
        analysis = service.analyze_window(events, FINAL_10, minute=70)

        assert analysis.danger_ratio == pytest.approx(1 / 4)
        assert analysis.shot_frequency == pytest.approx(2 / 10)
        assert analysis.set_piece_count == 1
        assert analysis.goal_intensity == pytest.approx(analysis.pressure_index * 0.8)
        assert analysis.pattern_strength == pytest.approx(1 * 0.5 + 0.2 * 0.5)


class TestTemporalGoalProbability:
    """Tests for the full temporal record."""

    def test_summary_with_factors(self, service, snapshot_factory, event_factory):
        events = [event_factory(m) for m in (81, 82, 83)]
        result = service.build_temporal_goal_probability(snapshot_factory(minute=70, events=events))
        assert result.summary == "9% Goal in Final 10: 3 shots in last 10min + Late game pressure"

    def test_summary_normal_play(self, service, snapshot_factory):
        result = service.build_temporal_goal_probability(snapshot_factory(minute=60))
        assert result.summary == "6% Goal in Final 10"

    def test_summary_after_full_time_falls_back(self, service, snapshot_factory):
        result = service.build_temporal_goal_probability(snapshot_factory(minute=95))
        assert result.summary == "0% Goal in First 15"
        assert result.highest_first_half is None
        assert result.highest_second_half is None

    def test_no_windows(self, snapshot_factory):
        result = TemporalAnalysisService(windows=[]).build_temporal_goal_probability(snapshot_factory())
        assert result.summary == "No temporal data available"

    def test_half_highlights(self, service, snapshot_factory):
        result = service.build_temporal_goal_probability(snapshot_factory(minute=30))
        assert result.highest_first_half.window.label == "First Half End"
        assert result.highest_second_half.window.label == "Final 10"

    def test_team_comparison(self, service, snapshot_factory, event_factory):
        events = [
            event_factory(76, type=EventType.FREEKICK, is_dangerous=True),
            event_factory(77, type=EventType.FREEKICK),
            event_factory(85),
        ]
        result = service.build_temporal_goal_probability(snapshot_factory(minute=86, events=events))

        home = result.home_comparison
        assert home.pressure_intensity == pytest.approx(0.1)
        assert home.defensive_actions == 0
        assert home.transition_speed == pytest.approx(2 / 3)
        assert home.set_piece_efficiency == pytest.approx(0.5)

        away = result.away_comparison
        assert away.pressure_intensity == 0.0
        assert away.transition_speed == 0.0

    def test_momentum_analysis(self, service, snapshot_factory, event_factory):
        events = [event_factory(85)]
        result = service.build_temporal_goal_probability(snapshot_factory(minute=60, events=events))

        momentum = result.momentum_analysis
        assert momentum.fatigue_index == pytest.approx(0.2)
        assert momentum.defense_stability == pytest.approx(1 - 0.05 / 2)
        assert momentum.attack_momentum == pytest.approx(0.1 * 0.2)

    def test_fatigue_is_capped(self, service, snapshot_factory):
        result = service.build_temporal_goal_probability(snapshot_factory(minute=110))
        assert result.momentum_analysis.fatigue_index == 0.3

    def test_key_moments(self, service, snapshot_factory, event_factory):
        goal = event_factory(12, type=EventType.GOAL)
        dangerous = event_factory(20, is_dangerous=True)
        card = event_factory(30, type=EventType.RED_CARD, team_id=AWAY_ID)
        result = service.build_temporal_goal_probability(
            snapshot_factory(minute=40, events=[goal, dangerous, card])
        )

        assert result.key_moments.pre_window_goals == (goal,)
        assert result.key_moments.pressure_build_up == (dangerous,)
        assert result.key_moments.defensive_errors == (card,)

    def test_deterministic(self, service, snapshot_factory, event_factory):
        snapshot = snapshot_factory(minute=50, events=[event_factory(m) for m in (40, 47, 49)])
        assert service.build_temporal_goal_probability(snapshot) == service.build_temporal_goal_probability(snapshot)
