"""
Temporal Analysis Service Module

Goal-likelihood forecasts for fixed match-time windows.

For each window the service derives pressure, momentum and key factors from
the event stream, turns them into a live goal probability, and blends that
with the two teams' historical scoring rate for the matching period of the
season histogram. The weight given to history depends on the window status:

- Upcoming: history dominates (nothing observed yet)
- Active: history weight decays linearly as the window plays out
- Elapsed: probability is 0, the window can no longer produce a forecast goal
"""

import math
import logging
from typing import Iterable, Optional, Sequence

from src.domain.constants import (
    ATTACK_SEQUENCE_GAP_MINUTES,
    BUILD_UP_BUFFER_MINUTES,
    DEFAULT_WINDOW_WEIGHT,
    PREDICTION_WINDOWS_METADATA,
    REGULATION_MINUTES,
    WINDOW_FACTORS,
    WINDOW_SCORING_BUCKETS,
)
from src.domain.entities.entities import (
    EventType,
    FixtureContext,
    KeyMoments,
    MatchEvent,
    MatchSnapshot,
    MomentumAnalysis,
    TeamSeasonStats,
    TeamWindowStats,
    TemporalGoalProbability,
    TemporalWindow,
    WindowAnalysis,
    WindowStatus,
)


logger = logging.getLogger(__name__)


PREDICTION_WINDOWS: tuple[TemporalWindow, ...] = tuple(
    TemporalWindow(**meta) for meta in PREDICTION_WINDOWS_METADATA
)

NORMAL_PLAY = "Normal play"


def filter_events_by_window(
    events: Iterable[MatchEvent],
    window: TemporalWindow,
    include_build_up: bool = False,
) -> list[MatchEvent]:
    """
    Events whose minute (stoppage time included) falls inside the window.

    Args:
        events: Match events
        window: Temporal window (bounds inclusive)
        include_build_up: Widen the window start by BUILD_UP_BUFFER_MINUTES

    Returns:
        Matching events in feed order
    """
    buffer = BUILD_UP_BUFFER_MINUTES if include_build_up else 0
    return [e for e in events if window.start - buffer <= e.elapsed <= window.end]


def split_attack_sequences(events: Iterable[MatchEvent]) -> list[list[MatchEvent]]:
    """Group time-ordered events into sequences; a gap over ATTACK_SEQUENCE_GAP_MINUTES starts a new one."""
    sequences: list[list[MatchEvent]] = []
    current: list[MatchEvent] = []
    last_time: Optional[int] = None

    for event in sorted(events, key=lambda e: e.elapsed):
        if current and last_time is not None and event.elapsed - last_time > ATTACK_SEQUENCE_GAP_MINUTES:
            sequences.append(current)
            current = []
        current.append(event)
        last_time = event.elapsed

    if current:
        sequences.append(current)
    return sequences


def _event_momentum(event: MatchEvent) -> float:
    if event.type == EventType.GOAL:
        return 1.0
    if event.type == EventType.FREEKICK:
        return 0.4 if event.is_dangerous else 0.2
    if event.type == EventType.VAR:
        return 0.3
    return 0.3 if event.is_dangerous else 0.1


class TemporalAnalysisService:
    """
    Domain service producing per-window goal forecasts.

    All metrics are deterministic functions of the inputs.
    """

    BASE_PROBABILITY = 0.15
    PRESSURE_WEIGHT = 0.25
    MOMENTUM_WEIGHT = 0.2
    SET_PIECE_STEP = 0.05
    SET_PIECE_CAP = 0.2
    CARD_STEP = 0.05
    CARD_CAP = 0.15
    MIN_LIVE_PROBABILITY = 0.01
    MAX_LIVE_PROBABILITY = 0.95

    # Share of the final probability taken from history
    HISTORICAL_WEIGHT_UPCOMING = 0.8
    HISTORICAL_WEIGHT_AT_WINDOW_END = 0.2

    def __init__(self, windows: Sequence[TemporalWindow] = PREDICTION_WINDOWS):
        self.windows = tuple(windows)

    # ------------------------------------------------------------------
    # Window metrics
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_pressure_index(events: Sequence[MatchEvent], window_minutes: int) -> float:
        """
        Attacking pressure normalized by window length.

        Weighted rates: attempts 0.5, corners 0.3, cards 0.2, capped at 1.
        """
        if window_minutes <= 0:
            return 0.0
        attempts = sum(1 for e in events if e.is_attempt)
        corners = sum(1 for e in events if e.is_corner)
        cards = sum(1 for e in events if e.is_card)

        return min(
            1.0,
            (attempts / window_minutes) * 0.5
            + (corners / window_minutes) * 0.3
            + (cards / window_minutes) * 0.2,
        )

    @staticmethod
    def analyze_attack_sequence(events: Sequence[MatchEvent]) -> float:
        """
        Momentum in [0, 1] from consolidated attack sequences.

        Each sequence scores the sum of its event weights times a length
        factor (length / 5, capped at 1); the result is the mean over
        sequences, capped at 1.
        """
        sequences = split_attack_sequences(events)
        if not sequences:
            return 0.0

        total = 0.0
        for sequence in sequences:
            score = sum(_event_momentum(e) for e in sequence)
            length_factor = min(1.0, len(sequence) / 5)
            total += score * length_factor

        return min(1.0, total / max(1, len(sequences)))

    def calculate_attack_momentum(
        self,
        events: Sequence[MatchEvent],
        window: TemporalWindow,
        team_id: Optional[str] = None,
    ) -> float:
        """Momentum inside a window (with build-up), optionally for one team only."""
        build_up_events = filter_events_by_window(events, window, include_build_up=True)
        if team_id is not None:
            build_up_events = [e for e in build_up_events if e.team_id == team_id]
        return self.analyze_attack_sequence(build_up_events)

    @staticmethod
    def identify_key_factors(events: Sequence[MatchEvent], window: TemporalWindow) -> list[str]:
        """Rule-based descriptions of what is driving a window; ["Normal play"] if nothing stands out."""
        factors: list[str] = []

        attempts = sum(1 for e in events if e.is_attempt)
        corners = sum(1 for e in events if e.is_corner)
        fouls = sum(1 for e in events if e.is_foul)
        cards = sum(1 for e in events if e.is_card)

        if attempts >= 3:
            factors.append(f"{attempts} shots in last {window.length}min")
        if corners >= 2:
            factors.append(f"{corners} corners")
        if cards >= 1:
            factors.append(f"{cards} cards")
        if fouls >= 3:
            factors.append("High foul count")
        if window.label == "First 15" and attempts > 0:
            factors.append("Early pressure")
        if window.label == "Final 10" and (attempts > 0 or corners > 0):
            factors.append("Late game pressure")

        return factors or [NORMAL_PLAY]

    def calculate_live_probability(
        self,
        window: TemporalWindow,
        events: Sequence[MatchEvent],
        pressure: float,
        momentum: float,
    ) -> float:
        """
        Live goal probability for a window, clamped to [0.01, 0.95].

        Pressure and momentum come from the build-up events; set pieces and
        cards are counted from `events`, the events inside the window only.
        """
        set_pieces = sum(1 for e in events if e.type == EventType.FREEKICK)
        cards = sum(1 for e in events if e.is_card)

        probability = (
            self.BASE_PROBABILITY
            + pressure * self.PRESSURE_WEIGHT
            + momentum * self.MOMENTUM_WEIGHT
            + min(self.SET_PIECE_CAP, set_pieces * self.SET_PIECE_STEP)
            + min(self.CARD_CAP, cards * self.CARD_STEP)
        )
        weight = WINDOW_FACTORS.get(window.label, {}).get("weight", DEFAULT_WINDOW_WEIGHT)
        probability *= weight

        return min(self.MAX_LIVE_PROBABILITY, max(self.MIN_LIVE_PROBABILITY, probability))

    # ------------------------------------------------------------------
    # Historical blend
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_historical_probability(
        window: TemporalWindow,
        home_stats: Optional[TeamSeasonStats],
        away_stats: Optional[TeamSeasonStats],
    ) -> Optional[float]:
        """
        P(at least one goal) in the window from season scoring histograms.

        Each team's bucket count per match played is its rate; the two rates
        add up to λ and the probability is 1 - e^(-λ).

        Returns:
            Probability, or None when neither team has season stats or the
            window has no matching bucket
        """
        bucket = WINDOW_SCORING_BUCKETS.get(window.label)
        available = [s for s in (home_stats, away_stats) if s is not None]
        if bucket is None or not available:
            return None

        lambda_historical = sum(stats.bucket_rate(bucket) for stats in available)
        return 1.0 - math.exp(-lambda_historical)

    def historical_weight(self, window: TemporalWindow, minute: int) -> float:
        """
        Weight of the historical estimate for a window at the given minute.

        Upcoming windows get HISTORICAL_WEIGHT_UPCOMING; inside the active
        window it decays linearly to HISTORICAL_WEIGHT_AT_WINDOW_END; elapsed
        windows get 0 (their probability is forced to 0 anyway).
        """
        status = window.status_at(minute)
        if status == WindowStatus.UPCOMING:
            return self.HISTORICAL_WEIGHT_UPCOMING
        if status == WindowStatus.ELAPSED:
            return 0.0

        progress = (minute - window.start) / window.length if window.length > 0 else 1.0
        span = self.HISTORICAL_WEIGHT_UPCOMING - self.HISTORICAL_WEIGHT_AT_WINDOW_END
        return self.HISTORICAL_WEIGHT_UPCOMING - span * progress

    # ------------------------------------------------------------------
    # Window analysis
    # ------------------------------------------------------------------

    def analyze_window(
        self,
        events: Sequence[MatchEvent],
        window: TemporalWindow,
        minute: int,
        context: Optional[FixtureContext] = None,
    ) -> WindowAnalysis:
        """Full analysis of one window at the given match minute."""
        status = window.status_at(minute)
        window_events = filter_events_by_window(events, window)
        build_up_events = filter_events_by_window(events, window, include_build_up=True)

        pressure = self.calculate_pressure_index(build_up_events, window.length)
        momentum = self.analyze_attack_sequence(build_up_events)

        if status == WindowStatus.ELAPSED:
            probability = 0.0
        else:
            probability = self.calculate_live_probability(window, window_events, pressure, momentum)
            historical = None
            if context is not None:
                historical = self.calculate_historical_probability(
                    window, context.home_season_stats, context.away_season_stats
                )
            if historical is not None:
                w = self.historical_weight(window, minute)
                probability = w * historical + (1 - w) * probability
            probability = min(1.0, max(0.0, probability))

        dangerous = sum(1 for e in window_events if e.is_dangerous)
        attempts = sum(1 for e in window_events if e.is_attempt)
        set_piece_count = sum(1 for e in window_events if e.type == EventType.FREEKICK)
        shot_frequency = attempts / window.length if window.length > 0 else 0.0

        return WindowAnalysis(
            window=window,
            status=status,
            probability=probability,
            key_factors=tuple(self.identify_key_factors(window_events, window)),
            pressure_index=pressure,
            danger_ratio=dangerous / len(window_events) if window_events else 0.0,
            shot_frequency=shot_frequency,
            set_piece_count=set_piece_count,
            goal_intensity=pressure * 0.8,
            pattern_strength=min(set_piece_count * 0.5 + shot_frequency * 0.5, 10.0),
            momentum=momentum,
        )

    def analyze(
        self,
        events: Sequence[MatchEvent],
        minute: int,
        context: Optional[FixtureContext] = None,
    ) -> list[WindowAnalysis]:
        """Analyses for every configured window, in window order; elapsed windows included with probability 0."""
        return [self.analyze_window(events, window, minute, context) for window in self.windows]

    # ------------------------------------------------------------------
    # Team comparison, momentum and summaries
    # ------------------------------------------------------------------

    def calculate_team_window_stats(
        self,
        events: Sequence[MatchEvent],
        window: TemporalWindow,
        team_id: str,
    ) -> TeamWindowStats:
        team_events = filter_events_by_window(
            [e for e in events if e.team_id == team_id], window, include_build_up=True
        )
        if not team_events:
            return TeamWindowStats()

        set_pieces = [e for e in team_events if e.type == EventType.FREEKICK]
        dangerous_set_pieces = [e for e in set_pieces if e.is_dangerous]
        # Share of events that belong to a multi-event sequence
        chained = sum(len(s) for s in split_attack_sequences(team_events) if len(s) > 1)

        return TeamWindowStats(
            pressure_intensity=self.calculate_pressure_index(team_events, window.length),
            defensive_actions=sum(1 for e in team_events if e.is_card),
            transition_speed=chained / len(team_events),
            set_piece_efficiency=len(dangerous_set_pieces) / len(set_pieces) if set_pieces else 0.0,
        )

    @staticmethod
    def highest_probability_window(windows: Iterable[WindowAnalysis]) -> Optional[WindowAnalysis]:
        """
        The window most likely to see a goal, ignoring elapsed windows.

        Ties keep window order.
        """
        candidates = [w for w in windows if w.status != WindowStatus.ELAPSED]
        if not candidates:
            return None
        return max(candidates, key=lambda w: w.probability)

    def summarize(self, windows: Sequence[WindowAnalysis]) -> str:
        """Short text such as "42% Goal in Final 10: Late game pressure"."""
        best = self.highest_probability_window(windows)
        if best is None and windows:
            best = max(windows, key=lambda w: w.probability)
        if best is None:
            return "No temporal data available"

        text = f"{round(best.probability * 100)}% Goal in {best.window.label}"
        if list(best.key_factors) != [NORMAL_PLAY]:
            text += ": " + " + ".join(best.key_factors)
        return text

    def build_temporal_goal_probability(
        self,
        snapshot: MatchSnapshot,
        context: Optional[FixtureContext] = None,
    ) -> TemporalGoalProbability:
        """Window forecasts plus key moments, team comparison and momentum for a snapshot."""
        events = snapshot.events
        windows = self.analyze(events, snapshot.minute, context)
        # Team comparison and momentum describe the closing window
        final_window = self.windows[-1] if self.windows else PREDICTION_WINDOWS[-1]

        home = self.calculate_team_window_stats(events, final_window, snapshot.home_team.id)
        away = self.calculate_team_window_stats(events, final_window, snapshot.away_team.id)

        momentum = MomentumAnalysis(
            attack_momentum=self.calculate_attack_momentum(events, final_window),
            defense_stability=max(0.0, 1.0 - (home.pressure_intensity + away.pressure_intensity) / 2),
            fatigue_index=min(0.3, 0.3 * max(0, snapshot.minute) / REGULATION_MINUTES),
        )

        key_moments = KeyMoments(
            pre_window_goals=tuple(e for e in events if e.type == EventType.GOAL),
            pressure_build_up=tuple(e for e in events if e.is_dangerous),
            defensive_errors=tuple(e for e in events if e.is_card),
        )

        first_half = [w for w in windows if w.window.end <= 45]
        second_half = [w for w in windows if w.window.start >= 45]

        logger.debug(f"Temporal analysis for fixture {snapshot.id}: {len(windows)} windows")

        return TemporalGoalProbability(
            windows=tuple(windows),
            key_moments=key_moments,
            home_comparison=home,
            away_comparison=away,
            momentum_analysis=momentum,
            summary=self.summarize(windows),
            highest_first_half=self.highest_probability_window(first_half),
            highest_second_half=self.highest_probability_window(second_half),
        )
