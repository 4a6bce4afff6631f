"""
Domain Entities Module

This module contains the core domain entities for the live match prediction engine.
These entities represent the core business concepts and are independent of any infrastructure.
All of them are value-like: built fresh for one computation and never mutated.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from enum import Enum

from src.domain.constants import REGULATION_MINUTES
from src.domain.value_objects.value_objects import OutcomeProbabilities, Score
from src.utils.time_utils import get_current_time


# Statuses reported by the feed while a fixture is in play
IN_PLAY_STATUSES = frozenset({"LIVE", "HT", "ET", "PEN_LIVE", "BREAK"})


class EventType(str, Enum):
    """Kinds of in-play events supplied by the live feed."""
    GOAL = "goal"
    YELLOW_CARD = "yellowcard"
    RED_CARD = "redcard"
    SUBSTITUTION = "substitution"
    FREEKICK = "freekick"
    OFFSIDE = "offside"
    VAR = "var"
    SHOT = "shot"
    CORNER = "corner"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "EventType":
        """Map a feed event type to an EventType, unknown types become OTHER."""
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.OTHER


class WindowStatus(str, Enum):
    """Where the current match minute sits relative to a temporal window."""
    UPCOMING = "upcoming"
    ACTIVE = "active"
    ELAPSED = "elapsed"


@dataclass(frozen=True)
class MatchEvent:
    """
    A discrete in-play occurrence.

    Attributes:
        id: Feed identifier of the event
        fixture_id: Fixture the event belongs to
        minute: Regular match minute (0-120)
        team_id: Team credited with the event
        type: Kind of event
        extra_minute: Stoppage-time minutes on top of `minute`
        is_dangerous: Feed flag for dangerous actions
        x, y: Pitch coordinates (0-100) when the feed supplies them
        reason: Free text qualifier (e.g. "corner" on a free kick)
    """
    id: int
    fixture_id: int
    minute: int
    team_id: str
    type: EventType
    extra_minute: Optional[int] = None
    is_dangerous: bool = False
    x: Optional[float] = None
    y: Optional[float] = None
    reason: Optional[str] = None

    def __post_init__(self):
        if not 0 <= self.minute <= 120:
            raise ValueError(f"Event minute must be between 0 and 120, got {self.minute}")
        for coord in (self.x, self.y):
            if coord is not None and not 0 <= coord <= 100:
                raise ValueError(f"Pitch coordinates must be between 0 and 100, got {coord}")

    @property
    def elapsed(self) -> int:
        """Minute including stoppage time."""
        return self.minute + (self.extra_minute or 0)

    @property
    def has_coordinates(self) -> bool:
        return self.x is not None and self.y is not None

    @property
    def is_card(self) -> bool:
        return self.type in (EventType.YELLOW_CARD, EventType.RED_CARD)

    @property
    def is_corner(self) -> bool:
        """Corner kicks arrive either as their own type or as a free kick with a corner reason."""
        if self.type == EventType.CORNER:
            return True
        return self.type == EventType.FREEKICK and "corner" in (self.reason or "").lower()

    @property
    def is_foul(self) -> bool:
        """A free kick that is not a corner."""
        return self.type == EventType.FREEKICK and not self.is_corner

    @property
    def is_attempt(self) -> bool:
        """Shots, goals and anything the feed flags as dangerous."""
        return self.type in (EventType.SHOT, EventType.GOAL) or self.is_dangerous


@dataclass(frozen=True)
class Team:
    """
    Represents a football team in a live fixture.

    Attributes:
        id: Feed identifier of the team
        name: Full name of the team
        logo_url: Badge image URL (may be empty)
    """
    id: str
    name: str
    logo_url: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("Team name cannot be empty")


@dataclass(frozen=True)
class League:
    """
    Represents a football league or competition.

    Attributes:
        id: Feed identifier of the league
        name: Full name of the league (e.g., "Premier League")
        country: Country where the league is played
        logo_url: League image URL (may be empty)
    """
    id: str
    name: str
    country: str = ""
    logo_url: str = ""

    def __post_init__(self):
        if not self.name:
            raise ValueError("League name is required")


@dataclass(frozen=True)
class TeamMatchStats:
    """Running in-play statistics for one side of a fixture."""
    team_id: str
    possession: float = 50.0
    shots_total: int = 0
    shots_on_target: int = 0
    shots_off_target: int = 0
    attacks: int = 0
    dangerous_attacks: int = 0
    corners: int = 0
    yellow_cards: int = 0
    red_cards: int = 0

    @property
    def cards(self) -> int:
        return self.yellow_cards + self.red_cards


@dataclass(frozen=True)
class MatchSnapshot:
    """
    Point-in-time state of a live fixture.

    Treated as an immutable input for one prediction computation.
    """
    id: int
    minute: int
    status: str
    league: League
    home_team: Team
    away_team: Team
    score: Score
    home_stats: TeamMatchStats
    away_stats: TeamMatchStats
    events: tuple[MatchEvent, ...] = ()

    @property
    def remaining_minutes(self) -> int:
        """Regulation minutes left; never negative."""
        return max(0, REGULATION_MINUTES - self.minute)

    @property
    def is_live(self) -> bool:
        status = (self.status or "").upper()
        return status in IN_PLAY_STATUSES


@dataclass(frozen=True)
class ScoringMinuteBucket:
    """Goals a team scored during one season time bucket (e.g. "0-15")."""
    minute: str
    count: int


@dataclass(frozen=True)
class TeamSeasonStats:
    """
    Historical season aggregate for a team.

    Read-only input owned by the upstream feed.
    """
    team_id: str
    matches_played: int
    avg_goals_for: float = 0.0
    avg_goals_against: float = 0.0
    avg_home_goals_for: float = 0.0
    avg_home_goals_against: float = 0.0
    avg_away_goals_for: float = 0.0
    avg_away_goals_against: float = 0.0
    scoring_minutes: tuple[ScoringMinuteBucket, ...] = ()

    def goals_in_bucket(self, bucket: str) -> int:
        for period in self.scoring_minutes:
            if period.minute == bucket:
                return period.count
        return 0

    def bucket_rate(self, bucket: str) -> float:
        """Goals per match scored in the given bucket."""
        return self.goals_in_bucket(bucket) / max(1, self.matches_played)


@dataclass(frozen=True)
class PreMatchPriors:
    """
    Probabilities computed before kickoff by the upstream provider.

    Goal market priors are optional; missing ones are simply not blended.
    """
    outcome: OutcomeProbabilities
    over_15: Optional[float] = None
    over_25: Optional[float] = None
    over_35: Optional[float] = None
    btts: Optional[float] = None


@dataclass(frozen=True)
class FixtureContext:
    """Optional historical inputs for a fixture (priors and both teams' season stats)."""
    fixture_id: int
    priors: Optional[PreMatchPriors] = None
    home_season_stats: Optional[TeamSeasonStats] = None
    away_season_stats: Optional[TeamSeasonStats] = None

    @property
    def has_history(self) -> bool:
        return self.home_season_stats is not None or self.away_season_stats is not None


@dataclass(frozen=True)
class TemporalWindow:
    """A fixed match-minute segment with its own goal-likelihood forecast."""
    start: int
    end: int
    label: str

    @property
    def length(self) -> int:
        return self.end - self.start

    def status_at(self, minute: int) -> WindowStatus:
        if minute < self.start:
            return WindowStatus.UPCOMING
        if minute > self.end:
            return WindowStatus.ELAPSED
        return WindowStatus.ACTIVE


@dataclass(frozen=True)
class WindowAnalysis:
    """Forecast and descriptive metrics for one temporal window."""
    window: TemporalWindow
    status: WindowStatus
    probability: float
    key_factors: tuple[str, ...]
    pressure_index: float
    danger_ratio: float
    shot_frequency: float
    set_piece_count: int
    goal_intensity: float
    pattern_strength: float
    momentum: float = 0.0


@dataclass(frozen=True)
class TeamWindowStats:
    """One side's activity profile inside a window."""
    pressure_intensity: float = 0.0
    defensive_actions: int = 0
    transition_speed: float = 0.0
    set_piece_efficiency: float = 0.0


@dataclass(frozen=True)
class KeyMoments:
    pre_window_goals: tuple[MatchEvent, ...] = ()
    pressure_build_up: tuple[MatchEvent, ...] = ()
    defensive_errors: tuple[MatchEvent, ...] = ()


@dataclass(frozen=True)
class MomentumAnalysis:
    attack_momentum: float = 0.0
    defense_stability: float = 1.0
    fatigue_index: float = 0.0


@dataclass(frozen=True)
class TemporalGoalProbability:
    """Per-window goal forecast plus the supporting match-flow analysis."""
    windows: tuple[WindowAnalysis, ...]
    key_moments: KeyMoments
    home_comparison: TeamWindowStats
    away_comparison: TeamWindowStats
    momentum_analysis: MomentumAnalysis
    summary: str
    highest_first_half: Optional[WindowAnalysis] = None
    highest_second_half: Optional[WindowAnalysis] = None


@dataclass(frozen=True)
class GoalMarketProbabilities:
    """Probabilities for the goal markets of a fixture."""
    over_15: float
    over_25: float
    over_35: float
    btts: float


@dataclass(frozen=True)
class Recommendation:
    """The single market the engine recommends, with its rationale."""
    bet: str
    confidence: float
    reasons: tuple[str, ...]


@dataclass(frozen=True)
class LiveOutcome:
    """Outcome probabilities along with the remaining-time Poisson rates behind them."""
    probabilities: OutcomeProbabilities
    lambda_home: float = 0.0
    lambda_away: float = 0.0

    @property
    def lambda_total(self) -> float:
        return self.lambda_home + self.lambda_away


@dataclass
class MatchPrediction:
    """
    Full prediction record for one live fixture.

    Attributes:
        snapshot: The snapshot the prediction was computed from (stats passthrough)
        win_probability: Blended full-time result probabilities
        recommendation: Recommended market, confidence and reasons
        goals: Goal market probabilities
        temporal: Per-window goal analysis
        home_xg, away_xg: Running expected goals at snapshot time
        last_updated: Timestamp when the prediction was computed
    """
    snapshot: MatchSnapshot
    win_probability: OutcomeProbabilities
    recommendation: Recommendation
    goals: GoalMarketProbabilities
    temporal: TemporalGoalProbability
    home_xg: float = 0.0
    away_xg: float = 0.0
    last_updated: datetime = field(default_factory=get_current_time)

    @property
    def fixture_id(self) -> int:
        return self.snapshot.id
