"""
Data Transfer Objects (DTOs) Module

DTOs are used to transfer data between layers and to/from the API.
They use Pydantic for validation and serialization.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from src.utils.time_utils import get_current_time


# ============================================================
# Fixture DTOs
# ============================================================

class LeagueDTO(BaseModel):
    """League data transfer object."""
    id: str
    name: str
    country: str = ""
    logo_url: str = ""


class TeamScoreDTO(BaseModel):
    """Team with its current score."""
    id: str
    name: str
    logo_url: str = ""
    score: int = Field(..., ge=0)


class TeamsDTO(BaseModel):
    home: TeamScoreDTO
    away: TeamScoreDTO


class MatchStatusDTO(BaseModel):
    """Clock and status of a live fixture."""
    minute: int = Field(..., ge=0)
    status: str
    is_live: bool


# ============================================================
# Prediction DTOs
# ============================================================

class WinProbabilityDTO(BaseModel):
    home: float = Field(..., ge=0, le=1)
    draw: float = Field(..., ge=0, le=1)
    away: float = Field(..., ge=0, le=1)


class GoalMarketsDTO(BaseModel):
    over_15: float = Field(..., ge=0, le=1)
    over_25: float = Field(..., ge=0, le=1)
    over_35: float = Field(..., ge=0, le=1)
    btts: float = Field(..., ge=0, le=1)


class ExpectedGoalsDTO(BaseModel):
    """Running xG at snapshot time."""
    home: float = Field(..., ge=0)
    away: float = Field(..., ge=0)


class PredictionDTO(BaseModel):
    """Prediction data transfer object."""
    win_probability: WinProbabilityDTO
    recommended_bet: str
    confidence: float = Field(..., ge=0, le=1)
    reasons: list[str]
    goals: GoalMarketsDTO
    expected_goals: ExpectedGoalsDTO


# ============================================================
# Stats passthrough DTOs
# ============================================================

class SidePairDTO(BaseModel):
    home: float
    away: float


class ShotsDTO(BaseModel):
    total: int = 0
    on_target: int = 0
    off_target: int = 0


class AttacksDTO(BaseModel):
    total: int = 0
    dangerous: int = 0


class CardsDTO(BaseModel):
    yellow: int = 0
    red: int = 0


class ShotsPairDTO(BaseModel):
    home: ShotsDTO
    away: ShotsDTO


class AttacksPairDTO(BaseModel):
    home: AttacksDTO
    away: AttacksDTO


class CardsPairDTO(BaseModel):
    home: CardsDTO
    away: CardsDTO


class MatchStatsDTO(BaseModel):
    """Raw in-play statistics, passed through unchanged."""
    possession: SidePairDTO
    shots: ShotsPairDTO
    attacks: AttacksPairDTO
    corners: SidePairDTO
    cards: CardsPairDTO


# ============================================================
# Temporal DTOs
# ============================================================

class MatchEventDTO(BaseModel):
    id: int
    fixture_id: int
    minute: int
    extra_minute: Optional[int] = None
    team_id: str
    type: str
    is_dangerous: bool = False
    x: Optional[float] = None
    y: Optional[float] = None
    reason: Optional[str] = None


class TemporalWindowDTO(BaseModel):
    start: int
    end: int
    label: str


class WindowAnalysisDTO(BaseModel):
    """Goal forecast and metrics for one temporal window."""
    window: TemporalWindowDTO
    status: str
    probability: float = Field(..., ge=0, le=1)
    key_factors: list[str]
    pressure_index: float = Field(..., ge=0, le=1)
    danger_ratio: float = Field(..., ge=0, le=1)
    shot_frequency: float = Field(..., ge=0)
    set_piece_count: int = Field(..., ge=0)
    goal_intensity: float = Field(..., ge=0)
    pattern_strength: float = Field(..., ge=0)
    momentum: float = Field(default=0.0, ge=0)


class KeyMomentsDTO(BaseModel):
    pre_window_goals: list[MatchEventDTO] = Field(default_factory=list)
    pressure_build_up: list[MatchEventDTO] = Field(default_factory=list)
    defensive_errors: list[MatchEventDTO] = Field(default_factory=list)


class TeamWindowStatsDTO(BaseModel):
    pressure_intensity: float = 0.0
    defensive_actions: int = 0
    transition_speed: float = 0.0
    set_piece_efficiency: float = 0.0


class TeamComparisonDTO(BaseModel):
    home: TeamWindowStatsDTO
    away: TeamWindowStatsDTO


class MomentumAnalysisDTO(BaseModel):
    attack_momentum: float = 0.0
    defense_stability: float = 1.0
    fatigue_index: float = 0.0


class TemporalGoalProbabilityDTO(BaseModel):
    """Per-window goal analysis."""
    windows: list[WindowAnalysisDTO]
    key_moments: KeyMomentsDTO
    team_comparison: TeamComparisonDTO
    momentum_analysis: MomentumAnalysisDTO
    summary: str
    highest_first_half: Optional[WindowAnalysisDTO] = None
    highest_second_half: Optional[WindowAnalysisDTO] = None
    last_updated: datetime


class MatchPredictionDTO(BaseModel):
    """Full prediction record for one live fixture."""
    fixture_id: int
    league: LeagueDTO
    teams: TeamsDTO
    status: MatchStatusDTO
    prediction: PredictionDTO
    stats: MatchStatsDTO
    temporal_goal_probability: TemporalGoalProbabilityDTO
    last_updated: datetime


# ============================================================
# Response envelopes
# ============================================================

class LivePredictionsResponseDTO(BaseModel):
    """Response containing predictions for every live fixture."""
    success: bool = True
    data: list[MatchPredictionDTO]
    count: int
    timestamp: str


class PredictionResponseDTO(BaseModel):
    """Response containing a single fixture prediction."""
    success: bool = True
    data: MatchPredictionDTO
    timestamp: str


class HealthResponseDTO(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=get_current_time)


class CacheStatusDTO(BaseModel):
    """Feed cache counters."""
    entries: int
    max_entries: int
    hits: int
    misses: int
    fetches: int
    redis_connected: bool


class ErrorResponseDTO(BaseModel):
    """Error response."""
    error: str
    message: str
    details: Optional[dict] = None
