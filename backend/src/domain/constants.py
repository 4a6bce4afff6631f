"""
Domain Constants

This module contains constant definitions valid across the domain layer.
"""

# Length of regulation time used to project remaining goals
REGULATION_MINUTES = 90

# Extra goals per side considered in Poisson score grids
MAX_ADDITIONAL_GOALS = 10

# Possession assumed when the feed does not report it
DEFAULT_POSSESSION = 50.0

# Fixed temporal windows analysed for every fixture
PREDICTION_WINDOWS_METADATA = [
    {"start": 0, "end": 15, "label": "First 15"},
    {"start": 35, "end": 45, "label": "First Half End"},
    {"start": 45, "end": 55, "label": "Second Half Start"},
    {"start": 80, "end": 90, "label": "Final 10"},
]

# Per-window scaling of the live goal probability, and the match
# phenomena each window is meant to capture
WINDOW_FACTORS = {
    "First 15": {
        "weight": 0.4,
        "factors": ["early_pressure", "set_pieces", "opening_tactics"],
    },
    "First Half End": {
        "weight": 0.3,
        "factors": ["fatigue", "scoreline_pressure", "half_time_adjustment"],
    },
    "Second Half Start": {
        "weight": 0.3,
        "factors": ["tactical_changes", "substitution_impact", "renewed_energy"],
    },
    "Final 10": {
        "weight": 0.4,
        "factors": ["desperation", "defensive_errors", "time_pressure", "fitness_levels"],
    },
}

DEFAULT_WINDOW_WEIGHT = 0.3

# Histogram bucket that best matches each temporal window
WINDOW_SCORING_BUCKETS = {
    "First 15": "0-15",
    "First Half End": "30-45",
    "Second Half Start": "45-60",
    "Final 10": "75-90",
}

# Minutes of build-up before a window that count towards pressure and momentum
BUILD_UP_BUFFER_MINUTES = 5

# Events further apart than this start a new attack sequence
ATTACK_SEQUENCE_GAP_MINUTES = 2

# Recommended bet labels
BET_HOME_WIN = "Home Win"
BET_AWAY_WIN = "Away Win"
BET_DRAW = "Draw"
BET_OVER_25 = "Over 2.5 Goals"
BET_NO_CLEAR = "No Clear Bet"
