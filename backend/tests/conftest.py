"""
Shared fixtures for the test suite.
"""

import copy
import itertools

import pytest

from src.domain.entities.entities import (
    EventType,
    League,
    MatchEvent,
    MatchSnapshot,
    Team,
    TeamMatchStats,
)
from src.domain.value_objects.value_objects import Score


HOME_ID = "10"
AWAY_ID = "20"
FIXTURE_ID = 1001


@pytest.fixture
def event_factory():
    """Build MatchEvents with sequential ids."""
    ids = itertools.count(1)

    def make(minute, type=EventType.SHOT, team_id=HOME_ID, **kwargs):
        return MatchEvent(
            id=next(ids),
            fixture_id=FIXTURE_ID,
            minute=minute,
            team_id=team_id,
            type=type,
            **kwargs,
        )

    return make


@pytest.fixture
def snapshot_factory():
    """Build MatchSnapshots with neutral defaults."""

    def make(
        minute=60,
        home_goals=0,
        away_goals=0,
        events=(),
        home_stats=None,
        away_stats=None,
        status="LIVE",
        fixture_id=FIXTURE_ID,
    ):
        return MatchSnapshot(
            id=fixture_id,
            minute=minute,
            status=status,
            league=League(id="8", name="Premier League", country="England"),
            home_team=Team(id=HOME_ID, name="Home FC"),
            away_team=Team(id=AWAY_ID, name="Away FC"),
            score=Score(home=home_goals, away=away_goals),
            home_stats=home_stats or TeamMatchStats(team_id=HOME_ID),
            away_stats=away_stats or TeamMatchStats(team_id=AWAY_ID),
            events=tuple(events),
        )

    return make


RAW_FIXTURE = {
    "id": FIXTURE_ID,
    "localteamId": 10,
    "visitorteamId": 20,
    "time": {"minute": 60, "status": "LIVE"},
    "scores": {"localTeamScore": 1, "visitorTeamScore": 0},
    "league": {
        "data": {
            "id": 8,
            "name": "Premier League",
            "logoPath": "https://cdn.example/pl.png",
            "country": {"data": {"name": "England"}},
        }
    },
    "localTeam": {"data": {"id": 10, "name": "Home FC", "logoPath": "https://cdn.example/home.png"}},
    "visitorTeam": {"data": {"id": 20, "name": "Away FC", "logoPath": ""}},
    "stats": {
        "data": [
            {
                "teamId": 10,
                "possessiontime": 64,
                "shots": {"total": 9, "ongoal": 5, "offgoal": 4},
                "attacks": {"attacks": 70, "dangerous_attacks": 40},
                "corners": 6,
                "yellowcards": 1,
                "redcards": 0,
            },
            {
                "teamId": 20,
                "possessiontime": 36,
                "shots": {"total": 3, "ongoal": 1, "offgoal": 2},
                "attacks": {"attacks": 40, "dangerous_attacks": 15},
                "corners": 2,
                "yellowcards": 2,
                "redcards": 0,
            },
        ]
    },
    "events": {
        "data": [
            {"id": 1, "fixtureId": FIXTURE_ID, "minute": 23, "teamId": "10", "type": "goal"},
            {"id": 2, "fixtureId": FIXTURE_ID, "minute": 31, "teamId": "10", "type": "shot", "x": 88, "y": 30},
            {"id": 3, "fixtureId": FIXTURE_ID, "minute": 40, "extraMinute": 2, "teamId": "20", "type": "yellowcard"},
            {"id": 4, "fixtureId": FIXTURE_ID, "minute": 52, "teamId": "20", "type": "shot", "x": 15, "y": 40},
            {"id": 5, "fixtureId": FIXTURE_ID, "minute": 55, "teamId": "10", "type": "freekick",
             "reason": "Corner", "isDangerous": True},
        ]
    },
}

RAW_FIXTURE_INFO = {
    "id": FIXTURE_ID,
    "probability": {
        "home": 0.5,
        "draw": 0.3,
        "away": 0.2,
        "over_1_5": 0.75,
        "over_2_5": 0.5,
        "over_3_5": 0.25,
        "btts": 0.45,
    },
    "localTeamSeasonStats": {
        "team": {"id": 10, "name": "Home FC"},
        "nbMatches": 10,
        "avgTotalGoals": 1.8,
        "avgTotalConcededGoals": 0.9,
        "seasonStats": {
            "scoringMinutes": [
                {"period": [
                    {"minute": "0-15", "count": "2", "percentage": "10"},
                    {"minute": "75-90", "count": "6", "percentage": "30"},
                ]}
            ]
        },
    },
    "visitorTeamSeasonStats": {
        "team": {"id": 20, "name": "Away FC"},
        "nbMatches": 10,
        "avgTotalGoals": 1.1,
        "avgTotalConcededGoals": 1.4,
        "seasonStats": {
            "scoringMinutes": [
                {"period": [
                    {"minute": "75-90", "count": "4", "percentage": "25"},
                ]}
            ]
        },
    },
}


@pytest.fixture
def raw_fixture():
    """A well-formed live-scores fixture payload."""
    return copy.deepcopy(RAW_FIXTURE)


@pytest.fixture
def raw_fixture_info():
    """A fixture-info payload with priors and season stats."""
    return copy.deepcopy(RAW_FIXTURE_INFO)
