"""
Betmines Feed Parser

Converts raw Betmines payloads into domain entities.

Live scores (`/fixtures/livescores`) arrive as a mapping of fixtures; each
fixture nests its sub-objects under `data` keys (league, teams, stats,
events). Fixture info (`/fixtures/info/<id>?includeSeasonStats=true`)
carries the pre-match probabilities and both teams' season statistics.
"""

import logging
from typing import Any, Optional

from src.domain.constants import DEFAULT_POSSESSION
from src.domain.entities.entities import (
    EventType,
    FixtureContext,
    League,
    MatchEvent,
    MatchSnapshot,
    PreMatchPriors,
    ScoringMinuteBucket,
    Team,
    TeamMatchStats,
    TeamSeasonStats,
)
from src.domain.exceptions import MalformedSnapshotException
from src.domain.value_objects.value_objects import OutcomeProbabilities, Score


logger = logging.getLogger(__name__)


def _to_int(value: Any, default: int = 0) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _to_float(value: Any, default: Optional[float] = None) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _data(raw: dict, key: str) -> Optional[dict]:
    """Unwrap `{key: {"data": {...}}}`; None when absent."""
    section = raw.get(key)
    if not isinstance(section, dict):
        return None
    data = section.get("data")
    return data if isinstance(data, dict) else None


def _section(raw: dict, key: str) -> Optional[dict]:
    """A plain mapping section such as `time` or `scores`; None when absent or not a mapping."""
    section = raw.get(key)
    return section if isinstance(section, dict) else None


def _items(value: Any) -> list:
    return value if isinstance(value, list) else []


def _league_country(league: dict, fixture_id: Any) -> str:
    """Country name under `league.country.data`; empty when the feed omits it."""
    country = league.get("country")
    if country is None:
        return ""
    if not isinstance(country, dict):
        raise MalformedSnapshotException(fixture_id, "league.country")
    data = country.get("data")
    if data is None:
        return ""
    if not isinstance(data, dict):
        raise MalformedSnapshotException(fixture_id, "league.country")
    return str(data.get("name") or "")


def _probability(value: Any) -> Optional[float]:
    """Feed probabilities may be fractions or percentages; returns a fraction or None."""
    prob = _to_float(value)
    if prob is None or prob < 0:
        return None
    if prob > 1:
        prob /= 100
    return min(1.0, prob)


# ----------------------------------------------------------------------
# Live scores
# ----------------------------------------------------------------------

def parse_event(raw: dict, fixture_id: int) -> MatchEvent:
    """Build a MatchEvent, clamping minute and coordinates into range."""
    x = _to_float(raw.get("x"))
    y = _to_float(raw.get("y"))
    extra = raw.get("extraMinute")

    return MatchEvent(
        id=_to_int(raw.get("id")),
        fixture_id=_to_int(raw.get("fixtureId"), fixture_id),
        minute=int(_clamp(_to_int(raw.get("minute")), 0, 120)),
        team_id=str(raw.get("teamId", "")),
        type=EventType.parse(raw.get("type")),
        extra_minute=max(0, _to_int(extra)) if extra is not None else None,
        is_dangerous=bool(raw.get("isDangerous", False)),
        x=_clamp(x, 0.0, 100.0) if x is not None else None,
        y=_clamp(y, 0.0, 100.0) if y is not None else None,
        reason=raw.get("reason"),
    )


def parse_team_stats(raw: Optional[dict], team_id: str) -> TeamMatchStats:
    """Per-side stats; any missing value falls back to 0 (possession 50)."""
    if not raw:
        return TeamMatchStats(team_id=team_id)

    shots = _section(raw, "shots") or {}
    attacks = _section(raw, "attacks") or {}
    possession = _to_float(raw.get("possessiontime")) or DEFAULT_POSSESSION

    return TeamMatchStats(
        team_id=team_id,
        possession=possession,
        shots_total=_to_int(shots.get("total")),
        shots_on_target=_to_int(shots.get("ongoal")),
        shots_off_target=_to_int(shots.get("offgoal")),
        attacks=_to_int(attacks.get("attacks")),
        dangerous_attacks=_to_int(attacks.get("dangerous_attacks")),
        corners=_to_int(raw.get("corners")),
        yellow_cards=_to_int(raw.get("yellowcards")),
        red_cards=_to_int(raw.get("redcards")),
    )


def parse_snapshot(raw: dict) -> MatchSnapshot:
    """
    Convert one live-score fixture into a MatchSnapshot.

    Raises:
        MalformedSnapshotException: If stats, scores, time, events, league or
            either team is missing or is not the expected shape
    """
    fixture_id = raw.get("id")

    events = raw.get("events")
    required = {
        "stats": _section(raw, "stats"),
        "scores": _section(raw, "scores"),
        "time": _section(raw, "time"),
        "league": _data(raw, "league"),
        "localTeam": _data(raw, "localTeam"),
        "visitorTeam": _data(raw, "visitorTeam"),
        "events": events.get("data") if isinstance(events, dict) else None,
    }
    for name, section in required.items():
        if section is None:
            raise MalformedSnapshotException(fixture_id, name)
    if not isinstance(required["events"], list):
        raise MalformedSnapshotException(fixture_id, "events")

    league_data = required["league"]
    home_data = required["localTeam"]
    away_data = required["visitorTeam"]

    home_id = str(raw.get("localteamId", home_data.get("id", "")))
    away_id = str(raw.get("visitorteamId", away_data.get("id", "")))

    stats_by_team = {
        str(s.get("teamId")): s
        for s in _items(required["stats"].get("data"))
        if isinstance(s, dict)
    }

    scores = required["scores"]
    time_info = required["time"]
    country = _league_country(league_data, fixture_id)
    fixture_id = _to_int(fixture_id)

    try:
        return MatchSnapshot(
            id=fixture_id,
            minute=int(_clamp(_to_int(time_info.get("minute")), 0, 120)),
            status=str(time_info.get("status") or ""),
            league=League(
                id=str(league_data.get("id", "")),
                name=league_data.get("name", ""),
                country=country,
                logo_url=league_data.get("logoPath") or "",
            ),
            home_team=Team(id=home_id, name=home_data.get("name", ""), logo_url=home_data.get("logoPath") or ""),
            away_team=Team(id=away_id, name=away_data.get("name", ""), logo_url=away_data.get("logoPath") or ""),
            score=Score(
                home=max(0, _to_int(scores.get("localTeamScore"))),
                away=max(0, _to_int(scores.get("visitorTeamScore"))),
            ),
            home_stats=parse_team_stats(stats_by_team.get(home_id), home_id),
            away_stats=parse_team_stats(stats_by_team.get(away_id), away_id),
            events=tuple(
                parse_event(e, fixture_id) for e in required["events"] if isinstance(e, dict)
            ),
        )
    except ValueError as e:
        # Empty team or league names
        raise MalformedSnapshotException(fixture_id, str(e)) from e


def iter_live_fixtures(payload: Any) -> list[dict]:
    """Raw fixtures from a live-scores payload (a mapping or a plain list)."""
    if isinstance(payload, dict):
        fixtures = payload.values()
    elif isinstance(payload, list):
        fixtures = payload
    else:
        return []
    return [f for f in fixtures if isinstance(f, dict)]


# ----------------------------------------------------------------------
# Fixture info
# ----------------------------------------------------------------------

def parse_scoring_minutes(raw_stats: dict) -> tuple[ScoringMinuteBucket, ...]:
    season = raw_stats.get("seasonStats") or {}
    scoring = season.get("scoringMinutes") or []
    if not scoring or not isinstance(scoring[0], dict):
        return ()
    return tuple(
        ScoringMinuteBucket(minute=str(p.get("minute", "")), count=max(0, _to_int(p.get("count"))))
        for p in scoring[0].get("period") or []
        if isinstance(p, dict)
    )


def parse_season_stats(raw_stats: Optional[dict]) -> Optional[TeamSeasonStats]:
    if not isinstance(raw_stats, dict):
        return None

    team = raw_stats.get("team") or {}
    return TeamSeasonStats(
        team_id=str(team.get("id", raw_stats.get("id", ""))),
        matches_played=max(0, _to_int(raw_stats.get("nbMatches"))),
        avg_goals_for=_to_float(raw_stats.get("avgTotalGoals"), 0.0),
        avg_goals_against=_to_float(raw_stats.get("avgTotalConcededGoals"), 0.0),
        avg_home_goals_for=_to_float(raw_stats.get("avgTotalHomeGoals"), 0.0),
        avg_home_goals_against=_to_float(raw_stats.get("avgTotalHomeConcededGoals"), 0.0),
        avg_away_goals_for=_to_float(raw_stats.get("avgTotalAwayGoals"), 0.0),
        avg_away_goals_against=_to_float(raw_stats.get("avgTotalAwayConcededGoals"), 0.0),
        scoring_minutes=parse_scoring_minutes(raw_stats),
    )


def parse_priors(raw_probability: Optional[dict]) -> Optional[PreMatchPriors]:
    """
    Pre-match priors from the fixture-info `probability` block.

    An incomplete outcome triple becomes uniform thirds; missing goal-market
    priors stay None so they are not blended.
    """
    if not isinstance(raw_probability, dict):
        return None

    home = _probability(raw_probability.get("home"))
    draw = _probability(raw_probability.get("draw"))
    away = _probability(raw_probability.get("away"))
    if None in (home, draw, away):
        outcome = OutcomeProbabilities.uniform()
    else:
        outcome = OutcomeProbabilities.normalized(home, draw, away)

    return PreMatchPriors(
        outcome=outcome,
        over_15=_probability(raw_probability.get("over_1_5")),
        over_25=_probability(raw_probability.get("over_2_5")),
        over_35=_probability(raw_probability.get("over_3_5")),
        btts=_probability(raw_probability.get("btts")),
    )


def parse_fixture_context(raw: Any, fixture_id: int) -> FixtureContext:
    """Convert a fixture-info payload; every missing section degrades to None."""
    if not isinstance(raw, dict):
        logger.warning(f"Fixture info for {fixture_id} is not an object, ignoring it")
        return FixtureContext(fixture_id=fixture_id)

    return FixtureContext(
        fixture_id=fixture_id,
        priors=parse_priors(raw.get("probability")),
        home_season_stats=parse_season_stats(raw.get("localTeamSeasonStats")),
        away_season_stats=parse_season_stats(raw.get("visitorTeamSeasonStats")),
    )
