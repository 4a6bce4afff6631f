"""
Expected Goals Service Module

Location-based xG for shot events.

Pitch coordinates run 0-100 on both axes. The home side attacks the goal
at x=100, the away side the goal at x=0; both goal mouths sit at y=30.
"""

import math
from typing import Iterable

from src.domain.entities.entities import EventType, MatchEvent


class ExpectedGoalsService:
    """
    Converts shot events into expected-goal contributions.

    xG = min(1, CALIBRATION / distance² × exp(-CENTRALITY_DECAY × |y - GOAL_MOUTH_Y| / GOAL_MOUTH_Y))
    """

    CALIBRATION = 90.75
    CENTRALITY_DECAY = 1.22
    GOAL_MOUTH_Y = 30.0
    HOME_GOAL_LINE_X = 100.0
    AWAY_GOAL_LINE_X = 0.0

    def shot_xg(self, event: MatchEvent, is_home_team: bool) -> float:
        """
        Expected goals for a single shot.

        Args:
            event: Shot event with pitch coordinates
            is_home_team: Whether the shooting side is the home team

        Returns:
            xG in [0, 1]; 0 when the event has no coordinates
        """
        if not event.has_coordinates:
            return 0.0

        target_x = self.HOME_GOAL_LINE_X if is_home_team else self.AWAY_GOAL_LINE_X
        distance = math.hypot(target_x - event.x, self.GOAL_MOUTH_Y - event.y)
        if distance == 0:
            return 1.0

        centrality = math.exp(-self.CENTRALITY_DECAY * abs(event.y - self.GOAL_MOUTH_Y) / self.GOAL_MOUTH_Y)
        return min(1.0, (self.CALIBRATION / distance ** 2) * centrality)

    def team_xg(self, events: Iterable[MatchEvent], team_id: str, is_home_team: bool) -> float:
        """Running xG for a team: the sum over its shot events."""
        return sum(
            self.shot_xg(event, is_home_team)
            for event in events
            if event.type == EventType.SHOT and event.team_id == team_id
        )
