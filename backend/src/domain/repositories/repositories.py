"""
Domain Repository Interfaces Module

These are abstract interfaces that define how the domain layer accesses data.
Concrete implementations are provided in the infrastructure layer.
This follows the Dependency Inversion Principle (DIP).
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities.entities import FixtureContext, MatchSnapshot


class LiveFeedRepository(ABC):
    """Abstract repository for the live fixture feed."""

    @abstractmethod
    async def get_live_snapshots(self) -> list[MatchSnapshot]:
        """
        Get snapshots for every fixture currently in the live batch.

        Malformed fixtures are left out of the result.

        Raises:
            UpstreamFetchException: If the live batch cannot be retrieved
        """
        pass

    @abstractmethod
    async def get_fixture_context(self, fixture_id: int) -> Optional[FixtureContext]:
        """
        Get pre-match priors and season statistics for a fixture.

        Raises:
            UpstreamFetchException: If the fixture info cannot be retrieved
        """
        pass
