"""
Betmines Data Source

Live scores and per-fixture info (pre-match probabilities, season stats)
from the public Betmines API. Every response goes through the injected
CacheService, so a burst of reads costs one upstream call per TTL.

Endpoints:
- /fixtures/livescores
- /fixtures/info/<fixture_id>?includeSeasonStats=true
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from src.config import Settings
from src.domain.entities.entities import FixtureContext, MatchSnapshot
from src.domain.exceptions import MalformedSnapshotException, UpstreamFetchException
from src.domain.repositories.repositories import LiveFeedRepository
from src.infrastructure.cache.cache_service import CacheService
from src.infrastructure.data_sources.feed_parser import (
    iter_live_fixtures,
    parse_fixture_context,
    parse_snapshot,
)


logger = logging.getLogger(__name__)


@dataclass
class BetminesConfig:
    """Configuration for the Betmines API."""
    base_url: str = "https://api.betmines.com/betmines/v1"
    timeout: int = 30
    live_scores_ttl: int = CacheService.TTL_LIVE_SCORES
    fixture_info_ttl: int = CacheService.TTL_FIXTURE_INFO

    @classmethod
    def from_settings(cls, settings: Settings) -> "BetminesConfig":
        return cls(
            base_url=settings.feed_base_url,
            timeout=settings.feed_timeout_seconds,
            live_scores_ttl=settings.live_scores_ttl_seconds,
            fixture_info_ttl=settings.fixture_info_ttl_seconds,
        )


class BetminesSource(LiveFeedRepository):
    """
    Data source for the Betmines live feed.

    No API key is required.
    """

    SOURCE_NAME = "Betmines"

    def __init__(
        self,
        cache: CacheService,
        config: Optional[BetminesConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the data source.

        Args:
            cache: Cache for raw responses
            config: API configuration
            client: Optional shared HTTP client (a short-lived one is used otherwise)
        """
        self.cache = cache
        self.config = config or BetminesConfig()
        self._client = client

    async def _make_request(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """
        Make a request to the Betmines API.

        Args:
            endpoint: API endpoint (e.g., "/fixtures/livescores")
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            UpstreamFetchException: On transport errors, non-2xx statuses or
                an undecodable body
        """
        url = f"{self.config.base_url}{endpoint}"
        headers = {"Accept": "application/json"}

        try:
            if self._client is not None:
                response = await self._client.get(
                    url, headers=headers, params=params, timeout=self.config.timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(
                        url, headers=headers, params=params, timeout=self.config.timeout
                    )
            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"Betmines HTTP error for {endpoint}: {e}")
            raise UpstreamFetchException(
                f"Betmines returned {e.response.status_code} for {endpoint}"
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Betmines request error for {endpoint}: {e}")
            raise UpstreamFetchException(f"Betmines request failed for {endpoint}: {e}") from e
        except ValueError as e:
            logger.error(f"Betmines returned invalid JSON for {endpoint}: {e}")
            raise UpstreamFetchException(f"Betmines returned invalid JSON for {endpoint}") from e

    async def get_live_scores(self) -> Any:
        """Raw live-scores payload (cached for `live_scores_ttl` seconds)."""
        return await self.cache.get_or_fetch(
            CacheService.live_scores_key(),
            lambda: self._make_request("/fixtures/livescores"),
            self.config.live_scores_ttl,
        )

    async def refresh_live_scores(self) -> Any:
        """Fetch live scores unconditionally and replace the cached payload."""
        payload = await self._make_request("/fixtures/livescores")
        self.cache.set(CacheService.live_scores_key(), payload, self.config.live_scores_ttl)
        return payload

    async def get_fixture_info(self, fixture_id: int) -> Any:
        """Raw fixture-info payload (cached for `fixture_info_ttl` seconds)."""
        return await self.cache.get_or_fetch(
            CacheService.fixture_info_key(fixture_id),
            lambda: self._make_request(
                f"/fixtures/info/{fixture_id}", params={"includeSeasonStats": "true"}
            ),
            self.config.fixture_info_ttl,
        )

    async def get_live_snapshots(self) -> list[MatchSnapshot]:
        payload = await self.get_live_scores()

        snapshots = []
        for raw in iter_live_fixtures(payload):
            try:
                snapshots.append(parse_snapshot(raw))
            except MalformedSnapshotException as e:
                logger.warning(f"Skipping fixture: {e}")

        logger.info(f"{self.SOURCE_NAME}: {len(snapshots)} live fixtures")
        return snapshots

    async def get_fixture_context(self, fixture_id: int) -> Optional[FixtureContext]:
        payload = await self.get_fixture_info(fixture_id)
        return parse_fixture_context(payload, fixture_id)
