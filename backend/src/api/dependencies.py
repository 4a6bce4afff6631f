"""
API Dependencies Module

Provides dependency injection for FastAPI routes.
Contains factory functions for creating use case dependencies.
"""

from functools import lru_cache

from fastapi import Depends

from src.config import Settings, get_settings
from src.infrastructure.cache.cache_service import CacheService
from src.infrastructure.cache.redis_client import create_redis_client
from src.infrastructure.data_sources.betmines import BetminesConfig, BetminesSource
from src.domain.repositories.repositories import LiveFeedRepository
from src.domain.services.blend_policy import get_blend_policy
from src.domain.services.match_analysis_service import MatchAnalysisService
from src.application.use_cases.live_predictions_use_case import (
    GetLivePredictionsUseCase,
    GetLivePredictionUseCase,
)


@lru_cache()
def get_cache_service() -> CacheService:
    """Get the feed cache (cached)."""
    settings = get_settings()
    return CacheService(
        max_entries=settings.cache_max_entries,
        redis=create_redis_client(settings),
    )


@lru_cache()
def get_betmines_source() -> BetminesSource:
    """Get Betmines data source (cached)."""
    return BetminesSource(
        cache=get_cache_service(),
        config=BetminesConfig.from_settings(get_settings()),
    )


def get_live_feed() -> LiveFeedRepository:
    """Live feed used by the prediction routes."""
    return get_betmines_source()


@lru_cache()
def get_match_analysis_service() -> MatchAnalysisService:
    """Get prediction aggregator with the configured blend policy (cached)."""
    settings: Settings = get_settings()
    return MatchAnalysisService(blend_policy=get_blend_policy(settings.prior_blend_policy))


def get_live_predictions_use_case(
    feed: LiveFeedRepository = Depends(get_live_feed),
    analysis_service: MatchAnalysisService = Depends(get_match_analysis_service),
) -> GetLivePredictionsUseCase:
    return GetLivePredictionsUseCase(feed, analysis_service)


def get_live_prediction_use_case(
    feed: LiveFeedRepository = Depends(get_live_feed),
    analysis_service: MatchAnalysisService = Depends(get_match_analysis_service),
) -> GetLivePredictionUseCase:
    return GetLivePredictionUseCase(feed, analysis_service)
