"""Infrastructure cache module."""

from .cache_service import CacheService
from .redis_client import RedisClient, create_redis_client

__all__ = ["CacheService", "RedisClient", "create_redis_client"]
