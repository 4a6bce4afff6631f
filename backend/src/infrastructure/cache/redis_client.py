"""
Redis Client Module

Provides a wrapper for Redis operations with JSON serialization support.
Only constructed when REDIS_HOST is configured; the in-memory cache layer
works without it.
"""

import json
import logging
from typing import Any, Optional, Union
from datetime import timedelta

import redis

from src.config import Settings

logger = logging.getLogger(__name__)


class RedisClient:
    """Wrapper for Redis operations with JSON support."""

    def __init__(
        self,
        host: str,
        port: int = 6379,
        db: int = 0,
        password: Optional[str] = None,
        decode_responses: bool = True,
    ):
        self.host = host
        self.port = port
        self.password = password
        self.db = db

        try:
            self._redis = redis.Redis(
                host=self.host,
                port=self.port,
                db=self.db,
                password=self.password,
                decode_responses=decode_responses,
                socket_timeout=5,
                retry_on_timeout=True,
            )
            # Test connection
            self._redis.ping()
            logger.info(f"Connected to Redis at {self.host}:{self.port}")
        except redis.RedisError as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self._redis = None

    @property
    def is_connected(self) -> bool:
        """Check if Redis is connected."""
        if self._redis is None:
            return False
        try:
            return bool(self._redis.ping())
        except redis.RedisError:
            return False

    def get(self, key: str) -> Optional[Any]:
        """Get value from Redis and deserialize JSON."""
        if self._redis is None:
            return None

        try:
            value = self._redis.get(key)
            if value:
                return json.loads(value)
            return None
        except (redis.RedisError, ValueError) as e:
            logger.error(f"Error getting key {key} from Redis: {e}")
            return None

    def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: Optional[Union[int, timedelta]] = None,
    ) -> bool:
        """Serialize value to JSON and set in Redis with optional TTL."""
        if self._redis is None:
            return False

        try:
            serialized_value = json.dumps(value, default=str)
            return bool(self._redis.set(key, serialized_value, ex=ttl_seconds))
        except (redis.RedisError, TypeError) as e:
            logger.error(f"Error setting key {key} in Redis: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Delete key from Redis."""
        if self._redis is None:
            return False
        try:
            return bool(self._redis.delete(key))
        except redis.RedisError as e:
            logger.error(f"Error deleting key {key} from Redis: {e}")
            return False


def create_redis_client(settings: Settings) -> Optional[RedisClient]:
    """Redis client for the configured host, or None when REDIS_HOST is unset."""
    if not settings.redis_host:
        return None
    return RedisClient(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
    )
