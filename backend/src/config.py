"""
Application Settings

All runtime configuration is read from environment variables (a local .env
file is loaded by the API entry point through python-dotenv).
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional


def _env_bool(name: str, default: bool = False) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {name} must be an integer, got '{raw}'") from None


@dataclass
class Settings:
    """Runtime settings for the live prediction service."""
    feed_base_url: str = "https://api.betmines.com/betmines/v1"
    feed_timeout_seconds: int = 30
    live_scores_ttl_seconds: int = 30
    fixture_info_ttl_seconds: int = 300
    cache_max_entries: int = 512
    prior_blend_policy: str = "fixed"
    app_timezone: str = "UTC"
    log_level: str = "INFO"
    live_warmup_enabled: bool = False
    live_warmup_interval_seconds: int = 30
    redis_host: Optional[str] = None
    redis_port: int = 6379
    redis_password: Optional[str] = None
    cors_origins: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> "Settings":
        cors = os.getenv("CORS_ORIGINS", "")
        return cls(
            feed_base_url=os.getenv("FEED_BASE_URL", cls.feed_base_url).rstrip("/"),
            feed_timeout_seconds=_env_int("FEED_TIMEOUT_SECONDS", cls.feed_timeout_seconds),
            live_scores_ttl_seconds=_env_int("LIVE_SCORES_TTL_SECONDS", cls.live_scores_ttl_seconds),
            fixture_info_ttl_seconds=_env_int("FIXTURE_INFO_TTL_SECONDS", cls.fixture_info_ttl_seconds),
            cache_max_entries=_env_int("CACHE_MAX_ENTRIES", cls.cache_max_entries),
            prior_blend_policy=os.getenv("PRIOR_BLEND_POLICY", cls.prior_blend_policy),
            app_timezone=os.getenv("APP_TIMEZONE", cls.app_timezone),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            live_warmup_enabled=_env_bool("LIVE_WARMUP_ENABLED", cls.live_warmup_enabled),
            live_warmup_interval_seconds=_env_int(
                "LIVE_WARMUP_INTERVAL_SECONDS", cls.live_warmup_interval_seconds
            ),
            redis_host=os.getenv("REDIS_HOST") or None,
            redis_port=_env_int("REDIS_PORT", cls.redis_port),
            redis_password=os.getenv("REDIS_PASSWORD") or None,
            cors_origins=[origin.strip() for origin in cors.split(",") if origin.strip()],
        )


@lru_cache()
def get_settings() -> Settings:
    """Get application settings (cached)."""
    return Settings.from_env()
