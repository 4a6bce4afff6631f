from datetime import datetime

from pytz import timezone, UnknownTimeZoneError

from src.config import get_settings


def get_app_timezone():
    """Configured application timezone (APP_TIMEZONE), UTC if unknown."""
    try:
        return timezone(get_settings().app_timezone)
    except UnknownTimeZoneError:
        return timezone("UTC")


def get_current_time() -> datetime:
    """Get current time in the application timezone."""
    return datetime.now(get_app_timezone())


def get_timestamp_str() -> str:
    """ISO-8601 timestamp in the application timezone."""
    return get_current_time().isoformat()
