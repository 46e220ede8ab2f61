from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from pizza_store.core.config import settings

STORE_TZ = timezone.utc if settings.STORE_TIMEZONE.upper() == "UTC" else ZoneInfo(settings.STORE_TIMEZONE)


def ensure_utc(dt: datetime) -> datetime:
    """Return dt as an aware UTC datetime.

    SQLite hands DateTime(timezone=True) columns back as naive values, so a
    naive dt is assumed to already be in UTC.
    """
    if dt is None:
        return None
    if getattr(dt, "tzinfo", None) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_store_time(dt: datetime) -> datetime:
    """Convert a datetime to the store time zone for API responses."""
    if dt is None:
        return None
    return ensure_utc(dt).astimezone(STORE_TZ)
