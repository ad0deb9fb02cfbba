"""
Time parsing helpers shared by the schedule models and query layers.

AeroDataBox returns times as strings such as '2024-01-01 10:30+00:00'
(airport local, with offset) and '2024-01-01 10:30Z' (UTC). They are kept
as opaque strings on the models and only parsed here, on demand. Any value
that does not parse is reported as None, never raised.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

UPSTREAM_MINUTE_FORMAT = '%Y-%m-%dT%H:%M'


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 style timestamp, or None if empty/invalid."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def parse_utc(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a timestamp into an aware UTC datetime.

    Naive values are assumed to already be UTC.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_local(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an airport-local timestamp into a naive wall-clock datetime.

    The offset is dropped rather than applied, so the calendar date and
    time-of-day are the ones printed on the departures board.
    """
    dt = parse_timestamp(value)
    if dt is None:
        return None
    return dt.replace(tzinfo=None)


def floor_to_minute(dt: datetime) -> datetime:
    return dt.replace(second=0, microsecond=0)


def floor_to_hour(dt: datetime) -> datetime:
    return dt.replace(minute=0, second=0, microsecond=0)


def format_upstream_minute(dt: datetime) -> str:
    """Format as 'YYYY-MM-DDTHH:MM' (no timezone suffix)."""
    return dt.strftime(UPSTREAM_MINUTE_FORMAT)


def local_now(tz_name: str, now: Optional[datetime] = None) -> datetime:
    """
    Current wall-clock time at the named timezone, as a naive datetime.

    Falls back to UTC when the timezone database has no such zone.
    """
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f'Unknown timezone {tz_name!r}, falling back to UTC')
        tz = timezone.utc

    current = now or datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return current.astimezone(tz).replace(tzinfo=None)
