"""
Timestamp helpers shared by the schemas and the services.

The backend sends ISO-8601 strings, sometimes date-only and sometimes with a
trailing ``Z``. Everything is normalised to timezone-aware datetimes; naive
values are read as UTC.
"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo

from .config import settings

Timestamp = Union[str, date, datetime]


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: Optional[Timestamp]) -> Optional[datetime]:
    """Parse a backend timestamp; empty values yield None"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return ensure_aware(datetime.fromisoformat(text))
    except ValueError:
        raise ValueError(f"Invalid timestamp: {value!r}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialise a timestamp the way the backend filters expect it"""
    return ensure_aware(value).astimezone(timezone.utc).isoformat()


def local_zone() -> ZoneInfo:
    return ZoneInfo(settings.TIMEZONE)


def day_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """First and last instant of the calendar day containing ``now``"""
    local = ensure_aware(now).astimezone(local_zone())
    start = local.replace(hour=0, minute=0, second=0, microsecond=0)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end


def week_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Sunday 00:00 to Saturday 23:59:59.999999 of the week containing ``now``"""
    start, _ = day_bounds(now)
    # Python weekday(): Monday=0 ... Sunday=6
    days_since_sunday = (start.weekday() + 1) % 7
    start = start - timedelta(days=days_since_sunday)
    end = start + timedelta(days=7) - timedelta(microseconds=1)
    return start, end


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    start, _ = day_bounds(now)
    start = start.replace(day=1)
    if start.month == 12:
        next_month = start.replace(year=start.year + 1, month=1)
    else:
        next_month = start.replace(month=start.month + 1)
    return start, next_month - timedelta(microseconds=1)
