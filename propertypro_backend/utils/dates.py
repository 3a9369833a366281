from datetime import date, datetime, timezone

from dateutil.parser import isoparse


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_utc() -> date:
    return utcnow().date()


def parse_date(value) -> date:
    """Accepts YYYY-MM-DD or a full ISO-8601 timestamp; raises ValueError otherwise."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"not a date: {value!r}")
    return isoparse(value.strip()).date()


def isoformat_or_none(value):
    return value.isoformat() if value else None
