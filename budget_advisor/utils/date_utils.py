"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def days_ago(days: int, now: datetime | None = None) -> datetime:
    """Start of a lookback window ending now"""
    return (now or utcnow()) - timedelta(days=days)


def iso_timestamp(now: datetime | None = None) -> str:
    return (now or utcnow()).isoformat()
