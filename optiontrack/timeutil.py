"""Expiration clock helpers shared by pricing and position enrichment."""

from datetime import date, datetime, tzinfo
from typing import Optional, Union

import pytz

SECONDS_PER_DAY = 86400.0

DateLike = Union[date, datetime]


def as_aware_datetime(value: DateLike, tz: Optional[tzinfo] = None) -> datetime:
    """
    Normalize a date or datetime to a timezone-aware datetime.

    A plain date means midnight in ``tz``; naive datetimes are read as ``tz``
    wall-clock time. ``tz`` defaults to UTC.
    """
    tz = tz or pytz.UTC

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value
        naive = value
    elif isinstance(value, date):
        naive = datetime(value.year, value.month, value.day)
    else:
        raise TypeError(f"Expected date or datetime, got {type(value).__name__}")

    localize = getattr(tz, "localize", None)
    if localize is not None:
        return localize(naive)
    return naive.replace(tzinfo=tz)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def days_until(
    expiration: DateLike,
    now: Optional[DateLike] = None,
    tz: Optional[tzinfo] = None,
) -> float:
    """Fractional days from ``now`` to ``expiration`` (negative once past)."""
    end = as_aware_datetime(expiration, tz)
    start = as_aware_datetime(now, tz) if now is not None else utc_now()
    return (end - start).total_seconds() / SECONDS_PER_DAY
