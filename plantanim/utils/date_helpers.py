"""
Calendar helpers shared by the suggestion engine, task generator and
notification reconciler.

Dates are handled as calendar days in the farm's local time. Date keys are
ISO ``YYYY-MM-DD`` strings, which sort lexicographically in date order.
"""
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union

DateLike = Union[date, datetime]


def reference_time(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """
    Resolve the reference time for a calculation.

    With a timezone the result is expressed in it, so that ``.date()`` is the
    local calendar day and reminder hours are local wall-clock hours. A naive
    ``now`` is taken to be local already.

    Args:
        now: Caller-supplied time, or None for the current time
        tz: Farm timezone; None keeps ``now`` as given (UTC when omitted)

    Returns:
        The reference datetime
    """
    if now is None:
        return datetime.now(tz or timezone.utc)
    if tz is None:
        return now
    if now.tzinfo is None:
        return now.replace(tzinfo=tz)
    return now.astimezone(tz)


def to_date(value: DateLike) -> date:
    """
    Reduce a date or datetime to its calendar date.

    Args:
        value: A date or datetime

    Returns:
        The calendar date (datetimes keep their own wall-clock date)
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def date_key(value: DateLike) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return to_date(value).isoformat()


def parse_date_key(key: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` key.

    Raises:
        ValueError: If the key is not a valid ISO date
    """
    return date.fromisoformat(key)


def day_in_cycle(planting_date: DateLike, current: DateLike) -> int:
    """
    Day number in a crop cycle, where the planting day is day 1.

    Dates before planting clamp to day 1.

    Args:
        planting_date: Date the crop was planted
        current: Reference date

    Returns:
        Day in cycle, always >= 1
    """
    elapsed = (to_date(current) - to_date(planting_date)).days
    return max(1, elapsed + 1)


def cycle_day_to_date(planting_date: DateLike, day: int) -> date:
    """Calendar date of a given cycle day."""
    return to_date(planting_date) + timedelta(days=day - 1)


def align_tz(value: datetime, reference: datetime) -> datetime:
    """
    Make ``value`` comparable with ``reference``.

    A naive value is assumed to be in the reference's timezone; an aware value
    compared against a naive reference is converted and made naive.
    """
    if value.tzinfo is None and reference.tzinfo is not None:
        return value.replace(tzinfo=reference.tzinfo)
    if value.tzinfo is not None and reference.tzinfo is None:
        return value.astimezone().replace(tzinfo=None)
    return value


def end_of_day(day: date, tzinfo=None) -> datetime:
    """Midnight at the end of ``day`` (i.e. the start of the next day)."""
    return datetime.combine(day + timedelta(days=1), time.min, tzinfo=tzinfo)


def at_local_time(day: date, hour: int, tzinfo=None) -> datetime:
    """A datetime on ``day`` at ``hour``:00 in the given timezone."""
    return datetime.combine(day, time(hour=hour), tzinfo=tzinfo)
