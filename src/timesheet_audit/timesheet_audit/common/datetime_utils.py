from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Tuple, Union

from ..core.constants import MINUTES_PER_DAY
from ..core.exceptions import ValidationError

TimeOfDay = Union[str, time, timedelta]


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def now_local() -> datetime:
    """Current local time truncated to whole seconds.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now().replace(microsecond=0)


def minutes_of_day(value: TimeOfDay) -> int:
    """Convert a time of day into minutes since midnight.

    Accepts ``"HH:MM"`` / ``"HH:MM:SS"`` strings, ``datetime.time`` or the
    ``timedelta`` values mysql-connector returns for TIME columns.
    ``"24:00"`` is accepted as end of day. Seconds are dropped. Bare numbers
    are rejected: ``8`` could mean 08:00 or eight minutes past midnight.
    """

    if isinstance(value, time):
        minutes = value.hour * 60 + value.minute
    elif isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60
    elif isinstance(value, str):
        minutes = _parse_hhmm(value)
    else:
        raise ValidationError(f"Invalid time of day: {value!r}")

    if minutes < 0 or minutes > MINUTES_PER_DAY:
        raise ValidationError(f"Time of day out of range: {value!r}")
    return minutes


def _parse_hhmm(value: str) -> int:
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Invalid time of day (HH:MM): {value!r}")

    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if minutes > 59 or seconds > 59:
        raise ValidationError(f"Invalid time of day (HH:MM): {value!r}")
    if hours == 24 and (minutes or seconds):
        raise ValidationError(f"Invalid time of day (HH:MM): {value!r}")
    return hours * 60 + minutes


def format_minutes(minutes: int) -> str:
    """Render a minute count as HH:MM (no day wrap)."""
    sign = "-" if minutes < 0 else ""
    minutes = abs(int(minutes))
    return f"{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def week_bucket(work_date: date) -> Tuple[int, int]:
    """ISO-8601 (year, week) the date belongs to."""
    iso = work_date.isocalendar()
    return iso[0], iso[1]


def week_bounds(work_date: date) -> Tuple[date, date]:
    """Monday and Sunday of the ISO week containing ``work_date``."""
    monday = work_date - timedelta(days=work_date.weekday())
    return monday, monday + timedelta(days=6)
