from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import week_bounds
from .model import TimeEntry, TimeEntryCandidate
from .repository import TimeEntryRepository


def gross_minutes(entry: TimeEntry | TimeEntryCandidate) -> int:
    """End minus start, before breaks."""
    return entry.end_minutes - entry.start_minutes


def net_minutes(entry: TimeEntry | TimeEntryCandidate) -> int:
    """Gross minus break minutes. Not clamped at zero."""
    return gross_minutes(entry) - entry.break_minutes


def _sum_net(entries: Iterable[TimeEntry], exclude_id: Optional[int]) -> int:
    return sum(net_minutes(e) for e in entries if exclude_id is None or e.entry_id != exclude_id)


class AggregationEngine:
    """Sums persisted net minutes per employee and day / ISO week."""

    def __init__(self, entries: TimeEntryRepository):
        self._entries = entries

    def daily_total(self, employee_id: int, work_date: date, exclude_id: Optional[int] = None) -> int:
        rows = self._entries.list_for_employee_between(
            employee_id=int(employee_id),
            start_date=work_date,
            end_date=work_date,
        )
        return _sum_net(rows, exclude_id)

    def weekly_total(self, employee_id: int, work_date: date, exclude_id: Optional[int] = None) -> int:
        monday, sunday = week_bounds(work_date)
        rows = self._entries.list_for_employee_between(
            employee_id=int(employee_id),
            start_date=monday,
            end_date=sunday,
        )
        return _sum_net(rows, exclude_id)
