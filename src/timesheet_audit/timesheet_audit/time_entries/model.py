from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import TimeOfDay, format_minutes, minutes_of_day
from ..common.validators import optional_int, require_non_negative_int
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class TimeEntryCandidate:
    """A time entry about to be saved, checked before it is persisted.

    Times are minutes since midnight of ``work_date``; ``end_minutes`` may be
    1440 ("24:00"). Entries crossing midnight are not representable and are
    rejected by ``create``.
    """

    employee_id: int
    work_date: date
    start_minutes: int
    end_minutes: int
    break_minutes: int = 0
    exclude_entry_id: Optional[int] = None

    @classmethod
    def create(
        cls,
        *,
        employee_id: int,
        work_date: date,
        start: TimeOfDay,
        end: TimeOfDay,
        break_minutes=0,
        exclude_entry_id: Optional[int] = None,
    ) -> "TimeEntryCandidate":
        if not isinstance(work_date, date):
            raise ValidationError("Work date is required")
        start_minutes = minutes_of_day(start)
        end_minutes = minutes_of_day(end)
        if end_minutes < start_minutes:
            raise ValidationError("End time must not be before start time (shifts across midnight are not supported)")

        return cls(
            employee_id=require_non_negative_int(employee_id, "Employee id"),
            work_date=work_date,
            start_minutes=start_minutes,
            end_minutes=end_minutes,
            break_minutes=require_non_negative_int(0 if break_minutes in (None, "") else break_minutes, "Break minutes"),
            exclude_entry_id=optional_int(exclude_entry_id, "Excluded entry id"),
        )


@dataclass(frozen=True)
class TimeEntry:
    """Domain entity: a persisted time entry row."""

    entry_id: int
    employee_id: int
    work_date: date
    start_minutes: int
    end_minutes: int
    break_minutes: int = 0
    site: Optional[str] = None
    customer: Optional[str] = None
    notes: Optional[str] = None

    def to_audit_values(self) -> dict:
        """Field snapshot written into ledger old/new values."""
        return {
            "entry_id": self.entry_id,
            "employee_id": self.employee_id,
            "work_date": self.work_date,
            "start": format_minutes(self.start_minutes),
            "end": format_minutes(self.end_minutes),
            "break_minutes": self.break_minutes,
            "site": self.site or "",
            "customer": self.customer or "",
            "notes": self.notes or "",
        }


@dataclass(frozen=True)
class TimeEntryDraft:
    """Descriptive fields of an entry being created or changed."""

    site: Optional[str] = None
    customer: Optional[str] = None
    notes: Optional[str] = None
