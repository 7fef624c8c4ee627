from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import TimeEntry, TimeEntryCandidate, TimeEntryDraft


class TimeEntryRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_for_employee_between(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
    ) -> Sequence[TimeEntry]:
        """Entries of one employee with ``start_date <= work_date <= end_date``."""

        raise NotImplementedError

    def create(self, *, candidate: TimeEntryCandidate, draft: TimeEntryDraft) -> int:
        raise NotImplementedError

    def update(self, *, entry_id: int, candidate: TimeEntryCandidate, draft: TimeEntryDraft) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
