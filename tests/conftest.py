from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Callable, Optional

import pytest

from src.timesheet_audit.timesheet_audit.compliance.model import BreakRule
from src.timesheet_audit.timesheet_audit.container import Container, assemble_container
from src.timesheet_audit.timesheet_audit.core.constants import GENESIS_HASH
from src.timesheet_audit.timesheet_audit.core.exceptions import StorageError
from src.timesheet_audit.timesheet_audit.ledger.model import ChainHead, LedgerEntry
from src.timesheet_audit.timesheet_audit.ledger.service import AuditLedger
from src.timesheet_audit.timesheet_audit.time_entries.model import TimeEntry, TimeEntryCandidate, TimeEntryDraft


class InMemoryLedger:
    def __init__(self):
        self._entries: list[LedgerEntry] = []
        self._lock = threading.Lock()
        self.fail_next_append = False

    def append(self, compose: Callable[[ChainHead], LedgerEntry]) -> LedgerEntry:
        with self._lock:
            if self._entries:
                last = self._entries[-1]
                head = ChainHead(last_entry_id=last.entry_id, last_hash=last.entry_hash)
            else:
                head = ChainHead(last_entry_id=0, last_hash=GENESIS_HASH)
            entry = compose(head)
            if self.fail_next_append:
                self.fail_next_append = False
                raise StorageError("Ledger append failed: disk full")
            self._entries.append(entry)
            return entry

    def list_all(self):
        return list(self._entries)

    def list_range(self, *, start_date: date, end_date: date, table_name: Optional[str] = None):
        return [
            e
            for e in self._entries
            if start_date <= e.created_at.date() <= end_date and (table_name is None or e.table_name == table_name)
        ]

    def list_for_record(self, *, table_name: str, record_id: int):
        rows = [e for e in self._entries if e.table_name == table_name and e.record_id == record_id]
        return list(reversed(rows))

    def list_recent(self, *, limit: int, table_name: Optional[str] = None, action: Optional[str] = None):
        rows = [
            e
            for e in self._entries
            if (table_name is None or e.table_name == table_name) and (action is None or e.action == action)
        ]
        return list(reversed(rows))[:limit]

    def list_by_action(self, *, table_name: str, action: str):
        return [e for e in self._entries if e.table_name == table_name and e.action == action]

    # Helpers simulating direct edits to the underlying storage.

    def tamper(self, entry_id: int, **changes) -> None:
        idx = next(i for i, e in enumerate(self._entries) if e.entry_id == entry_id)
        self._entries[idx] = replace(self._entries[idx], **changes)

    def remove(self, entry_id: int) -> None:
        self._entries = [e for e in self._entries if e.entry_id != entry_id]


class InMemoryTimeEntries:
    def __init__(self):
        self._rows: dict[int, TimeEntry] = {}
        self._id = 0

    def add(self, *, employee_id: int, work_date: date, start: int, end: int, break_minutes: int = 0) -> TimeEntry:
        self._id += 1
        entry = TimeEntry(
            entry_id=self._id,
            employee_id=employee_id,
            work_date=work_date,
            start_minutes=start,
            end_minutes=end,
            break_minutes=break_minutes,
        )
        self._rows[entry.entry_id] = entry
        return entry

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        return self._rows.get(int(entry_id))

    def list_for_employee_between(self, *, employee_id: int, start_date: date, end_date: date):
        return [
            e for e in self._rows.values() if e.employee_id == employee_id and start_date <= e.work_date <= end_date
        ]

    def create(self, *, candidate: TimeEntryCandidate, draft: TimeEntryDraft) -> int:
        self._id += 1
        self._rows[self._id] = TimeEntry(
            entry_id=self._id,
            employee_id=candidate.employee_id,
            work_date=candidate.work_date,
            start_minutes=candidate.start_minutes,
            end_minutes=candidate.end_minutes,
            break_minutes=candidate.break_minutes,
            site=draft.site,
            customer=draft.customer,
            notes=draft.notes,
        )
        return self._id

    def update(self, *, entry_id: int, candidate: TimeEntryCandidate, draft: TimeEntryDraft) -> bool:
        old = self._rows.get(int(entry_id))
        if not old:
            return False
        self._rows[old.entry_id] = replace(
            old,
            work_date=candidate.work_date,
            start_minutes=candidate.start_minutes,
            end_minutes=candidate.end_minutes,
            break_minutes=candidate.break_minutes,
            site=draft.site,
            customer=draft.customer,
            notes=draft.notes,
        )
        return True

    def delete(self, entry_id: int) -> bool:
        return self._rows.pop(int(entry_id), None) is not None


class InMemoryBreakRules:
    def __init__(self):
        self.rules: list[BreakRule] = []

    def list_active(self):
        return [r for r in self.rules if r.is_active]


class SteppingClock:
    """Deterministic clock: every call moves one minute forward."""

    def __init__(self, start: datetime = datetime(2026, 3, 2, 8, 0, 0)):
        self._now = start

    def __call__(self) -> datetime:
        current = self._now
        self._now = self._now + timedelta(minutes=1)
        return current


@pytest.fixture
def ledger_repo() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()


@pytest.fixture
def ledger(ledger_repo, clock) -> AuditLedger:
    return AuditLedger(ledger_repo, clock=clock)


@pytest.fixture
def time_entries() -> InMemoryTimeEntries:
    return InMemoryTimeEntries()


@pytest.fixture
def break_rules() -> InMemoryBreakRules:
    return InMemoryBreakRules()


@pytest.fixture
def container(ledger_repo, time_entries, break_rules, clock) -> Container:
    return assemble_container(
        ledger_repo=ledger_repo,
        time_entries_repo=time_entries,
        break_rules_repo=break_rules,
        clock=clock,
    )
