from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_minutes, minutes_of_day
from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor, first_row, storage_errors
from .model import TimeEntry, TimeEntryCandidate, TimeEntryDraft
from .repository import TimeEntryRepository


def _to_entry(r: dict) -> TimeEntry:
    return TimeEntry(
        entry_id=int(r["entry_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        # mysql-connector returns TIME columns as timedelta ("24:00:00" stays 1440).
        start_minutes=minutes_of_day(r["start_time"]),
        end_minutes=minutes_of_day(r["end_time"]),
        break_minutes=int(r.get("break_minutes") or 0),
        site=r.get("site"),
        customer=r.get("customer"),
        notes=r.get("notes"),
    )


def _time_param(minutes: int) -> str:
    return f"{format_minutes(minutes)}:00"


class MySQLTimeEntryRepository(TimeEntryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with storage_errors("Time entry read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT entry_id, employee_id, work_date, start_time, end_time, break_minutes, site, customer, notes
                    FROM time_entries
                    WHERE entry_id=%s
                    """,
                    (int(entry_id),),
                )
                r = first_row(cur)
                return _to_entry(r) if r else None

    def list_for_employee_between(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
    ) -> Sequence[TimeEntry]:
        with storage_errors("Time entry read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT entry_id, employee_id, work_date, start_time, end_time, break_minutes, site, customer, notes
                    FROM time_entries
                    WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                    ORDER BY work_date ASC, start_time ASC
                    """,
                    (int(employee_id), start_date, end_date),
                )
                return [_to_entry(r) for r in all_rows(cur)]

    def create(self, *, candidate: TimeEntryCandidate, draft: TimeEntryDraft) -> int:
        with storage_errors("Time entry insert"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_entries(employee_id, work_date, start_time, end_time, break_minutes, site, customer, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        candidate.employee_id,
                        candidate.work_date,
                        _time_param(candidate.start_minutes),
                        _time_param(candidate.end_minutes),
                        candidate.break_minutes,
                        draft.site,
                        draft.customer,
                        draft.notes,
                    ),
                )
                return int(cur.lastrowid)

    def update(self, *, entry_id: int, candidate: TimeEntryCandidate, draft: TimeEntryDraft) -> bool:
        with storage_errors("Time entry update"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE time_entries
                    SET work_date=%s, start_time=%s, end_time=%s, break_minutes=%s, site=%s, customer=%s, notes=%s
                    WHERE entry_id=%s
                    """,
                    (
                        candidate.work_date,
                        _time_param(candidate.start_minutes),
                        _time_param(candidate.end_minutes),
                        candidate.break_minutes,
                        draft.site,
                        draft.customer,
                        draft.notes,
                        int(entry_id),
                    ),
                )
                return cur.rowcount > 0

    def delete(self, entry_id: int) -> bool:
        with storage_errors("Time entry delete"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM time_entries WHERE entry_id=%s", (int(entry_id),))
                return cur.rowcount > 0
