from __future__ import annotations

from datetime import date

from src.timesheet_audit.timesheet_audit.time_entries.aggregation import AggregationEngine, gross_minutes, net_minutes
from src.timesheet_audit.timesheet_audit.time_entries.model import TimeEntryCandidate


def test_gross_and_net_minutes():
    c = TimeEntryCandidate.create(employee_id=1, work_date=date(2026, 3, 4), start="07:15", end="16:45", break_minutes=45)

    assert gross_minutes(c) == 570
    assert net_minutes(c) == 525


def test_net_minutes_is_not_clamped():
    c = TimeEntryCandidate(employee_id=1, work_date=date(2026, 3, 4), start_minutes=600, end_minutes=630, break_minutes=45)

    assert net_minutes(c) == -15


def test_daily_total_sums_one_employee_and_day(time_entries):
    wed = date(2026, 3, 4)
    a = time_entries.add(employee_id=1, work_date=wed, start=480, end=720, break_minutes=0)
    time_entries.add(employee_id=1, work_date=wed, start=750, end=1020, break_minutes=15)
    time_entries.add(employee_id=1, work_date=date(2026, 3, 5), start=480, end=720)
    time_entries.add(employee_id=2, work_date=wed, start=480, end=720)

    engine = AggregationEngine(time_entries)

    assert engine.daily_total(1, wed) == 240 + 255
    assert engine.daily_total(1, wed, exclude_id=a.entry_id) == 255
    assert engine.daily_total(3, wed) == 0


def test_weekly_total_uses_monday_to_sunday(time_entries):
    time_entries.add(employee_id=1, work_date=date(2026, 3, 1), start=0, end=100)  # Sunday, previous week
    time_entries.add(employee_id=1, work_date=date(2026, 3, 2), start=0, end=100)  # Monday
    time_entries.add(employee_id=1, work_date=date(2026, 3, 8), start=0, end=100)  # Sunday
    time_entries.add(employee_id=1, work_date=date(2026, 3, 9), start=0, end=100)  # next Monday

    engine = AggregationEngine(time_entries)

    assert engine.weekly_total(1, date(2026, 3, 5)) == 200
    assert engine.weekly_total(1, date(2026, 3, 8)) == 200
    assert engine.weekly_total(1, date(2026, 3, 1)) == 100


def test_weekly_total_across_year_boundary(time_entries):
    # ISO week 2026-W53 runs from Monday 2026-12-28 to Sunday 2027-01-03.
    time_entries.add(employee_id=1, work_date=date(2026, 12, 30), start=0, end=60)
    time_entries.add(employee_id=1, work_date=date(2027, 1, 2), start=0, end=60)

    engine = AggregationEngine(time_entries)

    assert engine.weekly_total(1, date(2027, 1, 3)) == 120
