from __future__ import annotations

from datetime import date

import pytest

from src.timesheet_audit.timesheet_audit.core.exceptions import ValidationError

MONDAY = date(2026, 3, 2)


def test_findings_report_flattens_recorded_validations(container):
    service = container.time_entry_service
    service.create(actor_id=1, employee_id=7, work_date=MONDAY, start="06:00", end="19:00")
    service.create(actor_id=1, employee_id=8, work_date=MONDAY, start="08:00", end="19:00", break_minutes=30)
    service.create(actor_id=1, employee_id=8, work_date=date(2026, 3, 3), start="08:00", end="12:00")

    report = container.compliance_report_service.build_findings_report(start=MONDAY, end=MONDAY)

    assert report.summary["total"] == 3
    assert report.summary["critical"] == 2
    assert report.summary["warning"] == 1
    assert report.summary["period"] == {"from": "2026-03-02", "to": "2026-03-02"}
    assert {r["employee_id"] for r in report.rows} == {7, 8}

    only_eight = container.compliance_report_service.build_findings_report(start=MONDAY, end=MONDAY, employee_id=8)
    assert [r["kind"] for r in only_eight.rows] == ["DAILY_WARNING"]
    assert only_eight.rows[0]["work_date"] == "2026-03-02"


def test_period_follows_the_work_date_not_the_recording_time(container):
    # The clock says 2026-03-02; the entry is for a day in February.
    container.time_entry_service.create(
        actor_id=1, employee_id=5, work_date=date(2026, 2, 10), start="06:00", end="19:00"
    )
    reports = container.compliance_report_service

    february = reports.build_findings_report(start=date(2026, 2, 1), end=date(2026, 2, 28))
    march = reports.build_findings_report(start=date(2026, 3, 1), end=date(2026, 3, 31))

    assert february.summary["total"] == 2
    assert {r["work_date"] for r in february.rows} == {"2026-02-10"}
    assert all(r["recorded_at"].startswith("2026-03-02") for r in february.rows)
    assert march.rows == []


def test_validations_without_work_date_are_left_out(container):
    result = container.validate_time_entry(1, MONDAY, "06:00", "19:00", 0)
    container.recorder.record(result, actor_id=1, record_id=3)

    report = container.compliance_report_service.build_findings_report(start=MONDAY, end=MONDAY)

    assert report.rows == []


def test_reversed_period_is_rejected(container):
    with pytest.raises(ValidationError):
        container.compliance_report_service.build_findings_report(start=MONDAY, end=date(2026, 3, 1))
