from __future__ import annotations

import json
from datetime import date, time

from src.timesheet_audit.timesheet_audit.compliance.model import BreakRule
from src.timesheet_audit.timesheet_audit.core.enums import AuditAction, FindingKind
from src.timesheet_audit.timesheet_audit.time_entries.model import TimeEntryCandidate

MONDAY = date(2026, 3, 2)


def test_validate_time_entry_uses_active_break_rules(container, break_rules):
    break_rules.rules.append(BreakRule(rule_id=1, name="6h", min_work_minutes=360, min_break_minutes=30))

    result = container.validate_time_entry(1, MONDAY, time(8, 0), time(15, 0), 0)

    assert [f.kind for f in result.findings] == [FindingKind.BREAK_RULE_VIOLATION]
    assert not result.valid


def test_validation_alone_does_not_write_to_the_ledger(container, ledger_repo):
    container.validate_time_entry(1, MONDAY, "06:00", "20:00", 0)

    assert ledger_repo.list_all() == []


def test_check_breaks_ignores_stored_entries(container, break_rules, time_entries):
    break_rules.rules.append(BreakRule(rule_id=4, name="9h", min_work_minutes=540, min_break_minutes=45))
    time_entries.add(employee_id=0, work_date=date.today(), start=0, end=720)

    assert container.compliance_service.check_breaks(start="08:00", end="17:00", break_minutes=0) == []

    found = container.compliance_service.check_breaks(start="08:00", end="17:01", break_minutes=30)
    assert [f.rule_id for f in found] == [4]


def test_recorder_skips_clean_results(container, ledger_repo):
    result = container.validate_time_entry(1, MONDAY, "08:00", "12:00", 0)

    assert container.recorder.record(result, actor_id=1, record_id=5) is None
    assert ledger_repo.list_all() == []


def test_recorder_writes_one_validation_entry(container, ledger_repo):
    result = container.validate_time_entry(3, MONDAY, "06:00", "19:00", 0)

    candidate = TimeEntryCandidate.create(employee_id=3, work_date=MONDAY, start="06:00", end="19:00")
    entry = container.recorder.record(result, actor_id=9, record_id=42, candidate=candidate)

    assert ledger_repo.list_all() == [entry]
    assert entry.action == AuditAction.VALIDATION.value
    assert entry.table_name == "time_entries"
    assert entry.record_id == 42
    assert entry.old_values is None

    payload = json.loads(entry.new_values)["data"]
    assert payload["valid"] is False
    assert payload["day_total_minutes"] == 780
    assert payload["week_total_minutes"] == 780
    assert payload["employee_id"] == 3
    assert payload["work_date"] == "2026-03-02"
    assert [v["kind"] for v in payload["violations"]] == ["DAILY_VIOLATION", "DAILY_TOTAL_VIOLATION"]
    assert payload["warnings"] == []
