from __future__ import annotations

import json
from datetime import date

import pytest

from src.timesheet_audit.timesheet_audit.core.exceptions import StorageError, ValidationError

MONDAY = date(2026, 3, 2)


def _data(text):
    return json.loads(text)["data"] if text is not None else None


def test_create_writes_entry_and_create_event(container, time_entries, ledger_repo):
    outcome = container.time_entry_service.create(
        actor_id=5,
        employee_id=1,
        work_date=MONDAY,
        start="08:00",
        end="16:30",
        break_minutes=30,
        site=" Lager Nord ",
        source_ip="10.1.1.1",
    )

    saved = time_entries.get_by_id(outcome.entry_id)
    assert saved.site == "Lager Nord"
    assert saved.customer is None
    assert outcome.validation.findings == ()

    entries = ledger_repo.list_all()
    assert len(entries) == 1
    assert entries[0].action == "CREATE"
    assert entries[0].record_id == outcome.entry_id
    assert entries[0].actor_id == 5
    assert entries[0].source_ip == "10.1.1.1"
    assert entries[0].old_values is None
    assert _data(entries[0].new_values)["start"] == "08:00"
    assert _data(entries[0].new_values)["end"] == "16:30"


def test_create_with_findings_also_records_validation(container, ledger_repo):
    outcome = container.time_entry_service.create(
        actor_id=5, employee_id=1, work_date=MONDAY, start="06:00", end="19:00", break_minutes=15
    )

    assert not outcome.validation.valid
    assert [e.action for e in ledger_repo.list_all()] == ["CREATE", "VALIDATION"]
    assert container.verify_audit_chain().intact


def test_update_excludes_the_entry_being_edited(container, time_entries, ledger_repo):
    service = container.time_entry_service
    created = service.create(actor_id=5, employee_id=1, work_date=MONDAY, start="08:00", end="18:00")

    outcome = service.update(actor_id=6, entry_id=created.entry_id, work_date=MONDAY, start="08:00", end="18:30")

    assert outcome.validation.day_total_minutes == 630
    assert [f.kind.value for f in outcome.validation.findings] == ["DAILY_WARNING"]

    update = [e for e in ledger_repo.list_all() if e.action == "UPDATE"][0]
    assert _data(update.old_values)["end"] == "18:00"
    assert _data(update.new_values)["end"] == "18:30"
    assert time_entries.get_by_id(created.entry_id).end_minutes == 18 * 60 + 30


def test_delete_logs_last_state_first(container, time_entries, ledger_repo):
    service = container.time_entry_service
    created = service.create(actor_id=5, employee_id=1, work_date=MONDAY, start="08:00", end="12:00")

    service.delete(actor_id=5, entry_id=created.entry_id)

    assert time_entries.get_by_id(created.entry_id) is None
    last = ledger_repo.list_all()[-1]
    assert last.action == "DELETE"
    assert last.new_values is None
    assert _data(last.old_values)["entry_id"] == created.entry_id

    history = container.ledger.history("time_entries", created.entry_id)
    assert [e.action for e in history] == ["DELETE", "CREATE"]


def test_unknown_entry_is_rejected(container):
    with pytest.raises(ValidationError):
        container.time_entry_service.delete(actor_id=1, entry_id=99)
    with pytest.raises(ValidationError):
        container.time_entry_service.update(actor_id=1, entry_id=99, work_date=MONDAY, start="08:00", end="09:00")


@pytest.mark.parametrize("start,end,brk", [("08:00", "08:00", 0), ("08:00", "09:00", 60), ("10:00", "09:00", 0)])
def test_unusable_entries_are_not_saved(container, time_entries, ledger_repo, start, end, brk):
    with pytest.raises(ValidationError):
        container.time_entry_service.create(
            actor_id=1, employee_id=1, work_date=MONDAY, start=start, end=end, break_minutes=brk
        )

    assert time_entries.list_for_employee_between(employee_id=1, start_date=MONDAY, end_date=MONDAY) == []
    assert ledger_repo.list_all() == []


def test_ledger_failure_surfaces_as_storage_error(container, ledger_repo):
    ledger_repo.fail_next_append = True

    with pytest.raises(StorageError):
        container.time_entry_service.create(actor_id=1, employee_id=1, work_date=MONDAY, start="08:00", end="12:00")

    assert ledger_repo.list_all() == []


def test_failed_delete_is_not_logged(container, time_entries, ledger_repo):
    service = container.time_entry_service
    created = service.create(actor_id=5, employee_id=1, work_date=MONDAY, start="08:00", end="12:00")
    time_entries.delete = lambda entry_id: False

    with pytest.raises(StorageError):
        service.delete(actor_id=5, entry_id=created.entry_id)

    assert time_entries.get_by_id(created.entry_id) is not None
    assert [e.action for e in ledger_repo.list_all()] == ["CREATE"]
