from __future__ import annotations

import hashlib
import threading
from datetime import date, datetime

import pytest

from src.timesheet_audit.timesheet_audit.core.constants import GENESIS_HASH
from src.timesheet_audit.timesheet_audit.core.exceptions import StorageError, ValidationError
from src.timesheet_audit.timesheet_audit.ledger.codec import (
    canonical_hash_input,
    compute_entry_hash,
    decode_payload,
    encode_payload,
    hash_of,
)
from src.timesheet_audit.timesheet_audit.ledger.model import AuditEvent


def test_first_entry_links_to_genesis(ledger):
    entry = ledger.append_event(1, "CREATE", "time_entries", 10, None, {"start": "08:00"})

    assert entry.entry_id == 1
    assert entry.previous_hash == GENESIS_HASH
    assert len(entry.entry_hash) == 64
    assert entry.entry_hash == entry.entry_hash.lower()
    assert entry.created_at == datetime(2026, 3, 2, 8, 0, 0)


def test_each_entry_links_to_previous_hash(ledger, ledger_repo):
    for i in range(4):
        ledger.append_event(1, "UPDATE", "time_entries", i, {"n": i}, {"n": i + 1})

    entries = ledger_repo.list_all()
    assert [e.entry_id for e in entries] == [1, 2, 3, 4]
    for prev, cur in zip(entries, entries[1:]):
        assert cur.previous_hash == prev.entry_hash
    assert all(hash_of(e) == e.entry_hash for e in entries)


def test_hash_input_layout_is_fixed():
    text = canonical_hash_input(
        entry_id=7,
        created_at=datetime(2026, 1, 5, 9, 30, 0),
        actor_id=3,
        action="DELETE",
        table_name="time_entries",
        record_id=None,
        old_values='{"data":{"a":1},"v":1}',
        new_values=None,
        source_ip="10.0.0.1",
        previous_hash=GENESIS_HASH,
    )
    assert text == '7|2026-01-05 09:30:00|3|DELETE|time_entries|\\N|{"data":{"a":1},"v":1}|\\N|10.0.0.1|GENESIS'

    digest = compute_entry_hash(
        entry_id=7,
        created_at=datetime(2026, 1, 5, 9, 30, 0),
        actor_id=3,
        action="DELETE",
        table_name="time_entries",
        record_id=None,
        old_values='{"data":{"a":1},"v":1}',
        new_values=None,
        source_ip="10.0.0.1",
        previous_hash=GENESIS_HASH,
    )
    assert digest == hashlib.sha256(text.encode("utf-8")).hexdigest()


def test_payload_encoding_is_canonical():
    a = encode_payload({"b": 2, "a": date(2026, 1, 5), "name": "Müller"})
    b = encode_payload({"name": "Müller", "a": date(2026, 1, 5), "b": 2})

    assert a == b
    assert a == '{"data":{"a":"2026-01-05","b":2,"name":"Müller"},"v":1}'
    assert decode_payload(a) == {"a": "2026-01-05", "b": 2, "name": "Müller"}
    assert encode_payload(None) is None


def test_unserializable_payload_is_an_input_error(ledger, ledger_repo):
    with pytest.raises(ValidationError):
        ledger.append_event(1, "CREATE", "time_entries", 1, None, {"bad": object()})
    assert ledger_repo.list_all() == []


def test_failed_append_leaves_ledger_unchanged(ledger, ledger_repo):
    first = ledger.append_event(1, "CREATE", "time_entries", 1)
    ledger_repo.fail_next_append = True

    with pytest.raises(StorageError):
        ledger.append_event(1, "UPDATE", "time_entries", 1)

    assert ledger_repo.list_all() == [first]
    nxt = ledger.append_event(1, "UPDATE", "time_entries", 1)
    assert nxt.entry_id == 2
    assert nxt.previous_hash == first.entry_hash


def test_missing_action_is_rejected(ledger):
    with pytest.raises(ValidationError):
        ledger.append(AuditEvent(actor_id=1, action="", table_name="time_entries"))


def test_concurrent_appends_do_not_fork_the_chain(ledger, ledger_repo):
    def worker(n: int):
        for i in range(25):
            ledger.append_event(n, "CREATE", "time_entries", i)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    entries = ledger_repo.list_all()
    assert len(entries) == 200
    assert [e.entry_id for e in entries] == list(range(1, 201))
    assert len({e.previous_hash for e in entries}) == 200


def test_export_filters_by_date_and_table(ledger_repo):
    from src.timesheet_audit.timesheet_audit.ledger.service import AuditLedger

    ledger = AuditLedger(ledger_repo, clock=lambda: datetime(2026, 3, 1, 12, 0, 0))
    ledger.append_event(1, "CREATE", "time_entries", 1)
    ledger.append_event(1, "CREATE", "customers", 2)

    later = AuditLedger(ledger_repo, clock=lambda: datetime(2026, 3, 5, 12, 0, 0))
    later.append_event(1, "UPDATE", "time_entries", 1)

    march_first = ledger.export(date(2026, 3, 1), date(2026, 3, 1))
    assert [e.entry_id for e in march_first] == [1, 2]

    only_entries = ledger.export(date(2026, 3, 1), date(2026, 3, 31), "time_entries")
    assert [e.entry_id for e in only_entries] == [1, 3]

    with pytest.raises(ValidationError):
        ledger.export(date(2026, 3, 5), date(2026, 3, 1))


def test_history_is_newest_first(ledger):
    ledger.append_event(1, "CREATE", "time_entries", 5)
    ledger.append_event(1, "CREATE", "time_entries", 6)
    ledger.append_event(2, "UPDATE", "time_entries", 5)

    history = ledger.history("time_entries", 5)
    assert [(e.entry_id, e.action) for e in history] == [(3, "UPDATE"), (1, "CREATE")]


@pytest.mark.parametrize("actor_id,record_id", [("abc", 1), (1, "x7"), (-3, 1), (1, -1), (None, 1)])
def test_bad_ids_are_input_errors(container, ledger_repo, actor_id, record_id):
    with pytest.raises(ValidationError):
        container.append_audit_event(actor_id, "CREATE", "time_entries", record_id)

    assert ledger_repo.list_all() == []


def test_numeric_id_strings_are_accepted(ledger):
    entry = ledger.append_event("7", "CREATE", "time_entries", "12")

    assert entry.actor_id == 7
    assert entry.record_id == 12
