from __future__ import annotations

import logging
import threading
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_int, require_non_empty, require_non_negative_int
from ..core.constants import DEFAULT_AUDIT_LIST_LIMIT
from ..core.exceptions import ValidationError
from .codec import compute_entry_hash, encode_payload
from .model import AuditEvent, ChainHead, LedgerEntry
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


class AuditLedger:
    """The single owner of the hash chain.

    All appends in a process go through one instance; its lock keeps two
    appends from reading the same chain head. The repository adds the
    cross-process guarantee (row lock on the head inside the insert
    transaction).
    """

    def __init__(self, repo: LedgerRepository, *, clock: Callable[[], datetime] = now_local):
        self._repo = repo
        self._clock = clock
        self._lock = threading.Lock()

    def append(self, event: AuditEvent) -> LedgerEntry:
        action = getattr(event.action, "value", event.action)
        action = require_non_empty(action, "Audit action")
        table_name = require_non_empty(event.table_name, "Audit table")
        actor_id = require_non_negative_int(event.actor_id, "Actor id")
        record_id = optional_int(event.record_id, "Record id")
        old_text = encode_payload(event.old_values)
        new_text = encode_payload(event.new_values)

        def compose(head: ChainHead) -> LedgerEntry:
            created_at = self._clock().replace(microsecond=0)
            fields = dict(
                entry_id=head.last_entry_id + 1,
                created_at=created_at,
                actor_id=actor_id,
                action=action,
                table_name=table_name,
                record_id=record_id,
                old_values=old_text,
                new_values=new_text,
                source_ip=event.source_ip or None,
                previous_hash=head.last_hash,
            )
            return LedgerEntry(entry_hash=compute_entry_hash(**fields), **fields)

        with self._lock:
            entry = self._repo.append(compose)

        logger.info(
            "Ledger #%d %s %s/%s by actor %s",
            entry.entry_id, entry.action, entry.table_name, entry.record_id, entry.actor_id,
        )
        return entry

    def append_event(
        self,
        actor_id: int,
        action: str,
        table_name: str,
        record_id: Optional[int] = None,
        old_values: Optional[Mapping[str, Any]] = None,
        new_values: Optional[Mapping[str, Any]] = None,
        source_ip: Optional[str] = None,
    ) -> LedgerEntry:
        return self.append(
            AuditEvent(
                actor_id=actor_id,
                action=action,
                table_name=table_name,
                record_id=record_id,
                old_values=old_values,
                new_values=new_values,
                source_ip=source_ip,
            )
        )

    def export(self, start_date: date, end_date: date, table_name: Optional[str] = None) -> list[LedgerEntry]:
        """Entries created within [start_date, end_date], ascending by id."""
        if end_date < start_date:
            raise ValidationError("End date must not be before start date")
        entries = list(self._repo.list_range(start_date=start_date, end_date=end_date, table_name=table_name or None))
        return sorted(entries, key=lambda e: e.entry_id)

    def history(self, table_name: str, record_id: int) -> Sequence[LedgerEntry]:
        """Audit trail of one record, newest first."""
        return self._repo.list_for_record(table_name=table_name, record_id=int(record_id))

    def recent(
        self,
        *,
        limit: int = DEFAULT_AUDIT_LIST_LIMIT,
        table_name: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        return self._repo.list_recent(limit=max(1, int(limit)), table_name=table_name, action=action)

    def by_action(self, table_name: str, action: str) -> Sequence[LedgerEntry]:
        """Every entry of one action on one table, ascending by id."""
        return self._repo.list_by_action(table_name=table_name, action=action)
