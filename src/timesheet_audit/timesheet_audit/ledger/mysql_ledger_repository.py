from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Optional, Sequence

from ..core.constants import GENESIS_HASH
from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor, first_row, storage_errors
from .model import ChainHead, LedgerEntry
from .repository import LedgerRepository

_COLUMNS = """
    entry_id, created_at, actor_id, action, table_name, record_id,
    old_values, new_values, source_ip, previous_hash, entry_hash
"""


def _to_entry(r: dict) -> LedgerEntry:
    return LedgerEntry(
        entry_id=int(r["entry_id"]),
        created_at=r["created_at"],
        actor_id=int(r["actor_id"]),
        action=r["action"],
        table_name=r["table_name"],
        record_id=int(r["record_id"]) if r.get("record_id") is not None else None,
        old_values=r.get("old_values"),
        new_values=r.get("new_values"),
        source_ip=r.get("source_ip"),
        previous_hash=r["previous_hash"],
        entry_hash=r["entry_hash"],
    )


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, compose: Callable[[ChainHead], LedgerEntry]) -> LedgerEntry:
        with storage_errors("Ledger append"):
            with db_cursor(self._conn_factory) as (_, cur):
                # Row lock on the head serializes appends across processes.
                cur.execute(
                    """
                    SELECT last_entry_id, last_hash
                    FROM audit_chain_head
                    WHERE head_id=1
                    FOR UPDATE
                    """
                )
                head_row = first_row(cur)
                if not head_row:
                    raise StorageError("Ledger chain head is missing; apply database/schema.sql")
                head = ChainHead(
                    last_entry_id=int(head_row["last_entry_id"]),
                    last_hash=head_row["last_hash"] or GENESIS_HASH,
                )

                entry = compose(head)
                cur.execute(
                    f"""
                    INSERT INTO audit_log({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        entry.entry_id,
                        entry.created_at,
                        entry.actor_id,
                        entry.action,
                        entry.table_name,
                        entry.record_id,
                        entry.old_values,
                        entry.new_values,
                        entry.source_ip,
                        entry.previous_hash,
                        entry.entry_hash,
                    ),
                )
                cur.execute(
                    """
                    UPDATE audit_chain_head
                    SET last_entry_id=%s, last_hash=%s
                    WHERE head_id=1
                    """,
                    (entry.entry_id, entry.entry_hash),
                )
                return entry

    def list_all(self) -> Sequence[LedgerEntry]:
        with storage_errors("Ledger read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT {_COLUMNS} FROM audit_log ORDER BY entry_id ASC")
                return [_to_entry(r) for r in all_rows(cur)]

    def list_range(
        self,
        *,
        start_date: date,
        end_date: date,
        table_name: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        clauses = ["created_at >= %s", "created_at < %s"]
        params: list[object] = [start_date, end_date + timedelta(days=1)]
        if table_name:
            clauses.append("table_name=%s")
            params.append(table_name)

        where = " AND ".join(clauses)
        with storage_errors("Ledger export"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT {_COLUMNS} FROM audit_log WHERE {where} ORDER BY entry_id ASC",
                    tuple(params),
                )
                return [_to_entry(r) for r in all_rows(cur)]

    def list_for_record(self, *, table_name: str, record_id: int) -> Sequence[LedgerEntry]:
        with storage_errors("Ledger read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM audit_log
                    WHERE table_name=%s AND record_id=%s
                    ORDER BY entry_id DESC
                    """,
                    (table_name, int(record_id)),
                )
                return [_to_entry(r) for r in all_rows(cur)]

    def list_recent(
        self,
        *,
        limit: int,
        table_name: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        clauses = ["1=1"]
        params: list[object] = []
        if table_name:
            clauses.append("table_name=%s")
            params.append(table_name)
        if action:
            clauses.append("action=%s")
            params.append(action)
        params.append(int(limit))

        where = " AND ".join(clauses)
        with storage_errors("Ledger read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"SELECT {_COLUMNS} FROM audit_log WHERE {where} ORDER BY entry_id DESC LIMIT %s",
                    tuple(params),
                )
                return [_to_entry(r) for r in all_rows(cur)]

    def list_by_action(self, *, table_name: str, action: str) -> Sequence[LedgerEntry]:
        with storage_errors("Ledger read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    SELECT {_COLUMNS} FROM audit_log
                    WHERE table_name=%s AND action=%s
                    ORDER BY entry_id ASC
                    """,
                    (table_name, action),
                )
                return [_to_entry(r) for r in all_rows(cur)]
