from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import all_rows, db_cursor, storage_errors
from .model import BreakRule
from .repository import BreakRuleRepository


class MySQLBreakRuleRepository(BreakRuleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(self) -> Sequence[BreakRule]:
        with storage_errors("Break rule read"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT rule_id, name, min_work_minutes, min_break_minutes, warning_text, is_active
                    FROM break_rules
                    WHERE is_active=1
                    ORDER BY min_work_minutes DESC, rule_id ASC
                    """
                )
                return [
                    BreakRule(
                        rule_id=int(r["rule_id"]),
                        name=r["name"],
                        min_work_minutes=int(r["min_work_minutes"]),
                        min_break_minutes=int(r["min_break_minutes"]),
                        warning_text=r.get("warning_text"),
                        is_active=bool(r["is_active"]),
                    )
                    for r in all_rows(cur)
                ]
