"""Create the database and apply ``database/schema.sql``.

The schema file is plain DDL and seed inserts: ``;`` ends a statement unless it
sits inside a quoted literal, ``--`` starts a comment, and there are no
procedures or triggers (no ``DELIMITER``). Its ``CREATE DATABASE`` /
``USE`` header is skipped so the configured database name always wins.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Mapping, Union

from ..core.constants import GENESIS_HASH
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

REQUIRED_TABLES = ("time_entries", "break_rules", "audit_log", "audit_chain_head")

_SKIPPED_STATEMENT = re.compile(r"^(CREATE\s+DATABASE|USE)\b", re.IGNORECASE)


def _statements(sql: str) -> Iterator[str]:
    # Split on ';' outside quoted literals; '--' comments run to end of line.
    buf: List[str] = []
    quote = ""
    i, n = 0, len(sql)
    while i < n:
        ch = sql[i]
        if quote:
            buf.append(ch)
            if ch == "\\" and i + 1 < n:
                buf.append(sql[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = ""
        elif ch in ("'", '"', "`"):
            quote = ch
            buf.append(ch)
        elif sql.startswith("--", i):
            newline = sql.find("\n", i)
            i = n if newline == -1 else newline
            continue
        elif ch == ";":
            yield "".join(buf).strip()
            buf = []
        else:
            buf.append(ch)
        i += 1
    yield "".join(buf).strip()


def split_schema(sql: str) -> Iterator[str]:
    """Yield the statements of a schema file, header and comments removed."""
    for statement in _statements(sql):
        if statement and not _SKIPPED_STATEMENT.match(statement):
            yield statement


def ensure_database_exists(db_config: Mapping) -> None:
    target = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: Union[str, Path]) -> int:
    """Apply every statement of the schema file; returns how many ran.

    Statements are idempotent (``IF NOT EXISTS`` / ``INSERT IGNORE``), so this
    is safe to run on every start.
    """

    ensure_database_exists(db_config)
    schema_path = Path(schema_path)
    statements = list(split_schema(schema_path.read_text(encoding="utf-8")))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied %d statements from %s", len(statements), schema_path.name)
    return len(statements)


def list_tables(db_config: Mapping) -> List[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(str(row[0]) for row in cur.fetchall())
    finally:
        conn.close()


def missing_tables(db_config: Mapping) -> List[str]:
    present = set(list_tables(db_config))
    return [t for t in REQUIRED_TABLES if t not in present]


def chain_head_ready(db_config: Mapping) -> bool:
    """True once the ledger head row exists (seeded with GENESIS by the schema)."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SELECT last_hash FROM audit_chain_head WHERE head_id=1")
        row = cur.fetchone()
    finally:
        conn.close()
    if row is None:
        return False
    if row[0] == GENESIS_HASH:
        logger.info("Ledger is empty (head at %s)", GENESIS_HASH)
    return True
