from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector

from ..core.exceptions import StorageError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """One connection, one transaction: commit on normal exit, rollback otherwise."""

    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
    except Exception:
        conn.rollback()
        raise
    else:
        conn.commit()
    finally:
        cur.close()
        conn.close()


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Surface driver failures as StorageError; domain errors pass through."""
    try:
        yield
    except mysql.connector.Error as e:
        logger.error("%s failed: %s", operation, e)
        raise StorageError(f"{operation} failed: {e}") from e


def first_row(cur) -> Optional[Row]:
    return cur.fetchone() or None


def all_rows(cur) -> List[Row]:
    return list(cur.fetchall() or ())
