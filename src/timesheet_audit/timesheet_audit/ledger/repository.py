from __future__ import annotations

from datetime import date
from typing import Callable, Optional, Protocol, Sequence

from .model import ChainHead, LedgerEntry


class LedgerRepository(Protocol):
    """Append-only storage for ledger entries.

    Entries are never updated or deleted, so there is no operation for it.
    """

    def append(self, compose: Callable[[ChainHead], LedgerEntry]) -> LedgerEntry:
        """Atomically read the chain head, store ``compose(head)`` and advance the head.

        Either the composed entry is durably stored and becomes the new head,
        or nothing changes and ``StorageError`` is raised.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[LedgerEntry]:
        """Every entry in ascending id order, read as one snapshot."""

        raise NotImplementedError

    def list_range(
        self,
        *,
        start_date: date,
        end_date: date,
        table_name: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def list_for_record(self, *, table_name: str, record_id: int) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def list_recent(
        self,
        *,
        limit: int,
        table_name: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Sequence[LedgerEntry]:
        raise NotImplementedError

    def list_by_action(self, *, table_name: str, action: str) -> Sequence[LedgerEntry]:
        """Entries with this table and action, ascending id order."""

        raise NotImplementedError
