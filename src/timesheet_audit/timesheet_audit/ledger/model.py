from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from ..core.constants import LEDGER_TIMESTAMP_FORMAT
from ..core.enums import IntegrityIssue
from .codec import decode_payload


@dataclass(frozen=True)
class AuditEvent:
    """What a caller wants recorded; the ledger adds id, time and hashes."""

    actor_id: int
    action: str
    table_name: str
    record_id: Optional[int] = None
    old_values: Optional[Mapping[str, Any]] = None
    new_values: Optional[Mapping[str, Any]] = None
    source_ip: Optional[str] = None


@dataclass(frozen=True)
class ChainHead:
    """Id and hash of the newest committed entry (0 / GENESIS when empty)."""

    last_entry_id: int
    last_hash: str


@dataclass(frozen=True)
class LedgerEntry:
    """One committed, immutable, hash-linked audit record.

    ``old_values``/``new_values`` hold the canonical serialized payload text
    exactly as it was hashed.
    """

    entry_id: int
    created_at: datetime
    actor_id: int
    action: str
    table_name: str
    record_id: Optional[int]
    old_values: Optional[str]
    new_values: Optional[str]
    source_ip: Optional[str]
    previous_hash: str
    entry_hash: str

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "created_at": self.created_at.strftime(LEDGER_TIMESTAMP_FORMAT),
            "actor_id": self.actor_id,
            "action": self.action,
            "table": self.table_name,
            "record_id": self.record_id,
            "old_values": decode_payload(self.old_values),
            "new_values": decode_payload(self.new_values),
            "source_ip": self.source_ip,
            "previous_hash": self.previous_hash,
            "entry_hash": self.entry_hash,
        }


@dataclass(frozen=True)
class IntegrityFinding:
    entry_id: int
    reason: IntegrityIssue
    expected: str
    actual: str

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "reason": self.reason.value,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(frozen=True)
class VerificationReport:
    """Outcome of replaying the ledger from GENESIS."""

    total: int
    valid_count: int
    invalid: Tuple[IntegrityFinding, ...] = field(default_factory=tuple)
    chain_broken: bool = False

    @property
    def intact(self) -> bool:
        return not self.invalid

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "valid": self.valid_count,
            "invalid": [f.to_dict() for f in self.invalid],
            "chain_broken": self.chain_broken,
        }
