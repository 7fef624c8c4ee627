"""Canonical serialization and hashing for ledger entries.

The byte layout produced here is a contract: any implementation given the
same field values and previous hash must produce the same digest.

Hash input::

    id|created_at|actor_id|action|table_name|record_id|old_values|new_values|source_ip|previous_hash

``created_at`` is rendered ``YYYY-MM-DD HH:MM:SS``, absent values as ``\\N``,
the whole string is UTF-8 encoded and digested with SHA-256 (lowercase hex).

Payloads are stored as compact, key-sorted JSON wrapped in a versioned
envelope ``{"data": ..., "v": 1}``.
"""

from __future__ import annotations

import hashlib
import json
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from ..core.constants import (
    HASH_FIELD_SEPARATOR,
    HASH_NULL_TOKEN,
    LEDGER_TIMESTAMP_FORMAT,
    PAYLOAD_SCHEMA_VERSION,
)
from ..core.exceptions import ValidationError


def _json_default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.strftime(LEDGER_TIMESTAMP_FORMAT)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Unsupported payload value: {type(value)!r}")


def encode_payload(data: Optional[Mapping[str, Any]]) -> Optional[str]:
    if data is None:
        return None
    try:
        return json.dumps(
            {"v": PAYLOAD_SCHEMA_VERSION, "data": dict(data)},
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=_json_default,
        )
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Audit payload is not serializable: {e}") from e


def decode_payload(text: Optional[str]) -> Optional[Any]:
    """Return the ``data`` part of a stored payload.

    Text that is not a versioned envelope (e.g. rows written by an older
    tool) is returned as parsed JSON, or verbatim if it is not JSON at all.
    """

    if text is None:
        return None
    try:
        parsed = json.loads(text)
    except ValueError:
        return text
    if isinstance(parsed, dict) and set(parsed) == {"v", "data"}:
        return parsed["data"]
    return parsed


def _render(value: Any) -> str:
    if value is None:
        return HASH_NULL_TOKEN
    if isinstance(value, datetime):
        return value.strftime(LEDGER_TIMESTAMP_FORMAT)
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def canonical_hash_input(
    *,
    entry_id: int,
    created_at: datetime,
    actor_id: int,
    action: str,
    table_name: str,
    record_id: Optional[int],
    old_values: Optional[str],
    new_values: Optional[str],
    source_ip: Optional[str],
    previous_hash: str,
) -> str:
    fields = [
        entry_id,
        created_at,
        actor_id,
        action,
        table_name,
        record_id,
        old_values,
        new_values,
        source_ip,
        previous_hash,
    ]
    return HASH_FIELD_SEPARATOR.join(_render(f) for f in fields)


def compute_entry_hash(**fields: Any) -> str:
    return hashlib.sha256(canonical_hash_input(**fields).encode("utf-8")).hexdigest()


def hash_of(entry) -> str:
    """Recompute the hash of a stored ledger entry from its stored fields."""
    return compute_entry_hash(
        entry_id=entry.entry_id,
        created_at=entry.created_at,
        actor_id=entry.actor_id,
        action=entry.action,
        table_name=entry.table_name,
        record_id=entry.record_id,
        old_values=entry.old_values,
        new_values=entry.new_values,
        source_ip=entry.source_ip,
        previous_hash=entry.previous_hash,
    )
