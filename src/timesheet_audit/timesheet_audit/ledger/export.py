from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Iterable

from ..core.constants import LEDGER_TIMESTAMP_FORMAT
from .model import LedgerEntry, VerificationReport

CSV_FIELDS = [
    "id",
    "created_at",
    "actor_id",
    "action",
    "table",
    "record_id",
    "source_ip",
    "entry_hash",
    "previous_hash",
]


def render_audit_csv(
    entries: Iterable[LedgerEntry],
    report: VerificationReport,
    *,
    exported_at: datetime,
) -> bytes:
    """Semicolon-separated export followed by an integrity summary block.

    Returned as UTF-8 with BOM so spreadsheet tools pick the encoding.
    """

    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, delimiter=";", lineterminator="\n")
    writer.writeheader()
    for e in entries:
        writer.writerow(
            {
                "id": e.entry_id,
                "created_at": e.created_at.strftime(LEDGER_TIMESTAMP_FORMAT),
                "actor_id": e.actor_id,
                "action": e.action,
                "table": e.table_name,
                "record_id": "" if e.record_id is None else e.record_id,
                "source_ip": e.source_ip or "",
                "entry_hash": e.entry_hash,
                "previous_hash": e.previous_hash,
            }
        )

    summary = csv.writer(out, delimiter=";", lineterminator="\n")
    summary.writerow([])
    summary.writerow(["=== INTEGRITY CHECK ==="])
    summary.writerow(["Entries checked", report.total])
    summary.writerow(["Valid entries", report.valid_count])
    summary.writerow(["Integrity findings", len(report.invalid)])
    summary.writerow(["Hash chain intact", "NO" if report.chain_broken else "YES"])
    summary.writerow(["Exported at", exported_at.strftime(LEDGER_TIMESTAMP_FORMAT)])

    return out.getvalue().encode("utf-8-sig")
