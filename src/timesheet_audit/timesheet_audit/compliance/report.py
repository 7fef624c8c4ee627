from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from ..core.constants import LEDGER_TIMESTAMP_FORMAT, TIME_ENTRIES_TABLE
from ..core.enums import AuditAction, Severity
from ..core.exceptions import ValidationError
from ..ledger.codec import decode_payload
from ..ledger.service import AuditLedger


@dataclass(frozen=True)
class FindingsReport:
    rows: list[dict]
    summary: dict


def _work_date(payload: dict) -> Optional[date]:
    value: Any = payload.get("work_date")
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


class ComplianceReportService:
    """Overview of recorded warnings/violations, read back from the ledger.

    The period applies to the work date of the validated entry, not to when
    the validation was recorded. Validations recorded without a work date
    cannot be placed in a period and are left out.
    """

    def __init__(self, ledger: AuditLedger):
        self._ledger = ledger

    def build_findings_report(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> FindingsReport:
        if end < start:
            raise ValidationError("End date must not be before start date")

        rows: list[dict] = []
        for e in self._ledger.by_action(TIME_ENTRIES_TABLE, AuditAction.VALIDATION.value):
            payload = decode_payload(e.new_values)
            if not isinstance(payload, dict):
                continue
            work_date = _work_date(payload)
            if work_date is None or not (start <= work_date <= end):
                continue
            if employee_id is not None and payload.get("employee_id") != int(employee_id):
                continue

            for finding in list(payload.get("violations") or []) + list(payload.get("warnings") or []):
                rows.append(
                    {
                        "ledger_id": e.entry_id,
                        "recorded_at": e.created_at.strftime(LEDGER_TIMESTAMP_FORMAT),
                        "time_entry_id": e.record_id,
                        "employee_id": payload.get("employee_id"),
                        "work_date": work_date.isoformat(),
                        "kind": finding.get("kind"),
                        "severity": finding.get("severity"),
                        "value": finding.get("value"),
                        "threshold": finding.get("threshold"),
                        "message": finding.get("message"),
                    }
                )

        summary = {
            "total": len(rows),
            "critical": sum(1 for r in rows if r["severity"] == Severity.CRITICAL.value),
            "warning": sum(1 for r in rows if r["severity"] == Severity.WARNING.value),
            "period": {"from": start.isoformat(), "to": end.isoformat()},
        }
        return FindingsReport(rows=rows, summary=summary)
