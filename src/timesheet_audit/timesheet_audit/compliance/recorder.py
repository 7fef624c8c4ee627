from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import TIME_ENTRIES_TABLE
from ..core.enums import AuditAction
from ..ledger.model import AuditEvent, LedgerEntry
from ..ledger.service import AuditLedger
from ..time_entries.model import TimeEntryCandidate
from .model import ValidationResult

logger = logging.getLogger(__name__)


def validation_payload(result: ValidationResult, candidate: Optional[TimeEntryCandidate] = None) -> dict:
    payload = {
        "valid": result.valid,
        "warnings": [f.to_dict() for f in result.warnings],
        "violations": [f.to_dict() for f in result.violations],
        "day_total_minutes": result.day_total_minutes,
        "week_total_minutes": result.week_total_minutes,
    }
    if candidate is not None:
        payload["employee_id"] = candidate.employee_id
        payload["work_date"] = candidate.work_date
    return payload


class ValidationEventRecorder:
    """Writes one VALIDATION ledger entry per validation that found something."""

    def __init__(self, ledger: AuditLedger):
        self._ledger = ledger

    def record(
        self,
        result: ValidationResult,
        *,
        actor_id: int,
        record_id: Optional[int],
        candidate: Optional[TimeEntryCandidate] = None,
        source_ip: Optional[str] = None,
    ) -> Optional[LedgerEntry]:
        if not result.has_findings:
            return None

        entry = self._ledger.append(
            AuditEvent(
                actor_id=actor_id,
                action=AuditAction.VALIDATION.value,
                table_name=TIME_ENTRIES_TABLE,
                record_id=record_id,
                old_values=None,
                new_values=validation_payload(result, candidate),
                source_ip=source_ip,
            )
        )
        logger.info(
            "Recorded %d warning(s) and %d violation(s) for time entry %s",
            len(result.warnings), len(result.violations), record_id,
        )
        return entry
