from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import TimeOfDay
from ..compliance.model import ValidationResult
from ..compliance.recorder import ValidationEventRecorder
from ..compliance.service import ComplianceService
from ..core.constants import TIME_ENTRIES_TABLE
from ..core.enums import AuditAction
from ..core.exceptions import StorageError, ValidationError
from ..ledger.model import AuditEvent
from ..ledger.service import AuditLedger
from .aggregation import gross_minutes
from .model import TimeEntryCandidate, TimeEntryDraft
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveOutcome:
    entry_id: int
    validation: ValidationResult


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class TimeEntryService:
    """Saves time entries and writes the matching ledger entries.

    Compliance findings never block a save here; the caller decides what to
    do with ``SaveOutcome.validation``.
    """

    def __init__(
        self,
        entries: TimeEntryRepository,
        compliance: ComplianceService,
        ledger: AuditLedger,
        recorder: ValidationEventRecorder,
    ):
        self._entries = entries
        self._compliance = compliance
        self._ledger = ledger
        self._recorder = recorder

    @staticmethod
    def _candidate(
        *,
        employee_id: int,
        work_date: date,
        start: TimeOfDay,
        end: TimeOfDay,
        break_minutes,
        exclude_entry_id: Optional[int] = None,
    ) -> TimeEntryCandidate:
        candidate = TimeEntryCandidate.create(
            employee_id=employee_id,
            work_date=work_date,
            start=start,
            end=end,
            break_minutes=break_minutes,
            exclude_entry_id=exclude_entry_id,
        )
        if candidate.end_minutes == candidate.start_minutes:
            raise ValidationError("End time must be after start time")
        if candidate.break_minutes >= gross_minutes(candidate):
            raise ValidationError("Break cannot be as long as the working time")
        return candidate

    def create(
        self,
        *,
        actor_id: int,
        employee_id: int,
        work_date: date,
        start: TimeOfDay,
        end: TimeOfDay,
        break_minutes=0,
        site: str = "",
        customer: str = "",
        notes: str = "",
        source_ip: Optional[str] = None,
    ) -> SaveOutcome:
        candidate = self._candidate(
            employee_id=employee_id, work_date=work_date, start=start, end=end, break_minutes=break_minutes
        )
        draft = TimeEntryDraft(site=_clean(site), customer=_clean(customer), notes=_clean(notes))
        validation = self._compliance.validate(candidate)

        entry_id = self._entries.create(candidate=candidate, draft=draft)
        saved = self._entries.get_by_id(entry_id)
        if not saved:
            raise StorageError(f"Time entry {entry_id} was not stored")

        self._ledger.append(
            AuditEvent(
                actor_id=actor_id,
                action=AuditAction.CREATE.value,
                table_name=TIME_ENTRIES_TABLE,
                record_id=entry_id,
                new_values=saved.to_audit_values(),
                source_ip=source_ip,
            )
        )
        self._recorder.record(
            validation, actor_id=actor_id, record_id=entry_id, candidate=candidate, source_ip=source_ip
        )
        return SaveOutcome(entry_id=entry_id, validation=validation)

    def update(
        self,
        *,
        actor_id: int,
        entry_id: int,
        work_date: date,
        start: TimeOfDay,
        end: TimeOfDay,
        break_minutes=0,
        site: str = "",
        customer: str = "",
        notes: str = "",
        source_ip: Optional[str] = None,
    ) -> SaveOutcome:
        before = self._entries.get_by_id(int(entry_id))
        if not before:
            raise ValidationError("Time entry not found")

        candidate = self._candidate(
            employee_id=before.employee_id,
            work_date=work_date,
            start=start,
            end=end,
            break_minutes=break_minutes,
            exclude_entry_id=before.entry_id,
        )
        draft = TimeEntryDraft(site=_clean(site), customer=_clean(customer), notes=_clean(notes))
        validation = self._compliance.validate(candidate)

        self._entries.update(entry_id=before.entry_id, candidate=candidate, draft=draft)
        after = self._entries.get_by_id(before.entry_id)
        if not after:
            raise StorageError(f"Time entry {before.entry_id} disappeared during update")

        self._ledger.append(
            AuditEvent(
                actor_id=actor_id,
                action=AuditAction.UPDATE.value,
                table_name=TIME_ENTRIES_TABLE,
                record_id=before.entry_id,
                old_values=before.to_audit_values(),
                new_values=after.to_audit_values(),
                source_ip=source_ip,
            )
        )
        self._recorder.record(
            validation, actor_id=actor_id, record_id=before.entry_id, candidate=candidate, source_ip=source_ip
        )
        return SaveOutcome(entry_id=before.entry_id, validation=validation)

    def delete(self, *, actor_id: int, entry_id: int, source_ip: Optional[str] = None) -> None:
        existing = self._entries.get_by_id(int(entry_id))
        if not existing:
            raise ValidationError("Time entry not found")

        if not self._entries.delete(existing.entry_id):
            raise StorageError(f"Time entry {existing.entry_id} could not be deleted")

        # Old values come from the snapshot read before the delete.
        self._ledger.append(
            AuditEvent(
                actor_id=actor_id,
                action=AuditAction.DELETE.value,
                table_name=TIME_ENTRIES_TABLE,
                record_id=existing.entry_id,
                old_values=existing.to_audit_values(),
                source_ip=source_ip,
            )
        )
        logger.info("Deleted time entry %s by actor %s", existing.entry_id, actor_id)
