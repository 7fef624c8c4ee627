from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional

from .common.datetime_utils import TimeOfDay, now_local
from .compliance.mysql_break_rule_repository import MySQLBreakRuleRepository
from .compliance.recorder import ValidationEventRecorder
from .compliance.report import ComplianceReportService
from .compliance.repository import BreakRuleRepository
from .compliance.model import ValidationResult
from .compliance.service import ComplianceService
from .database.connection import DBConfig, DatabaseConnection
from .ledger.model import LedgerEntry, VerificationReport
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.repository import LedgerRepository
from .ledger.service import AuditLedger
from .ledger.verifier import IntegrityVerifier
from .time_entries.aggregation import AggregationEngine
from .time_entries.mysql_time_entry_repository import MySQLTimeEntryRepository
from .time_entries.repository import TimeEntryRepository
from .time_entries.service import TimeEntryService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    ledger_repo: LedgerRepository
    time_entries_repo: TimeEntryRepository
    break_rules_repo: BreakRuleRepository

    ledger: AuditLedger
    verifier: IntegrityVerifier
    recorder: ValidationEventRecorder
    aggregation: AggregationEngine
    compliance_service: ComplianceService
    compliance_report_service: ComplianceReportService
    time_entry_service: TimeEntryService
    clock: Callable[[], datetime] = now_local

    # Operations offered to the surrounding system.

    def append_audit_event(
        self,
        actor_id: int,
        action: str,
        table_name: str,
        record_id: Optional[int] = None,
        old_values: Optional[Mapping[str, Any]] = None,
        new_values: Optional[Mapping[str, Any]] = None,
        source_ip: Optional[str] = None,
    ) -> LedgerEntry:
        return self.ledger.append_event(actor_id, action, table_name, record_id, old_values, new_values, source_ip)

    def verify_audit_chain(self) -> VerificationReport:
        return self.verifier.verify()

    def export_audit_range(self, start_date: date, end_date: date, table_name: Optional[str] = None) -> list[LedgerEntry]:
        return self.ledger.export(start_date, end_date, table_name)

    def validate_time_entry(
        self,
        employee_id: int,
        work_date: date,
        start: TimeOfDay,
        end: TimeOfDay,
        break_minutes=0,
        exclude_entry_id: Optional[int] = None,
    ) -> ValidationResult:
        return self.compliance_service.validate_time_entry(
            employee_id, work_date, start, end, break_minutes, exclude_entry_id
        )


def assemble_container(
    *,
    ledger_repo: LedgerRepository,
    time_entries_repo: TimeEntryRepository,
    break_rules_repo: BreakRuleRepository,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    ledger = AuditLedger(ledger_repo, clock=clock)
    verifier = IntegrityVerifier(ledger_repo)
    recorder = ValidationEventRecorder(ledger)
    aggregation = AggregationEngine(time_entries_repo)
    compliance_service = ComplianceService(break_rules_repo, aggregation)
    compliance_report_service = ComplianceReportService(ledger)
    time_entry_service = TimeEntryService(time_entries_repo, compliance_service, ledger, recorder)

    return Container(
        conn=conn,
        ledger_repo=ledger_repo,
        time_entries_repo=time_entries_repo,
        break_rules_repo=break_rules_repo,
        ledger=ledger,
        verifier=verifier,
        recorder=recorder,
        aggregation=aggregation,
        compliance_service=compliance_service,
        compliance_report_service=compliance_report_service,
        time_entry_service=time_entry_service,
        clock=clock,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble_container(
        ledger_repo=MySQLLedgerRepository(conn),
        time_entries_repo=MySQLTimeEntryRepository(conn),
        break_rules_repo=MySQLBreakRuleRepository(conn),
        conn=conn,
    )
