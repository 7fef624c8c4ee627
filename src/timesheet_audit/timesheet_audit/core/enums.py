from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """How serious a compliance finding is."""

    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class FindingKind(str, Enum):
    """Classification codes for compliance findings."""

    DAILY_WARNING = "DAILY_WARNING"
    DAILY_VIOLATION = "DAILY_VIOLATION"
    DAILY_TOTAL_WARNING = "DAILY_TOTAL_WARNING"
    DAILY_TOTAL_VIOLATION = "DAILY_TOTAL_VIOLATION"
    WEEKLY_WARNING = "WEEKLY_WARNING"
    WEEKLY_VIOLATION = "WEEKLY_VIOLATION"
    BREAK_RULE_VIOLATION = "BREAK_RULE_VIOLATION"


class AuditAction(str, Enum):
    """Action codes written to the audit ledger."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    VALIDATION = "VALIDATION"


class IntegrityIssue(str, Enum):
    """Kinds of problems the ledger verifier can report."""

    CHAIN_BROKEN = "CHAIN_BROKEN"
    CONTENT_TAMPERED = "CONTENT_TAMPERED"
