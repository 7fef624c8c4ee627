from __future__ import annotations

from typing import List

from ...core.enums import FindingKind, Severity
from ..model import BreakRule, ComplianceFinding
from .base import ComplianceRule, EvaluationContext


def default_break_message(rule: BreakRule) -> str:
    return (
        f"More than {rule.min_work_minutes // 60} hours of work require a break of "
        f"at least {rule.min_break_minutes} minutes."
    )


class BreakRulesCheck(ComplianceRule):
    """Every active break rule is checked; an entry can break several at once."""

    def evaluate(self, ctx: EvaluationContext) -> List[ComplianceFinding]:
        out: List[ComplianceFinding] = []
        taken = ctx.candidate.break_minutes
        for rule in ctx.break_rules:
            if ctx.gross_minutes > rule.min_work_minutes and taken < rule.min_break_minutes:
                out.append(
                    ComplianceFinding(
                        kind=FindingKind.BREAK_RULE_VIOLATION,
                        severity=Severity.CRITICAL,
                        value=taken,
                        threshold=rule.min_break_minutes,
                        message=rule.warning_text or default_break_message(rule),
                        rule_id=rule.rule_id,
                        rule_name=rule.name,
                    )
                )
        return out
