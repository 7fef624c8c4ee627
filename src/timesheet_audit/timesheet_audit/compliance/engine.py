from __future__ import annotations

from typing import List, Optional, Sequence

from ..time_entries.aggregation import AggregationEngine, gross_minutes, net_minutes
from ..time_entries.model import TimeEntryCandidate
from .model import BreakRuleSnapshot, ComplianceFinding, ValidationResult
from .rules.base import ComplianceRule, EvaluationContext
from .rules.break_rule import BreakRulesCheck
from .rules.daily_total_rule import DailyTotalRule
from .rules.single_entry_rule import SingleEntryDailyRule
from .rules.weekly_total_rule import WeeklyTotalRule


def default_rules() -> List[ComplianceRule]:
    """Checks in the order their findings are reported."""
    return [
        SingleEntryDailyRule(),
        DailyTotalRule(),
        WeeklyTotalRule(),
        BreakRulesCheck(),
    ]


class ComplianceEngine:
    """Classifies a candidate against statutory limits and break rules.

    Limits being exceeded is reported as findings, never raised.
    """

    def __init__(self, aggregation: AggregationEngine, *, rules: Optional[Sequence[ComplianceRule]] = None):
        self._aggregation = aggregation
        self._rules = list(rules) if rules is not None else default_rules()

    def validate(
        self,
        candidate: TimeEntryCandidate,
        break_rules: BreakRuleSnapshot = BreakRuleSnapshot(),
    ) -> ValidationResult:
        net = net_minutes(candidate)
        exclude = candidate.exclude_entry_id
        day_total = self._aggregation.daily_total(candidate.employee_id, candidate.work_date, exclude) + net
        week_total = self._aggregation.weekly_total(candidate.employee_id, candidate.work_date, exclude) + net

        ctx = EvaluationContext(
            candidate=candidate,
            gross_minutes=gross_minutes(candidate),
            net_minutes=net,
            day_total_minutes=day_total,
            week_total_minutes=week_total,
            break_rules=break_rules,
        )

        findings: List[ComplianceFinding] = []
        for rule in self._rules:
            findings.extend(rule.evaluate(ctx))

        return ValidationResult(
            findings=tuple(findings),
            day_total_minutes=day_total,
            week_total_minutes=week_total,
        )

    def check_breaks(self, candidate: TimeEntryCandidate, break_rules: BreakRuleSnapshot) -> List[ComplianceFinding]:
        """Break rules only; needs no stored entries."""
        net = net_minutes(candidate)
        ctx = EvaluationContext(
            candidate=candidate,
            gross_minutes=gross_minutes(candidate),
            net_minutes=net,
            day_total_minutes=net,
            week_total_minutes=net,
            break_rules=break_rules,
        )
        return BreakRulesCheck().evaluate(ctx)
