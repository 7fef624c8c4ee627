from __future__ import annotations

from typing import List

from ...core.constants import DAILY_LIMIT_MINUTES, DAILY_WARNING_MINUTES
from ...core.enums import FindingKind, Severity
from ..model import ComplianceFinding
from .base import ComplianceRule, EvaluationContext, hours


class SingleEntryDailyRule(ComplianceRule):
    """The candidate alone against the daily limits; violation suppresses the warning."""

    def evaluate(self, ctx: EvaluationContext) -> List[ComplianceFinding]:
        net = ctx.net_minutes
        if net > DAILY_LIMIT_MINUTES:
            return [
                ComplianceFinding(
                    kind=FindingKind.DAILY_VIOLATION,
                    severity=Severity.CRITICAL,
                    value=net,
                    threshold=DAILY_LIMIT_MINUTES,
                    message=f"Entry of {hours(net)} exceeds the maximum daily working time of {hours(DAILY_LIMIT_MINUTES)}",
                )
            ]
        if net > DAILY_WARNING_MINUTES:
            return [
                ComplianceFinding(
                    kind=FindingKind.DAILY_WARNING,
                    severity=Severity.WARNING,
                    value=net,
                    threshold=DAILY_WARNING_MINUTES,
                    message=f"Entry of {hours(net)} is above the normal daily working time of {hours(DAILY_WARNING_MINUTES)}",
                )
            ]
        return []
