from __future__ import annotations

from typing import List

from ...core.constants import DAILY_LIMIT_MINUTES, DAILY_WARNING_MINUTES
from ...core.enums import FindingKind, Severity
from ..model import ComplianceFinding
from .base import ComplianceRule, EvaluationContext, hours


class DailyTotalRule(ComplianceRule):
    """All of the employee's entries for the day, the candidate included.

    The violation is reported even if the single-entry check already fired.
    The warning is skipped when the entry alone crossed the warning line,
    since the single-entry check has said so already.
    """

    def evaluate(self, ctx: EvaluationContext) -> List[ComplianceFinding]:
        total = ctx.day_total_minutes
        if total > DAILY_LIMIT_MINUTES:
            return [
                ComplianceFinding(
                    kind=FindingKind.DAILY_TOTAL_VIOLATION,
                    severity=Severity.CRITICAL,
                    value=total,
                    threshold=DAILY_LIMIT_MINUTES,
                    message=(
                        f"Total working time on {ctx.candidate.work_date.isoformat()} of {hours(total)} "
                        f"exceeds the daily maximum of {hours(DAILY_LIMIT_MINUTES)}"
                    ),
                )
            ]
        if total > DAILY_WARNING_MINUTES and ctx.net_minutes <= DAILY_WARNING_MINUTES:
            return [
                ComplianceFinding(
                    kind=FindingKind.DAILY_TOTAL_WARNING,
                    severity=Severity.WARNING,
                    value=total,
                    threshold=DAILY_WARNING_MINUTES,
                    message=(
                        f"Total working time on {ctx.candidate.work_date.isoformat()} of {hours(total)} "
                        f"is above the normal daily working time of {hours(DAILY_WARNING_MINUTES)}"
                    ),
                )
            ]
        return []
