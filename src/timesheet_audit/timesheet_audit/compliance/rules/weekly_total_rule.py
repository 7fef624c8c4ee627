from __future__ import annotations

from typing import List

from ...common.datetime_utils import week_bucket
from ...core.constants import WEEKLY_LIMIT_MINUTES, WEEKLY_WARNING_MINUTES
from ...core.enums import FindingKind, Severity
from ..model import ComplianceFinding
from .base import ComplianceRule, EvaluationContext, hours


class WeeklyTotalRule(ComplianceRule):
    """All entries of the ISO week, the candidate included."""

    def evaluate(self, ctx: EvaluationContext) -> List[ComplianceFinding]:
        total = ctx.week_total_minutes
        year, week = week_bucket(ctx.candidate.work_date)
        label = f"{year}-W{week:02d}"

        if total > WEEKLY_LIMIT_MINUTES:
            return [
                ComplianceFinding(
                    kind=FindingKind.WEEKLY_VIOLATION,
                    severity=Severity.CRITICAL,
                    value=total,
                    threshold=WEEKLY_LIMIT_MINUTES,
                    message=f"Working time in week {label} of {hours(total)} exceeds the weekly maximum of {hours(WEEKLY_LIMIT_MINUTES)}",
                )
            ]
        if total > WEEKLY_WARNING_MINUTES and ctx.net_minutes <= WEEKLY_WARNING_MINUTES:
            return [
                ComplianceFinding(
                    kind=FindingKind.WEEKLY_WARNING,
                    severity=Severity.WARNING,
                    value=total,
                    threshold=WEEKLY_WARNING_MINUTES,
                    message=f"Working time in week {label} of {hours(total)} is above the normal weekly working time of {hours(WEEKLY_WARNING_MINUTES)}",
                )
            ]
        return []
