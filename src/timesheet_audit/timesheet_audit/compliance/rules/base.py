from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from ...time_entries.model import TimeEntryCandidate
from ..model import BreakRuleSnapshot, ComplianceFinding


@dataclass(frozen=True)
class EvaluationContext:
    """Everything a rule may look at for one candidate."""

    candidate: TimeEntryCandidate
    gross_minutes: int
    net_minutes: int
    day_total_minutes: int
    week_total_minutes: int
    break_rules: BreakRuleSnapshot


def hours(minutes: int) -> str:
    return f"{minutes / 60:.1f} h"


class ComplianceRule(ABC):
    """Strategy Pattern: one family of working-time checks."""

    @abstractmethod
    def evaluate(self, ctx: EvaluationContext) -> List[ComplianceFinding]:
        raise NotImplementedError
