from __future__ import annotations

from datetime import date
from typing import List, Optional

from ..common.datetime_utils import TimeOfDay
from ..time_entries.aggregation import AggregationEngine
from ..time_entries.model import TimeEntryCandidate
from .engine import ComplianceEngine
from .model import BreakRuleSnapshot, ComplianceFinding, ValidationResult
from .repository import BreakRuleRepository


class ComplianceService:
    """Entry point for validating raw time-entry input.

    Active break rules are loaded once per call into an immutable snapshot
    before the engine runs.
    """

    def __init__(
        self,
        break_rules: BreakRuleRepository,
        aggregation: AggregationEngine,
        *,
        engine: Optional[ComplianceEngine] = None,
    ):
        self._break_rules = break_rules
        self._engine = engine or ComplianceEngine(aggregation)

    def load_break_rules(self) -> BreakRuleSnapshot:
        return BreakRuleSnapshot.of(self._break_rules.list_active())

    def validate(self, candidate: TimeEntryCandidate) -> ValidationResult:
        return self._engine.validate(candidate, self.load_break_rules())

    def validate_time_entry(
        self,
        employee_id: int,
        work_date: date,
        start: TimeOfDay,
        end: TimeOfDay,
        break_minutes=0,
        exclude_entry_id: Optional[int] = None,
    ) -> ValidationResult:
        candidate = TimeEntryCandidate.create(
            employee_id=employee_id,
            work_date=work_date,
            start=start,
            end=end,
            break_minutes=break_minutes,
            exclude_entry_id=exclude_entry_id,
        )
        return self.validate(candidate)

    def check_breaks(self, *, start: TimeOfDay, end: TimeOfDay, break_minutes=0) -> List[ComplianceFinding]:
        candidate = TimeEntryCandidate.create(
            employee_id=0,
            work_date=date.today(),
            start=start,
            end=end,
            break_minutes=break_minutes,
        )
        return self._engine.check_breaks(candidate, self.load_break_rules())
