from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from ..core.enums import FindingKind, Severity


@dataclass(frozen=True)
class BreakRule:
    """Configurable minimum-break policy.

    Thresholds are assumed to be validated where rules are maintained; the
    engine uses them as given.
    """

    rule_id: int
    name: str
    min_work_minutes: int
    min_break_minutes: int
    warning_text: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class BreakRuleSnapshot:
    """Immutable set of active break rules used for one validation call."""

    rules: Tuple[BreakRule, ...] = ()

    @classmethod
    def of(cls, rules: Iterable[BreakRule]) -> "BreakRuleSnapshot":
        active = [r for r in rules if r.is_active]
        active.sort(key=lambda r: (-r.min_work_minutes, r.rule_id))
        return cls(rules=tuple(active))

    def __iter__(self):
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class ComplianceFinding:
    """One warning or violation. ``value`` and ``threshold`` are minutes."""

    kind: FindingKind
    severity: Severity
    value: int
    threshold: int
    message: str
    rule_id: Optional[int] = None
    rule_name: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "kind": self.kind.value,
            "severity": self.severity.value,
            "value": self.value,
            "threshold": self.threshold,
            "message": self.message,
        }
        if self.rule_id is not None:
            out["rule_id"] = self.rule_id
            out["rule_name"] = self.rule_name
        return out


@dataclass(frozen=True)
class ValidationResult:
    """Findings in emission order plus the totals they were computed from."""

    findings: Tuple[ComplianceFinding, ...] = field(default_factory=tuple)
    day_total_minutes: int = 0
    week_total_minutes: int = 0

    @property
    def warnings(self) -> Tuple[ComplianceFinding, ...]:
        return tuple(f for f in self.findings if f.severity == Severity.WARNING)

    @property
    def violations(self) -> Tuple[ComplianceFinding, ...]:
        return tuple(f for f in self.findings if f.severity == Severity.CRITICAL)

    @property
    def valid(self) -> bool:
        return not self.violations

    @property
    def has_findings(self) -> bool:
        return bool(self.findings)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "warnings": [f.to_dict() for f in self.warnings],
            "violations": [f.to_dict() for f in self.violations],
            "day_total_minutes": self.day_total_minutes,
            "week_total_minutes": self.week_total_minutes,
            "day_hours": round(self.day_total_minutes / 60, 1),
            "week_hours": round(self.week_total_minutes / 60, 1),
        }
