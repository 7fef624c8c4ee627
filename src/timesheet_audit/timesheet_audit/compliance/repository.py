from __future__ import annotations

from typing import Protocol, Sequence

from .model import BreakRule


class BreakRuleRepository(Protocol):
    def list_active(self) -> Sequence[BreakRule]:
        """Active rules, highest ``min_work_minutes`` first."""

        raise NotImplementedError
