"""
Conflict Value Objects

Typed, non-persistent diagnostics produced by the placement rules, and the
proposal/result records exchanged with callers.
"""

from datetime import datetime
from typing import Any

from pydantic import Field

from ...shared.base import UtcDatetime, ValueObject
from .enums import ConflictType


class ProposedPlacement(ValueObject):
    """A placement the caller would like to make or move."""

    task_id: str
    target_id: str
    is_outsourced: bool = False
    scheduled_start: UtcDatetime
    # Caller asserts the precedence bypass (Alt-drop)
    bypass_precedence: bool = False


class ScheduleConflict(ValueObject):
    """A rule violation attached to a task."""

    type: ConflictType
    message: str
    task_id: str
    related_task_id: str | None = None
    target_id: str | None = None
    blocking: bool = True
    details: dict[str, Any] = Field(default_factory=dict)

    def as_advisory(self) -> "ScheduleConflict":
        return self.model_copy(update={"blocking": False})


class ValidationResult(ValueObject):
    """All conflicts found for one proposal."""

    conflicts: tuple[ScheduleConflict, ...] = ()
    suggested_start: UtcDatetime | None = None
    proposed_end: UtcDatetime | None = None

    @property
    def valid(self) -> bool:
        return not self.conflicts

    @property
    def blocking_conflicts(self) -> tuple[ScheduleConflict, ...]:
        return tuple(conflict for conflict in self.conflicts if conflict.blocking)

    @property
    def advisory_conflicts(self) -> tuple[ScheduleConflict, ...]:
        return tuple(conflict for conflict in self.conflicts if not conflict.blocking)

    @property
    def is_blocked(self) -> bool:
        return bool(self.blocking_conflicts)

    def of_type(self, conflict_type: ConflictType) -> ScheduleConflict | None:
        for conflict in self.conflicts:
            if conflict.type == conflict_type:
                return conflict
        return None


def isoformat(instant: datetime) -> str:
    """ISO-8601 rendering used in conflict details."""
    return instant.isoformat().replace("+00:00", "Z")
