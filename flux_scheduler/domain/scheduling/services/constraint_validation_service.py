"""
Constraint Validation Service

Runs every placement rule against a proposed placement and composes the
outcome: blocked, accepted with conflicts, or clean.
"""

from collections.abc import Iterable

from ....core.observability import get_logger, track_operation
from ..entities.snapshot import ScheduleSnapshot, SnapshotIndex
from ..value_objects.conflicts import (
    ProposedPlacement,
    ScheduleConflict,
    ValidationResult,
)
from ..value_objects.enums import ConflictType, PlacementVerdict
from .conflict_validators import (
    VALIDATORS,
    Validator,
    proposed_end_time,
    suggested_start_for_precedence,
)

logger = get_logger(__name__)


class ConstraintValidationService:
    """
    Service for validating proposed placements.

    Validators are evaluated as a set; whether a conflict blocks is decided
    by the rule that produced it (and, for precedence, the caller's bypass).
    """

    def __init__(self, validators: Iterable[Validator] = VALIDATORS) -> None:
        """
        Initialize the constraint validation service.

        Args:
            validators: Rules to evaluate, in reporting order
        """
        self._validators = tuple(validators)

    @track_operation("validate")
    def validate(
        self,
        proposed: ProposedPlacement,
        snapshot: ScheduleSnapshot,
        index: SnapshotIndex | None = None,
    ) -> ValidationResult:
        """
        Validate a proposed placement against all rules.

        Args:
            proposed: Placement to check
            snapshot: Current schedule
            index: Prebuilt lookup tables for ``snapshot``

        Returns:
            All conflicts found, the auto-snap start when precedence fails,
            and the computed end when the task is known
        """
        index = index if index is not None else SnapshotIndex(snapshot)

        conflicts = []
        for validator in self._validators:
            conflict = validator(proposed, snapshot, index)
            if conflict is not None:
                conflicts.append(conflict)

        suggested_start = None
        if any(conflict.type == ConflictType.PRECEDENCE for conflict in conflicts):
            suggested_start = suggested_start_for_precedence(proposed, snapshot, index)

        task = index.task(proposed.task_id)
        proposed_end = (
            proposed_end_time(proposed, task, index) if task is not None else None
        )

        result = ValidationResult(
            conflicts=tuple(conflicts),
            suggested_start=suggested_start,
            proposed_end=proposed_end,
        )
        if result.conflicts:
            logger.debug(
                "placement_conflicts_found",
                task_id=proposed.task_id,
                target_id=proposed.target_id,
                conflict_types=[conflict.type.value for conflict in result.conflicts],
                blocked=result.is_blocked,
            )
        return result

    def validate_many(
        self, proposals: Iterable[ProposedPlacement], snapshot: ScheduleSnapshot
    ) -> dict[str, ValidationResult]:
        """Validate several proposals against the same snapshot, keyed by task id."""
        index = SnapshotIndex(snapshot)
        return {
            proposed.task_id: self.validate(proposed, snapshot, index)
            for proposed in proposals
        }

    def is_valid(
        self,
        proposed: ProposedPlacement,
        snapshot: ScheduleSnapshot,
        index: SnapshotIndex | None = None,
    ) -> bool:
        """Whether the placement is allowed; stops at the first blocking conflict."""
        index = index if index is not None else SnapshotIndex(snapshot)
        for validator in self._validators:
            conflict = validator(proposed, snapshot, index)
            if conflict is not None and conflict.blocking:
                return False
        return True

    def recompute_conflicts(
        self,
        snapshot: ScheduleSnapshot,
        bypassed_task_ids: Iterable[str] = (),
        index: SnapshotIndex | None = None,
    ) -> tuple[ScheduleConflict, ...]:
        """
        Re-validate every placement of the schedule as it currently stands.

        Conflicts are derived from the placements, so a rule that no longer
        fires drops its record and a violation introduced by a cascade shows
        up. Overlaps are left out since push-down resolves them.

        Args:
            snapshot: Schedule to check
            bypassed_task_ids: Tasks whose precedence violation the operator
                accepted; it is reported non-blocking
            index: Prebuilt lookup tables for ``snapshot``

        Returns:
            Conflicts of all placed tasks, in assignment order
        """
        index = index if index is not None else SnapshotIndex(snapshot)
        bypassed = set(bypassed_task_ids)

        conflicts: list[ScheduleConflict] = []
        for assignment in snapshot.assignments:
            if index.task(assignment.task_id) is None:
                continue
            standing = ProposedPlacement(
                task_id=assignment.task_id,
                target_id=assignment.target_id,
                is_outsourced=assignment.is_outsourced,
                scheduled_start=assignment.scheduled_start,
                bypass_precedence=assignment.task_id in bypassed,
            )
            for validator in self._validators:
                conflict = validator(standing, snapshot, index)
                if (
                    conflict is not None
                    and conflict.type != ConflictType.RESOURCE_OVERLAP
                ):
                    conflicts.append(conflict)
        return tuple(conflicts)

    @staticmethod
    def classify(result: ValidationResult) -> PlacementVerdict:
        if result.is_blocked:
            return PlacementVerdict.BLOCKED
        if result.conflicts:
            return PlacementVerdict.ACCEPTED_WITH_CONFLICT
        return PlacementVerdict.CLEAN
