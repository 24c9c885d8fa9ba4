"""
Schedule Session

Owns the current snapshot of one schedule and serializes every mutation
behind a lock with an optimistic version check. Reads work on the immutable
snapshot value and need no lock.
"""

import threading
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any
from uuid import uuid4

from ..core.config import Settings
from ..core.config import settings as default_settings
from ..core.observability import get_logger
from ..domain.scheduling.entities.assignment import TaskAssignment
from ..domain.scheduling.entities.snapshot import ScheduleSnapshot, SnapshotIndex
from ..domain.scheduling.services.constraint_validation_service import (
    ConstraintValidationService,
)
from ..domain.scheduling.services.push_down import apply_push_down
from ..domain.scheduling.services.swap import SwapResult, apply_swap
from ..domain.scheduling.services.timeline_compactor import (
    CompactionResult,
    compact_timeline,
)
from ..domain.scheduling.value_objects.conflicts import (
    ProposedPlacement,
    ScheduleConflict,
    ValidationResult,
)
from ..domain.scheduling.value_objects.enums import (
    ConflictType,
    PlacementVerdict,
    SwapDirection,
)
from ..domain.shared.base import ensure_utc
from ..domain.shared.exceptions import ConcurrencyError, EntityNotFoundError

logger = get_logger(__name__)


def bump_snapshot(
    snapshot: ScheduleSnapshot, now: datetime, **changes: Any
) -> ScheduleSnapshot:
    """Next version of ``snapshot`` generated at ``now``."""
    return snapshot.advanced(ensure_utc(now), **changes)


def bypassed_task_ids(conflicts: Iterable[ScheduleConflict]) -> set[str]:
    """Tasks holding a precedence violation the operator accepted."""
    return {
        conflict.task_id
        for conflict in conflicts
        if conflict.type == ConflictType.PRECEDENCE
        and conflict.details.get("bypassed")
    }


@dataclass(frozen=True)
class PlacementOutcome:
    """Result of a placement request; a blocked request leaves the snapshot as is."""

    accepted: bool
    snapshot: ScheduleSnapshot
    validation: ValidationResult
    assignment: TaskAssignment | None = None
    shifted_ids: tuple[str, ...] = ()

    @property
    def verdict(self) -> PlacementVerdict:
        return ConstraintValidationService.classify(self.validation)


class ScheduleSession:
    """
    Single-writer boundary around a schedule snapshot.

    Every mutation takes the version the caller read; a stale version raises
    ConcurrencyError and the caller must re-fetch and retry.
    """

    def __init__(
        self,
        snapshot: ScheduleSnapshot,
        settings: Settings | None = None,
        validation_service: ConstraintValidationService | None = None,
    ) -> None:
        self._snapshot = snapshot
        self._settings = settings or default_settings
        self._validation = validation_service or ConstraintValidationService()
        self._lock = threading.RLock()

    @property
    def snapshot(self) -> ScheduleSnapshot:
        return self._snapshot

    @property
    def version(self) -> int:
        return self._snapshot.version

    def validate(self, proposed: ProposedPlacement) -> ValidationResult:
        return self._validation.validate(proposed, self._snapshot)

    def conflicts_for_job(self, job_id: str) -> list[ScheduleConflict]:
        """Recorded conflicts of every task of a job."""
        snapshot = self._snapshot
        task_ids = {task.id for task in snapshot.tasks if task.job_id == job_id}
        return [c for c in snapshot.conflicts if c.task_id in task_ids]

    def _check_version(self, expected_version: int) -> None:
        if expected_version != self._snapshot.version:
            raise ConcurrencyError(expected_version, self._snapshot.version)

    def _advance(
        self,
        snapshot: ScheduleSnapshot,
        now: datetime,
        assignments: Iterable[TaskAssignment],
        bypassed: Iterable[str],
    ) -> ScheduleSnapshot:
        """Next version with new placements and their recomputed conflicts."""
        candidate = snapshot.model_copy(update={"assignments": tuple(assignments)})
        conflicts = self._validation.recompute_conflicts(candidate, bypassed)
        return bump_snapshot(
            snapshot, now, assignments=candidate.assignments, conflicts=conflicts
        )

    def place(
        self, proposed: ProposedPlacement, expected_version: int, now: datetime
    ) -> PlacementOutcome:
        """
        Place or move a task.

        Blocked proposals change nothing. Accepted ones create or reschedule
        the task's assignment, push down overlapped station placements, and
        recompute the recorded conflicts of every placed task.

        Args:
            proposed: Placement requested by the operator
            expected_version: Snapshot version the proposal was built on
            now: Current instant

        Returns:
            PlacementOutcome with the resulting snapshot

        Raises:
            ConcurrencyError: If the snapshot moved past ``expected_version``
            EntityNotFoundError: If the task is not part of the schedule
        """
        with self._lock:
            self._check_version(expected_version)
            snapshot = self._snapshot
            index = SnapshotIndex(snapshot)
            task = index.task(proposed.task_id)
            if task is None:
                raise EntityNotFoundError("Task", proposed.task_id)

            result = self._validation.validate(proposed, snapshot, index)
            if result.is_blocked or result.proposed_end is None:
                logger.info(
                    "placement_rejected",
                    task_id=proposed.task_id,
                    target_id=proposed.target_id,
                    conflict_types=[c.type.value for c in result.blocking_conflicts],
                    suggested_start=(
                        result.suggested_start.isoformat()
                        if result.suggested_start
                        else None
                    ),
                )
                return PlacementOutcome(
                    accepted=False, snapshot=snapshot, validation=result
                )

            now = ensure_utc(now)
            times = {
                "task_id": task.id,
                "target_id": proposed.target_id,
                "is_outsourced": proposed.is_outsourced,
                "scheduled_start": proposed.scheduled_start,
                "scheduled_end": result.proposed_end,
                "updated_at": now,
            }
            existing = index.assignment_for(task.id)
            if existing is not None:
                assignment = existing.model_copy(update=times)
                assignments = [
                    assignment if a.id == existing.id else a
                    for a in snapshot.assignments
                ]
            else:
                assignment = TaskAssignment(id=str(uuid4()), created_at=now, **times)
                assignments = [*snapshot.assignments, assignment]

            shifted_ids: tuple[str, ...] = ()
            if not proposed.is_outsourced:
                pushed = apply_push_down(
                    assignments,
                    proposed.target_id,
                    proposed.scheduled_start,
                    result.proposed_end,
                    exclude_task_id=task.id,
                    now=now,
                )
                assignments = pushed.assignments
                shifted_ids = tuple(pushed.shifted_ids)

            bypassed = bypassed_task_ids(snapshot.conflicts) - {task.id}
            if proposed.bypass_precedence:
                bypassed.add(task.id)
            self._snapshot = self._advance(snapshot, now, assignments, bypassed)
            logger.info(
                "placement_applied",
                task_id=task.id,
                target_id=proposed.target_id,
                version=self._snapshot.version,
                shifted_count=len(shifted_ids),
                recorded_conflicts=len(self._snapshot.conflicts),
            )
            return PlacementOutcome(
                accepted=True,
                snapshot=self._snapshot,
                validation=result,
                assignment=assignment,
                shifted_ids=shifted_ids,
            )

    def swap(
        self,
        assignment_id: str,
        direction: SwapDirection,
        expected_version: int,
        now: datetime,
    ) -> SwapResult:
        """Swap a station placement with its neighbour; no neighbour is a no-op."""
        with self._lock:
            self._check_version(expected_version)
            snapshot = self._snapshot
            if not any(a.id == assignment_id for a in snapshot.assignments):
                raise EntityNotFoundError("TaskAssignment", assignment_id)

            now = ensure_utc(now)
            result = apply_swap(snapshot.assignments, assignment_id, direction, now=now)
            if result.swapped:
                self._snapshot = self._advance(
                    snapshot,
                    now,
                    result.assignments,
                    bypassed_task_ids(snapshot.conflicts),
                )
            return result

    def compact(
        self,
        horizon_hours: float | None,
        expected_version: int,
        now: datetime,
    ) -> CompactionResult:
        """
        Compact the schedule; the returned snapshot is the session's new one.

        A ``None`` horizon falls back to ``DEFAULT_COMPACT_HORIZON_HOURS``.
        """
        with self._lock:
            self._check_version(expected_version)
            snapshot = self._snapshot
            horizon = horizon_hours
            if horizon is None:
                horizon = self._settings.DEFAULT_COMPACT_HORIZON_HOURS

            now = ensure_utc(now)
            result = compact_timeline(snapshot, horizon, now)
            if result.snapshot.assignments == snapshot.assignments:
                return replace(result, snapshot=snapshot)

            self._snapshot = self._advance(
                snapshot,
                now,
                result.snapshot.assignments,
                bypassed_task_ids(snapshot.conflicts),
            )
            return replace(result, snapshot=self._snapshot)
