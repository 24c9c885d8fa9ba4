"""
Conflict Validators

Independent placement rules. Each takes a proposed placement and the current
snapshot and returns one ScheduleConflict or ``None``. Business-rule
violations are never raised. References missing from the snapshot mean the
rule does not apply.
"""

import math
from collections.abc import Callable
from datetime import date, datetime, time, timedelta, timezone

from ..entities.snapshot import ScheduleSnapshot, SnapshotIndex
from ..entities.task import InternalTask, OutsourcedTask
from ..value_objects.conflicts import ProposedPlacement, ScheduleConflict, isoformat
from ..value_objects.enums import (
    ApprovalGate,
    ConflictType,
    PlatesStatus,
    ProofStatus,
)
from ..value_objects.time_window import ranges_overlap
from .end_time_calculator import calculate_end_time
from .operating_calendar import check_operating_hours

Validator = Callable[
    [ProposedPlacement, ScheduleSnapshot, SnapshotIndex | None],
    ScheduleConflict | None,
]


def _index(snapshot: ScheduleSnapshot, index: SnapshotIndex | None) -> SnapshotIndex:
    return index if index is not None else SnapshotIndex(snapshot)


def proposed_end_time(
    proposed: ProposedPlacement,
    task: InternalTask | OutsourcedTask,
    index: SnapshotIndex,
) -> datetime:
    return calculate_end_time(
        task, proposed.scheduled_start, index, target_id=proposed.target_id
    )


def validate_resource_overlap(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> ScheduleConflict | None:
    """Proposed range intersects another placement on the same station."""
    if proposed.is_outsourced:
        return None

    index = _index(snapshot, index)
    task = index.task(proposed.task_id)
    if task is None:
        return None

    proposed_end = proposed_end_time(proposed, task, index)
    others = sorted(
        (
            assignment
            for assignment in index.station_assignments(proposed.target_id)
            if assignment.task_id != proposed.task_id
        ),
        key=lambda assignment: assignment.scheduled_start,
    )
    for other in others:
        if ranges_overlap(
            proposed.scheduled_start,
            proposed_end,
            other.scheduled_start,
            other.scheduled_end,
        ):
            # Resolved by push-down, never blocks on its own
            return ScheduleConflict(
                type=ConflictType.RESOURCE_OVERLAP,
                message="Station already has a task scheduled during this time",
                task_id=proposed.task_id,
                related_task_id=other.task_id,
                target_id=proposed.target_id,
                blocking=False,
                details={
                    "conflicting_assignment_id": other.id,
                    "existing_start": isoformat(other.scheduled_start),
                    "existing_end": isoformat(other.scheduled_end),
                    "proposed_start": isoformat(proposed.scheduled_start),
                    "proposed_end": isoformat(proposed_end),
                },
            )
    return None


def validate_availability(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> ScheduleConflict | None:
    """Station is not available, or the start falls outside its open hours."""
    if proposed.is_outsourced:
        return None

    index = _index(snapshot, index)
    station = index.station(proposed.target_id)
    if station is None:
        return None

    if not station.status.is_available_for_work:
        return ScheduleConflict(
            type=ConflictType.AVAILABILITY,
            message=f"Station is {station.status.value}, not available for scheduling",
            task_id=proposed.task_id,
            target_id=proposed.target_id,
            details={"station_status": station.status.value},
        )

    reason = check_operating_hours(station, proposed.scheduled_start)
    if reason is not None:
        return ScheduleConflict(
            type=ConflictType.AVAILABILITY,
            message="Task start time is outside operating hours",
            task_id=proposed.task_id,
            target_id=proposed.target_id,
            details={"reason": reason, "time": isoformat(proposed.scheduled_start)},
        )
    return None


def validate_precedence(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> ScheduleConflict | None:
    """
    Task would start before its job predecessor ends.

    An unplaced predecessor is a violation too. With ``bypass_precedence``
    the violation is still reported, tagged non-blocking.
    """
    index = _index(snapshot, index)
    task = index.task(proposed.task_id)
    if task is None:
        return None

    predecessor = index.predecessor_of(task)
    if predecessor is None:
        return None

    blocking = not proposed.bypass_precedence
    predecessor_assignment = index.assignment_for(predecessor.id)
    if predecessor_assignment is None:
        return ScheduleConflict(
            type=ConflictType.PRECEDENCE,
            message="Predecessor task must be scheduled first",
            task_id=proposed.task_id,
            related_task_id=predecessor.id,
            target_id=proposed.target_id,
            blocking=blocking,
            details={
                "predecessor_task_id": predecessor.id,
                "reason": "unscheduled",
                "bypassed": proposed.bypass_precedence,
            },
        )

    predecessor_end = predecessor_assignment.scheduled_end
    if proposed.scheduled_start < predecessor_end:
        return ScheduleConflict(
            type=ConflictType.PRECEDENCE,
            message=(
                "Task cannot start before predecessor completes at "
                f"{isoformat(predecessor_end)}"
            ),
            task_id=proposed.task_id,
            related_task_id=predecessor.id,
            target_id=proposed.target_id,
            blocking=blocking,
            details={
                "predecessor_task_id": predecessor.id,
                "predecessor_end": isoformat(predecessor_end),
                "proposed_start": isoformat(proposed.scheduled_start),
                "suggested_start": isoformat(predecessor_end),
                "bypassed": proposed.bypass_precedence,
            },
        )
    return None


def has_precedence_violation(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> bool:
    """Whether the precedence rule fires, ignoring any bypass."""
    unbypassed = proposed.model_copy(update={"bypass_precedence": False})
    return validate_precedence(unbypassed, snapshot, index) is not None


def suggested_start_for_precedence(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> datetime | None:
    """End of the placed predecessor, the earliest start precedence allows."""
    index = _index(snapshot, index)
    task = index.task(proposed.task_id)
    if task is None:
        return None
    predecessor = index.predecessor_of(task)
    if predecessor is None:
        return None
    predecessor_assignment = index.assignment_for(predecessor.id)
    if predecessor_assignment is None:
        return None
    return predecessor_assignment.scheduled_end


def validate_approval_gates(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> ScheduleConflict | None:
    """
    Job approval gates.

    An unapproved proof (BAT) blocks the placement. Plates that are not done
    only produce an advisory conflict. Paper status is never evaluated.
    """
    index = _index(snapshot, index)
    task = index.task(proposed.task_id)
    if task is None:
        return None
    job = index.job(task.job_id)
    if job is None:
        return None

    proof = job.proof_approval
    if not proof.is_satisfied:
        if proof.status == ProofStatus.AWAITING_FILE:
            message = "Job is awaiting client file for proof"
        elif proof.status == ProofStatus.SENT:
            message = "Proof (BAT) sent but not yet approved"
        else:
            message = "Proof (BAT) has not been sent to client"
        details: dict[str, str | None] = {
            "gate": ApprovalGate.BAT.value,
            "status": proof.status.value,
            "job_id": job.id,
        }
        if proof.sent_at is not None:
            details["sent_at"] = isoformat(proof.sent_at)
        return ScheduleConflict(
            type=ConflictType.APPROVAL_GATE,
            message=message,
            task_id=proposed.task_id,
            target_id=proposed.target_id,
            details=details,
        )

    if job.plates_status != PlatesStatus.DONE:
        return ScheduleConflict(
            type=ConflictType.APPROVAL_GATE,
            message="Plates preparation is not complete",
            task_id=proposed.task_id,
            target_id=proposed.target_id,
            blocking=False,
            details={
                "gate": ApprovalGate.PLATES.value,
                "status": job.plates_status.value,
                "job_id": job.id,
            },
        )
    return None


def validate_group_capacity(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> ScheduleConflict | None:
    """Station group is already at its concurrency cap at the proposed start."""
    if proposed.is_outsourced:
        return None

    index = _index(snapshot, index)
    group = index.group_for_station(proposed.target_id)
    if group is None or group.max_concurrent is None:
        return None

    active = sum(
        1
        for assignment in index.group_assignments(group.id)
        if assignment.task_id != proposed.task_id
        and assignment.time_range.contains(proposed.scheduled_start)
    )
    if active >= group.max_concurrent:
        return ScheduleConflict(
            type=ConflictType.GROUP_CAPACITY,
            message=(
                f'Group "{group.name}" capacity ({group.max_concurrent}) '
                "would be exceeded"
            ),
            task_id=proposed.task_id,
            target_id=proposed.target_id,
            details={
                "group_id": group.id,
                "group_name": group.name,
                "max_allowed": group.max_concurrent,
                "would_be": active + 1,
            },
        )
    return None


def end_of_exit_day(exit_date: date) -> datetime:
    """Last instant of the workshop exit date."""
    return datetime.combine(exit_date, time.max, tzinfo=timezone.utc)


def validate_deadline(
    proposed: ProposedPlacement,
    snapshot: ScheduleSnapshot,
    index: SnapshotIndex | None = None,
) -> ScheduleConflict | None:
    """Task would complete after the end of the job's workshop exit date."""
    index = _index(snapshot, index)
    task = index.task(proposed.task_id)
    if task is None:
        return None
    job = index.job(task.job_id)
    if job is None:
        return None

    proposed_end = proposed_end_time(proposed, task, index)
    deadline = end_of_exit_day(job.workshop_exit_date)
    if proposed_end <= deadline:
        return None

    delay_days = math.ceil((proposed_end - deadline) / timedelta(days=1))
    return ScheduleConflict(
        type=ConflictType.DEADLINE,
        message=(
            f"Task completion would exceed workshop exit date by {delay_days} day(s)"
        ),
        task_id=proposed.task_id,
        target_id=proposed.target_id,
        blocking=False,
        details={
            "job_id": job.id,
            "workshop_exit_date": job.workshop_exit_date.isoformat(),
            "expected_completion": isoformat(proposed_end),
            "delay_days": delay_days,
        },
    )


# Evaluation order of the composite validation
VALIDATORS: tuple[Validator, ...] = (
    validate_resource_overlap,
    validate_group_capacity,
    validate_precedence,
    validate_approval_gates,
    validate_availability,
    validate_deadline,
)
