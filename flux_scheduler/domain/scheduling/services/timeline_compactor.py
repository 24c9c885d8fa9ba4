"""
Timeline Compactor

Removes idle gaps on every station within a bounded look-ahead horizon.
A placement is never moved earlier than ``now``, than its job
predecessor's end, or than the previous placement's new end on the same
station. Outsourced placements are never compacted.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from typing_extensions import assert_never

from ....core.observability import get_logger, track_operation
from ...shared.base import ensure_utc
from ...shared.exceptions import ValidationError
from ..entities.assignment import TaskAssignment, sort_by_start
from ..entities.snapshot import ScheduleSnapshot, SnapshotIndex, replace_assignments
from ..entities.task import InternalTask, OutsourcedTask
from .end_time_calculator import calculate_end_time

logger = get_logger(__name__)

# Horizon presets offered to operators, in hours
COMPACT_HORIZONS: tuple[int, ...] = (4, 8, 24)


@dataclass(frozen=True)
class CompactionResult:
    """Compacted snapshot (version unchanged) and move statistics."""

    snapshot: ScheduleSnapshot
    moved_count: int
    skipped_count: int
    moved_ids: tuple[str, ...] = ()


def _predecessor_end(
    assignment: TaskAssignment,
    index: SnapshotIndex,
    compacted_ends: dict[str, datetime],
) -> datetime | None:
    task = index.task(assignment.task_id)
    if task is None:
        return None
    predecessor = index.predecessor_of(task)
    if predecessor is None:
        return None
    if predecessor.id in compacted_ends:
        return compacted_ends[predecessor.id]
    predecessor_assignment = index.assignment_for(predecessor.id)
    if predecessor_assignment is None:
        return None
    return predecessor_assignment.scheduled_end


def _compacted_end(
    assignment: TaskAssignment, new_start: datetime, index: SnapshotIndex
) -> datetime:
    task = index.task(assignment.task_id)
    if task is None:
        return new_start + assignment.duration
    if isinstance(task, InternalTask):
        return calculate_end_time(task, new_start, index, target_id=assignment.target_id)
    elif isinstance(task, OutsourcedTask):
        # Provider work placed on a station keeps its stored duration
        return new_start + assignment.duration
    else:
        assert_never(task)


@track_operation("compact")
def compact_timeline(
    snapshot: ScheduleSnapshot, horizon_hours: float, now: datetime
) -> CompactionResult:
    """
    Compact station placements starting within ``[now, now + horizon]``.

    Stations are processed in snapshot order, placements by ascending start.
    Placements that already started are immobile and counted as skipped;
    they still hold back later placements on their station. Placements
    starting beyond the horizon are left alone and do not hold anything back.

    Args:
        snapshot: Schedule to compact
        horizon_hours: Look-ahead window, must be positive
        now: Current instant

    Returns:
        CompactionResult with the new snapshot and move counts

    Raises:
        ValidationError: If ``horizon_hours`` is not positive
        UnresolvableScheduleError: If a station calendar never opens
    """
    if horizon_hours <= 0:
        raise ValidationError(
            "horizon_hours", horizon_hours, "Compaction horizon must be positive"
        )

    now = ensure_utc(now)
    horizon_end = now + timedelta(hours=horizon_hours)
    index = SnapshotIndex(snapshot)

    # Ends after compaction, keyed by task id
    compacted_ends: dict[str, datetime] = {}
    updates: dict[str, TaskAssignment] = {}
    moved_ids: list[str] = []
    skipped_count = 0

    for station in snapshot.stations:
        next_available = now
        for assignment in sort_by_start(index.station_assignments(station.id)):
            if assignment.scheduled_start < now:
                skipped_count += 1
                next_available = max(next_available, assignment.scheduled_end)
                compacted_ends[assignment.task_id] = assignment.scheduled_end
                continue

            if assignment.scheduled_start > horizon_end:
                continue

            new_start = next_available
            predecessor_end = _predecessor_end(assignment, index, compacted_ends)
            if predecessor_end is not None and predecessor_end > new_start:
                new_start = predecessor_end

            new_end = _compacted_end(assignment, new_start, index)
            if new_start != assignment.scheduled_start:
                moved_ids.append(assignment.id)
            if (new_start, new_end) != (
                assignment.scheduled_start,
                assignment.scheduled_end,
            ):
                updates[assignment.id] = assignment.rescheduled(new_start, new_end, now)

            compacted_ends[assignment.task_id] = new_end
            next_available = new_end

    compacted = snapshot.model_copy(
        update={"assignments": tuple(replace_assignments(snapshot.assignments, updates))}
    )

    logger.info(
        "timeline_compacted",
        horizon_hours=horizon_hours,
        moved_count=len(moved_ids),
        skipped_count=skipped_count,
        total_processed=len(compacted_ends) - skipped_count,
    )
    return CompactionResult(
        snapshot=compacted,
        moved_count=len(moved_ids),
        skipped_count=skipped_count,
        moved_ids=tuple(moved_ids),
    )
