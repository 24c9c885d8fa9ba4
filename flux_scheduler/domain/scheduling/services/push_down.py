"""
Push-Down Resolver

Inserting or moving a placement on a station cascades any placement it
would overlap, and any placement that cascade in turn reaches, forward in
time. Shifted placements keep their own duration.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ....core.observability import get_logger, track_operation
from ...shared.base import ensure_utc, utc_now
from ..entities.assignment import TaskAssignment, sort_by_start
from ..value_objects.time_window import ranges_overlap

logger = get_logger(__name__)


@dataclass(frozen=True)
class PushDownResult:
    """Updated placements (input order kept) and the ids that moved."""

    assignments: list[TaskAssignment]
    shifted_ids: list[str] = field(default_factory=list)

    @property
    def shifted(self) -> bool:
        return bool(self.shifted_ids)


def _station_placements(
    assignments: Sequence[TaskAssignment], station_id: str, exclude_task_id: str | None
) -> list[TaskAssignment]:
    return [
        assignment
        for assignment in assignments
        if assignment.is_on_station(station_id) and assignment.task_id != exclude_task_id
    ]


@track_operation("push_down")
def apply_push_down(
    assignments: Sequence[TaskAssignment],
    station_id: str,
    new_start: datetime,
    new_end: datetime,
    exclude_task_id: str | None = None,
    now: datetime | None = None,
) -> PushDownResult:
    """
    Cascade placements on ``station_id`` out of ``[new_start, new_end)``.

    Placements are visited by ascending start with a cursor starting at
    ``new_end``. A placement overlapping the new range, or starting at or
    after ``new_start`` but before the cursor, is moved to the cursor and the
    cursor advances to its new end. Other placements starting at or after
    ``new_start`` only advance the cursor to their end.

    Args:
        assignments: All placements of the schedule
        station_id: Station receiving the new placement
        new_start: Start of the new placement
        new_end: End of the new placement
        exclude_task_id: Task being placed, left untouched
        now: Modification timestamp for shifted placements

    Returns:
        PushDownResult with every placement, shifted ones replaced
    """
    new_start = ensure_utc(new_start)
    new_end = ensure_utc(new_end)
    modified_at = now or utc_now()

    earliest_available = new_end
    updates: dict[str, TaskAssignment] = {}
    shifted_ids: list[str] = []

    for placement in sort_by_start(
        _station_placements(assignments, station_id, exclude_task_id)
    ):
        start, end = placement.scheduled_start, placement.scheduled_end
        overlaps_new = ranges_overlap(start, end, new_start, new_end)
        collides_with_cascade = new_start <= start < earliest_available

        if overlaps_new or collides_with_cascade:
            shifted_start = earliest_available
            shifted_end = shifted_start + placement.duration
            updates[placement.id] = placement.rescheduled(
                shifted_start, shifted_end, modified_at
            )
            shifted_ids.append(placement.id)
            earliest_available = shifted_end
        elif start >= new_start:
            earliest_available = max(earliest_available, end)

    if shifted_ids:
        logger.info(
            "push_down_applied",
            station_id=station_id,
            new_start=new_start.isoformat(),
            new_end=new_end.isoformat(),
            shifted_count=len(shifted_ids),
        )

    return PushDownResult(
        assignments=[updates.get(a.id, a) for a in assignments],
        shifted_ids=shifted_ids,
    )


def would_cause_overlap(
    assignments: Sequence[TaskAssignment],
    station_id: str,
    new_start: datetime,
    new_end: datetime,
    exclude_task_id: str | None = None,
) -> bool:
    """Whether placing ``[new_start, new_end)`` on the station needs a push-down."""
    new_start = ensure_utc(new_start)
    new_end = ensure_utc(new_end)
    return any(
        ranges_overlap(a.scheduled_start, a.scheduled_end, new_start, new_end)
        for a in _station_placements(assignments, station_id, exclude_task_id)
    )
