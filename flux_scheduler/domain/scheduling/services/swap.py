"""
Swap Operator

Exchanges the order of a placement and its immediate neighbour on the same
station. Only order is exchanged; each placement keeps its own duration.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from typing_extensions import assert_never

from ....core.observability import get_logger, track_operation
from ...shared.base import utc_now
from ..entities.assignment import TaskAssignment, sort_by_start
from ..value_objects.enums import SwapDirection

logger = get_logger(__name__)


@dataclass(frozen=True)
class SwapResult:
    assignments: list[TaskAssignment]
    swapped: bool
    swapped_with_id: str | None = None


def find_adjacent_assignment(
    assignments: Sequence[TaskAssignment],
    assignment_id: str,
    direction: SwapDirection,
) -> TaskAssignment | None:
    """
    Neighbour of a station placement in chronological order.

    ``UP`` is the immediately earlier placement, ``DOWN`` the immediately
    later one. Outsourced placements have no neighbours.
    """
    direction = SwapDirection(direction)
    target = next((a for a in assignments if a.id == assignment_id), None)
    if target is None or target.is_outsourced:
        return None

    ordered = sort_by_start([a for a in assignments if a.is_on_station(target.target_id)])
    position = next(i for i, a in enumerate(ordered) if a.id == assignment_id)

    if direction is SwapDirection.UP:
        return ordered[position - 1] if position > 0 else None
    elif direction is SwapDirection.DOWN:
        return ordered[position + 1] if position < len(ordered) - 1 else None
    else:
        assert_never(direction)


@track_operation("swap")
def apply_swap(
    assignments: Sequence[TaskAssignment],
    assignment_id: str,
    direction: SwapDirection,
    now: datetime | None = None,
) -> SwapResult:
    """
    Swap a placement with its neighbour in ``direction``.

    The earlier of the two original starts anchors the pair: the placement
    moving earlier starts there, the other starts when it ends. Without a
    neighbour nothing changes.

    Args:
        assignments: All placements of the schedule
        assignment_id: Placement initiating the swap
        direction: Neighbour to swap with
        now: Modification timestamp for both placements

    Returns:
        SwapResult with every placement, the swapped pair replaced
    """
    direction = SwapDirection(direction)
    adjacent = find_adjacent_assignment(assignments, assignment_id, direction)
    if adjacent is None:
        return SwapResult(assignments=list(assignments), swapped=False)

    target = next(a for a in assignments if a.id == assignment_id)
    anchor = min(target.scheduled_start, adjacent.scheduled_start)
    modified_at = now or utc_now()

    if direction is SwapDirection.UP:
        first, second = target, adjacent
    else:
        first, second = adjacent, target

    first_end = anchor + first.duration
    updates = {
        first.id: first.rescheduled(anchor, first_end, modified_at),
        second.id: second.rescheduled(first_end, first_end + second.duration, modified_at),
    }

    logger.info(
        "swap_applied",
        assignment_id=assignment_id,
        swapped_with_id=adjacent.id,
        direction=direction.value,
        station_id=target.target_id,
    )
    return SwapResult(
        assignments=[updates.get(a.id, a) for a in assignments],
        swapped=True,
        swapped_with_id=adjacent.id,
    )
