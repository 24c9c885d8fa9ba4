"""
Subcolumn Layout

Lane assignment for placements on an unlimited-capacity resource, so
placements overlapping in time render side by side.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ..entities.assignment import TaskAssignment
from ..value_objects.time_window import max_concurrent, ranges_overlap


@dataclass(frozen=True)
class SubcolumnLayout:
    assignment_id: str
    lane_index: int
    total_lanes: int
    width_percent: float
    left_percent: float


def find_overlapping_assignments(
    assignment: TaskAssignment, assignments: Sequence[TaskAssignment]
) -> list[TaskAssignment]:
    return [
        other
        for other in assignments
        if other.id != assignment.id
        and ranges_overlap(
            assignment.scheduled_start,
            assignment.scheduled_end,
            other.scheduled_start,
            other.scheduled_end,
        )
    ]


def calculate_subcolumn_layout(
    assignments: Sequence[TaskAssignment],
) -> dict[str, SubcolumnLayout]:
    """
    Greedy lane colouring of one resource's placements.

    Placements are taken by (start, end); each gets the lowest lane not used
    by an already-laid-out placement it overlaps. Every placement is
    ``100 / total_lanes`` wide, where ``total_lanes`` is the peak
    concurrency (at least one).
    """
    if not assignments:
        return {}

    ordered = sorted(assignments, key=lambda a: (a.scheduled_start, a.scheduled_end))
    lanes: dict[str, int] = {}
    for assignment in ordered:
        used = {
            lanes[other.id]
            for other in find_overlapping_assignments(assignment, ordered)
            if other.id in lanes
        }
        lane = 0
        while lane in used:
            lane += 1
        lanes[assignment.id] = lane

    total_lanes = max(1, max_concurrent(a.time_range for a in assignments))
    width = 100 / total_lanes
    return {
        assignment_id: SubcolumnLayout(
            assignment_id=assignment_id,
            lane_index=lane,
            total_lanes=total_lanes,
            width_percent=width,
            left_percent=lane * width,
        )
        for assignment_id, lane in lanes.items()
    }


def get_subcolumn_layout(
    assignment_id: str, layouts: Mapping[str, SubcolumnLayout]
) -> SubcolumnLayout:
    """Layout of one placement, full width when it was not laid out."""
    return layouts.get(assignment_id) or SubcolumnLayout(
        assignment_id=assignment_id,
        lane_index=0,
        total_lanes=1,
        width_percent=100.0,
        left_percent=0.0,
    )
