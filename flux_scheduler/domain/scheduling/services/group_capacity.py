"""Concurrent usage of station groups."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import datetime

from ...shared.base import ensure_utc
from ..entities.assignment import TaskAssignment
from ..entities.resource import ResourceGroup, Station
from ..value_objects.time_window import TimeRange, max_concurrent


def _station_groups(stations: Iterable[Station]) -> dict[str, str]:
    return {
        station.id: station.group_id
        for station in stations
        if station.group_id is not None
    }


def group_usage_at(
    assignments: Sequence[TaskAssignment],
    stations: Iterable[Station],
    instant: datetime,
) -> dict[str, int]:
    """Station placements active at ``instant``, counted per group id."""
    instant = ensure_utc(instant)
    station_groups = _station_groups(stations)
    usage: dict[str, int] = defaultdict(int)
    for assignment in assignments:
        if assignment.is_outsourced:
            continue
        group_id = station_groups.get(assignment.target_id)
        if group_id is not None and assignment.time_range.contains(instant):
            usage[group_id] += 1
    return dict(usage)


def max_group_usage(
    assignments: Sequence[TaskAssignment], stations: Iterable[Station]
) -> dict[str, int]:
    """Peak concurrent station placements per group id."""
    station_groups = _station_groups(stations)
    ranges: dict[str, list[TimeRange]] = defaultdict(list)
    for assignment in assignments:
        if assignment.is_outsourced:
            continue
        group_id = station_groups.get(assignment.target_id)
        if group_id is not None:
            ranges[group_id].append(assignment.time_range)
    return {
        group_id: max_concurrent(group_ranges)
        for group_id, group_ranges in ranges.items()
    }


def find_exceeded_groups(
    groups: Iterable[ResourceGroup],
    assignments: Sequence[TaskAssignment],
    stations: Iterable[Station],
) -> list[str]:
    """Ids of capped groups whose peak usage is above their cap."""
    peaks = max_group_usage(assignments, stations)
    return [
        group.id
        for group in groups
        if group.max_concurrent is not None
        and peaks.get(group.id, 0) > group.max_concurrent
    ]
