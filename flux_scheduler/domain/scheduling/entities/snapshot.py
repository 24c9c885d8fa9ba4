"""
Schedule Snapshot

Aggregate root of the engine: every resource, group, job, task and
placement of one schedule, stamped with a monotonically increasing version.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ...shared.base import UtcDatetime, utc_now
from ..value_objects.conflicts import ScheduleConflict
from .assignment import TaskAssignment
from .job import Job
from .resource import OutsourcedProvider, ResourceGroup, Station
from .task import InternalTask, OutsourcedTask, Task


class ScheduleSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    version: int = Field(default=0, ge=0)
    generated_at: UtcDatetime = Field(default_factory=utc_now)
    stations: tuple[Station, ...] = ()
    groups: tuple[ResourceGroup, ...] = ()
    providers: tuple[OutsourcedProvider, ...] = ()
    jobs: tuple[Job, ...] = ()
    tasks: tuple[Task, ...] = ()
    assignments: tuple[TaskAssignment, ...] = ()
    # Recorded advisory and bypassed conflicts
    conflicts: tuple[ScheduleConflict, ...] = ()

    def advanced(self, now: datetime, **changes: Any) -> "ScheduleSnapshot":
        """Next version of this snapshot with the given fields replaced."""
        for key in ("assignments", "conflicts"):
            if key in changes:
                changes[key] = tuple(changes[key])
        return self.model_copy(
            update={"version": self.version + 1, "generated_at": now, **changes}
        )

    def index(self) -> "SnapshotIndex":
        return SnapshotIndex(self)


class SnapshotIndex:
    """
    Lookup tables over a snapshot, built once per operation.

    Missing references resolve to ``None`` so callers can degrade to
    "no applicable conflict" instead of failing.
    """

    def __init__(self, snapshot: ScheduleSnapshot) -> None:
        self.snapshot = snapshot
        self.tasks: dict[str, InternalTask | OutsourcedTask] = {
            task.id: task for task in snapshot.tasks
        }
        self.jobs: dict[str, Job] = {job.id: job for job in snapshot.jobs}
        self.stations: dict[str, Station] = {
            station.id: station for station in snapshot.stations
        }
        self.providers: dict[str, OutsourcedProvider] = {
            provider.id: provider for provider in snapshot.providers
        }
        self.groups: dict[str, ResourceGroup] = {
            group.id: group for group in snapshot.groups
        }

        # station -> group back-reference
        self.station_group: dict[str, str] = {
            station.id: station.group_id
            for station in snapshot.stations
            if station.group_id is not None
        }
        self.group_station_ids: dict[str, set[str]] = defaultdict(set)
        for station_id, group_id in self.station_group.items():
            self.group_station_ids[group_id].add(station_id)

        self.task_by_sequence: dict[tuple[str, int], InternalTask | OutsourcedTask] = {
            (task.job_id, task.sequence_order): task for task in snapshot.tasks
        }

        self.assignment_by_task: dict[str, TaskAssignment] = {}
        self.assignment_by_id: dict[str, TaskAssignment] = {}
        self._station_assignments: dict[str, list[TaskAssignment]] = defaultdict(list)
        for assignment in snapshot.assignments:
            self.assignment_by_task[assignment.task_id] = assignment
            self.assignment_by_id[assignment.id] = assignment
            if not assignment.is_outsourced:
                self._station_assignments[assignment.target_id].append(assignment)

    def task(self, task_id: str) -> InternalTask | OutsourcedTask | None:
        return self.tasks.get(task_id)

    def job(self, job_id: str) -> Job | None:
        return self.jobs.get(job_id)

    def station(self, station_id: str) -> Station | None:
        return self.stations.get(station_id)

    def provider(self, provider_id: str) -> OutsourcedProvider | None:
        return self.providers.get(provider_id)

    def group_for_station(self, station_id: str) -> ResourceGroup | None:
        group_id = self.station_group.get(station_id)
        if group_id is None:
            return None
        return self.groups.get(group_id)

    def assignment_for(self, task_id: str) -> TaskAssignment | None:
        return self.assignment_by_task.get(task_id)

    def predecessor_of(
        self, task: InternalTask | OutsourcedTask
    ) -> InternalTask | OutsourcedTask | None:
        """Immediate predecessor in the job chain (``sequence_order - 1``)."""
        return self.task_by_sequence.get((task.job_id, task.sequence_order - 1))

    def successor_of(
        self, task: InternalTask | OutsourcedTask
    ) -> InternalTask | OutsourcedTask | None:
        return self.task_by_sequence.get((task.job_id, task.sequence_order + 1))

    def station_assignments(self, station_id: str) -> list[TaskAssignment]:
        """Non-outsourced placements on a station."""
        return list(self._station_assignments.get(station_id, ()))

    def group_assignments(self, group_id: str) -> list[TaskAssignment]:
        """Non-outsourced placements on every station of a group."""
        placements: list[TaskAssignment] = []
        for station_id in self.group_station_ids.get(group_id, ()):
            placements.extend(self._station_assignments.get(station_id, ()))
        return placements


def replace_assignments(
    assignments: Iterable[TaskAssignment], updates: dict[str, TaskAssignment]
) -> list[TaskAssignment]:
    """Substitute updated assignments by id, keeping the original order."""
    return [updates.get(assignment.id, assignment) for assignment in assignments]
