"""Entities of the scheduling domain."""

from .assignment import TaskAssignment, sort_by_start
from .job import Job, ProofApproval
from .resource import OutsourcedProvider, ResourceGroup, Station
from .snapshot import ScheduleSnapshot, SnapshotIndex, replace_assignments
from .task import InternalTask, OutsourcedTask, Task

__all__ = [
    "InternalTask",
    "Job",
    "OutsourcedProvider",
    "OutsourcedTask",
    "ProofApproval",
    "ResourceGroup",
    "ScheduleSnapshot",
    "SnapshotIndex",
    "Station",
    "Task",
    "TaskAssignment",
    "replace_assignments",
    "sort_by_start",
]
