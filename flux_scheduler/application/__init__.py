"""Application layer: the single-writer boundary around a schedule."""

from .schedule_session import (
    PlacementOutcome,
    ScheduleSession,
    bump_snapshot,
    bypassed_task_ids,
)

__all__ = ["PlacementOutcome", "ScheduleSession", "bump_snapshot", "bypassed_task_ids"]
