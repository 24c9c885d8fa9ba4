"""
Task Assignment Entity

The placement of a task on a station or provider at a specific time. This
is the only mutable scheduling fact; engine operations derive updated
copies rather than modifying records in place.
"""

from datetime import datetime, timedelta

from pydantic import Field, model_validator
from typing_extensions import Self

from ...shared.base import DomainRecord, UtcDatetime, utc_now
from ..value_objects.time_window import TimeRange


class TaskAssignment(DomainRecord):
    task_id: str
    # Station or provider id
    target_id: str
    is_outsourced: bool = False
    scheduled_start: UtcDatetime
    scheduled_end: UtcDatetime
    is_completed: bool = False
    completed_at: UtcDatetime | None = None
    created_at: UtcDatetime = Field(default_factory=utc_now)
    updated_at: UtcDatetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _check_times(self) -> Self:
        if self.scheduled_start >= self.scheduled_end:
            raise ValueError(
                f"Assignment {self.id} must end after it starts "
                f"({self.scheduled_start} >= {self.scheduled_end})"
            )
        return self

    @property
    def duration(self) -> timedelta:
        return self.scheduled_end - self.scheduled_start

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.scheduled_start, end=self.scheduled_end)

    def is_on_station(self, station_id: str) -> bool:
        return not self.is_outsourced and self.target_id == station_id

    def rescheduled(
        self, start: datetime, end: datetime, updated_at: datetime
    ) -> "TaskAssignment":
        """Copy with new times; every other field is carried over."""
        return self.model_copy(
            update={
                "scheduled_start": start,
                "scheduled_end": end,
                "updated_at": updated_at,
            }
        )


def sort_by_start(assignments: list[TaskAssignment]) -> list[TaskAssignment]:
    """Chronological order by start; ties keep their input order."""
    return sorted(assignments, key=lambda a: a.scheduled_start)
