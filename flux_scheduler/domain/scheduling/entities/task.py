"""
Task Entities

A task belongs to exactly one job and sits at ``sequence_order`` in the
job's predecessor chain. Two variants exist: internal tasks run on a
station, outsourced tasks are fulfilled by a provider.
"""

from typing import Annotated, Literal

from pydantic import Field

from ...shared.base import DomainRecord, UtcDatetime, utc_now
from ..value_objects.durations import InternalDuration, OutsourcedDuration
from ..value_objects.enums import TaskStatus


class _BaseTask(DomainRecord):
    job_id: str
    sequence_order: int = Field(ge=0)
    status: TaskStatus = TaskStatus.DEFINED
    comment: str | None = None
    created_at: UtcDatetime = Field(default_factory=utc_now)
    updated_at: UtcDatetime = Field(default_factory=utc_now)


class InternalTask(_BaseTask):
    """Task performed on a workshop station."""

    type: Literal["internal"] = "internal"
    station_id: str
    duration: InternalDuration

    @property
    def resource_id(self) -> str:
        return self.station_id


class OutsourcedTask(_BaseTask):
    """Task performed by an external provider."""

    type: Literal["outsourced"] = "outsourced"
    provider_id: str
    action_type: str
    duration: OutsourcedDuration

    @property
    def resource_id(self) -> str:
        return self.provider_id


Task = Annotated[InternalTask | OutsourcedTask, Field(discriminator="type")]
