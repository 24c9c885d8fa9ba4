"""
Resource Entities

Stations are serial resources (capacity one) with an operating calendar.
Outsourced providers have unlimited concurrent capacity. Both may belong to
a resource group carrying a shared concurrency cap.
"""

from datetime import date

from pydantic import Field, field_validator

from ...shared.base import DomainRecord
from ..value_objects.enums import StationStatus
from ..value_objects.operating_schedule import (
    ScheduleException,
    WeeklySchedule,
    clock_to_time,
)


class ResourceGroup(DomainRecord):
    """Logical grouping of resources; ``max_concurrent=None`` means uncapped."""

    name: str
    max_concurrent: int | None = Field(default=None, ge=1)


class Station(DomainRecord):
    """A physical machine or workstation."""

    name: str
    status: StationStatus = StationStatus.AVAILABLE
    group_id: str | None = None
    category_id: str | None = None
    operating_schedule: WeeklySchedule = Field(default_factory=WeeklySchedule)
    exceptions: tuple[ScheduleException, ...] = ()


class OutsourcedProvider(DomainRecord):
    """An external company performing specific actions."""

    name: str
    supported_action_types: tuple[str, ...] = ()
    group_id: str | None = None
    # Time work comes back to the shop on the completion day
    reception_time: str = "09:00"
    # Work leaving after this time is counted from the next open day
    latest_departure_time: str = "14:00"
    open_weekdays: frozenset[int] = frozenset({0, 1, 2, 3, 4})
    closed_dates: frozenset[date] = frozenset()

    @field_validator("reception_time", "latest_departure_time")
    @classmethod
    def _check_clock(cls, value: str) -> str:
        clock_to_time(value)
        return value

    @field_validator("open_weekdays")
    @classmethod
    def _check_weekdays(cls, value: frozenset[int]) -> frozenset[int]:
        for weekday in value:
            if not 0 <= weekday <= 6:
                raise ValueError(
                    f"Invalid weekday: {weekday}. Must be 0-6 (Monday=0, Sunday=6)"
                )
        return value
