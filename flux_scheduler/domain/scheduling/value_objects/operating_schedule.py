"""
Operating Schedule Value Objects

Weekly opening pattern of a station plus date-keyed exceptions that
override the pattern for a single calendar date.
"""

import re
from datetime import date, time

from pydantic import field_validator, model_validator
from typing_extensions import Self

from ...shared.base import ValueObject
from .time_window import MINUTES_PER_DAY, OpenInterval

_CLOCK_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


def parse_clock(value: str) -> int:
    """
    Convert an ``HH:MM`` clock string to minutes since midnight.

    ``"24:00"`` is accepted as the end of the day (1440).
    """
    match = _CLOCK_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid clock time {value!r}, expected HH:MM")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours == 24 and minutes == 0:
        return MINUTES_PER_DAY
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid clock time {value!r}")
    return hours * 60 + minutes


def clock_to_time(value: str) -> time:
    """Convert an ``HH:MM`` string to a time of day (``24:00`` is not allowed)."""
    minutes = parse_clock(value)
    if minutes == MINUTES_PER_DAY:
        raise ValueError("24:00 is not a time of day")
    return time(minutes // 60, minutes % 60)


class TimeSlot(ValueObject):
    """An open slot within a day, end-exclusive."""

    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def _check_clock(cls, value: str) -> str:
        parse_clock(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if parse_clock(self.start) >= parse_clock(self.end):
            raise ValueError(f"Slot {self.start}-{self.end} must end after it starts")
        return self

    def to_interval(self) -> OpenInterval:
        return OpenInterval(
            start_minute=parse_clock(self.start), end_minute=parse_clock(self.end)
        )


class DaySchedule(ValueObject):
    """Opening slots for a single day."""

    is_operating: bool = False
    slots: tuple[TimeSlot, ...] = ()

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(is_operating=False, slots=())

    @classmethod
    def open(cls, *slots: tuple[str, str]) -> "DaySchedule":
        """Build an operating day from ``(start, end)`` clock pairs."""
        return cls(
            is_operating=True,
            slots=tuple(TimeSlot(start=start, end=end) for start, end in slots),
        )

    def open_intervals(self) -> list[OpenInterval]:
        """Ordered open intervals; empty when the day is closed."""
        if not self.is_operating:
            return []
        return sorted(
            (slot.to_interval() for slot in self.slots),
            key=lambda interval: (interval.start_minute, interval.end_minute),
        )


class WeeklySchedule(ValueObject):
    """Regular weekly operating pattern."""

    monday: DaySchedule = DaySchedule()
    tuesday: DaySchedule = DaySchedule()
    wednesday: DaySchedule = DaySchedule()
    thursday: DaySchedule = DaySchedule()
    friday: DaySchedule = DaySchedule()
    saturday: DaySchedule = DaySchedule()
    sunday: DaySchedule = DaySchedule()

    @classmethod
    def uniform(
        cls, day: DaySchedule, weekdays: tuple[int, ...] = (0, 1, 2, 3, 4)
    ) -> "WeeklySchedule":
        """Same day schedule on the given weekdays (0=Monday), closed otherwise."""
        names = cls._day_names()
        return cls(
            **{
                name: day if index in weekdays else DaySchedule.closed()
                for index, name in enumerate(names)
            }
        )

    @classmethod
    def always_open(cls) -> "WeeklySchedule":
        return cls.uniform(DaySchedule.open(("00:00", "24:00")), tuple(range(7)))

    @staticmethod
    def _day_names() -> tuple[str, ...]:
        return (
            "monday",
            "tuesday",
            "wednesday",
            "thursday",
            "friday",
            "saturday",
            "sunday",
        )

    def for_weekday(self, weekday: int) -> DaySchedule:
        """Day schedule for ``date.weekday()`` (0=Monday, 6=Sunday)."""
        day: DaySchedule = getattr(self, self._day_names()[weekday])
        return day


class ScheduleException(ValueObject):
    """A one-time override of the weekly pattern for a calendar date."""

    id: str
    date: date
    schedule: DaySchedule
    reason: str | None = None
