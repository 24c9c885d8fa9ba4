"""
Time Window Value Objects

Half-open time ranges used throughout the engine. Every range is
``[start, end)``: ranges that only touch at an endpoint never overlap.
"""

from collections.abc import Iterable
from datetime import datetime

from pydantic import model_validator
from typing_extensions import Self

from ...shared.base import UtcDatetime, ValueObject

MINUTES_PER_DAY = 24 * 60


class TimeRange(ValueObject):
    """An absolute half-open time range."""

    start: UtcDatetime
    end: UtcDatetime

    @model_validator(mode="after")
    def _check_order(self) -> Self:
        if self.start > self.end:
            raise ValueError("Start time must not be after end time")
        return self

    def overlaps(self, other: "TimeRange") -> bool:
        return ranges_overlap(self.start, self.end, other.start, other.end)

    def contains(self, instant: datetime) -> bool:
        """Inclusive start, exclusive end."""
        return self.start <= instant < self.end

    def intersection(self, other: "TimeRange") -> "TimeRange | None":
        if not self.overlaps(other):
            return None
        return TimeRange(start=max(self.start, other.start), end=min(self.end, other.end))


class OpenInterval(ValueObject):
    """An open period within a calendar day, in minutes from midnight."""

    start_minute: int
    end_minute: int

    @model_validator(mode="after")
    def _check_bounds(self) -> Self:
        if not 0 <= self.start_minute < self.end_minute <= MINUTES_PER_DAY:
            raise ValueError(
                f"Invalid open interval {self.start_minute}-{self.end_minute}"
            )
        return self

    def contains_minute(self, minute: float) -> bool:
        return self.start_minute <= minute < self.end_minute


def ranges_overlap(
    start1: datetime, end1: datetime, start2: datetime, end2: datetime
) -> bool:
    """Two half-open ranges overlap iff each starts before the other ends."""
    return start1 < end2 and start2 < end1


def count_active_at(instant: datetime, ranges: Iterable[TimeRange]) -> int:
    """Count ranges active at an instant (inclusive start, exclusive end)."""
    return sum(1 for time_range in ranges if time_range.contains(instant))


def max_concurrent(ranges: Iterable[TimeRange]) -> int:
    """
    Maximum number of ranges simultaneously active at any instant.

    Sweep over start/end events; at equal timestamps end events are processed
    before start events so back-to-back ranges are not counted as concurrent.
    """
    events: list[tuple[datetime, int]] = []
    for time_range in ranges:
        # 0 sorts before 1: ends first on ties
        events.append((time_range.start, 1))
        events.append((time_range.end, 0))
    events.sort()

    current = 0
    peak = 0
    for _, kind in events:
        if kind == 1:
            current += 1
            peak = max(peak, current)
        else:
            current -= 1
    return peak
