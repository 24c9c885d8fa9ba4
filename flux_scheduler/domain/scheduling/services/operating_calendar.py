"""
Operating Calendar Service

Resolves a station's open intervals for a calendar date and stretches a
task's working minutes across those intervals to find its completion
instant. Calendar dates and clock times are evaluated in UTC.
"""

from datetime import date, datetime, time, timedelta, timezone

from ....core.config import settings
from ...shared.base import ensure_utc
from ...shared.exceptions import UnresolvableScheduleError
from ..entities.resource import Station
from ..value_objects.operating_schedule import DaySchedule
from ..value_objects.time_window import OpenInterval

ONE_MINUTE = timedelta(minutes=1)
ONE_DAY = timedelta(days=1)


def resolve_day_schedule(station: Station, on_date: date) -> DaySchedule:
    """
    Day schedule in force for a station on a date.

    An exception for the exact date replaces the weekly pattern entirely,
    including exceptions that close the station for the whole day.
    """
    for exception in station.exceptions:
        if exception.date == on_date:
            return exception.schedule
    return station.operating_schedule.for_weekday(on_date.weekday())


def resolve_open_intervals(station: Station, on_date: date) -> list[OpenInterval]:
    """
    Ordered open intervals of a station for a calendar date.

    Args:
        station: Station whose calendar is resolved
        on_date: Calendar date (UTC)

    Returns:
        End-exclusive minute-of-day intervals, sorted by start
    """
    return resolve_day_schedule(station, on_date).open_intervals()


def start_of_day(on_date: date) -> datetime:
    return datetime.combine(on_date, time(0, 0), tzinfo=timezone.utc)


def minute_of_day(instant: datetime) -> float:
    """Minutes elapsed since midnight, seconds included."""
    return (instant - start_of_day(instant.date())) / ONE_MINUTE


def check_operating_hours(station: Station, instant: datetime) -> str | None:
    """
    Why an instant falls outside the station's opening hours.

    Returns:
        ``None`` when the instant is inside an open interval, otherwise a
        human-readable reason
    """
    instant = ensure_utc(instant)
    on_date = instant.date()

    for exception in station.exceptions:
        if exception.date == on_date and not exception.schedule.is_operating:
            return f"Station closed due to: {exception.reason or 'schedule exception'}"

    intervals = resolve_open_intervals(station, on_date)
    if not intervals:
        return "Station not operating on this day"

    minute = minute_of_day(instant)
    if any(interval.contains_minute(minute) for interval in intervals):
        return None
    return f"Time {instant.strftime('%H:%M')} is outside operating hours"


def stretch_end_time(
    required_minutes: int,
    start: datetime,
    station: Station,
    max_iterations: int | None = None,
) -> datetime:
    """
    Completion instant of ``required_minutes`` of work starting at ``start``.

    Work is only consumed inside open intervals; the cursor jumps over
    closed gaps within a day and over fully closed days.

    Args:
        required_minutes: Working minutes the task needs
        start: Instant the task starts
        station: Station whose calendar applies
        max_iterations: Iteration ceiling, defaults to
            ``settings.STRETCH_MAX_ITERATIONS``

    Returns:
        The instant the last working minute is consumed

    Raises:
        UnresolvableScheduleError: If the ceiling is exceeded, e.g. the
            station never opens
    """
    ceiling = max_iterations
    if ceiling is None:
        ceiling = settings.STRETCH_MAX_ITERATIONS
    cursor = ensure_utc(start)
    remaining = timedelta(minutes=required_minutes)

    iterations = 0
    while remaining > timedelta(0):
        iterations += 1
        if iterations > ceiling:
            raise UnresolvableScheduleError(
                station.id, ceiling, "no open interval within the iteration ceiling"
            )

        midnight = start_of_day(cursor.date())
        minute = minute_of_day(cursor)
        interval = next(
            (
                candidate
                for candidate in resolve_open_intervals(station, cursor.date())
                if candidate.end_minute > minute
            ),
            None,
        )
        if interval is None:
            # Nothing left today
            cursor = midnight + ONE_DAY
            continue

        segment_start = max(cursor, midnight + interval.start_minute * ONE_MINUTE)
        interval_end = midnight + interval.end_minute * ONE_MINUTE
        consumed = min(remaining, interval_end - segment_start)
        remaining -= consumed
        cursor = segment_start + consumed

    return cursor
