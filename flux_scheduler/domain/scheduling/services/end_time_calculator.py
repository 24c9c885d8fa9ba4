"""
End Time Calculator

Completion instant of a task started at a given instant: internal tasks are
stretched over their station's calendar, outsourced tasks count whole open
days of their provider.
"""

from datetime import date, datetime, timedelta

from typing_extensions import assert_never

from ....core.config import settings
from ...shared.base import ensure_utc
from ...shared.exceptions import UnresolvableScheduleError
from ..entities.resource import OutsourcedProvider
from ..entities.snapshot import SnapshotIndex
from ..entities.task import InternalTask, OutsourcedTask
from ..value_objects.operating_schedule import clock_to_time
from .operating_calendar import ONE_DAY, stretch_end_time


def is_provider_open(provider: OutsourcedProvider, on_date: date) -> bool:
    return (
        on_date.weekday() in provider.open_weekdays
        and on_date not in provider.closed_dates
    )


def calculate_outsourced_end_time(
    start: datetime,
    open_days: int,
    provider: OutsourcedProvider | None,
    max_iterations: int | None = None,
) -> datetime:
    """
    Instant outsourced work leaving the shop at ``start`` comes back.

    Work leaving after the provider's latest departure time, or on a day the
    provider is closed, is counted from the next open day. The work comes
    back ``open_days`` open days later, at the provider's reception time.

    Args:
        start: Instant the work leaves the shop
        open_days: Whole open days the provider needs
        provider: Provider performing the work, ``None`` when unknown
        max_iterations: Ceiling on scanned days, defaults to
            ``settings.STRETCH_MAX_ITERATIONS``

    Returns:
        Instant the work is back in the shop

    Raises:
        UnresolvableScheduleError: If the provider never opens
    """
    start = ensure_utc(start)
    if provider is None:
        return start + timedelta(days=open_days)

    ceiling = max_iterations
    if ceiling is None:
        ceiling = settings.STRETCH_MAX_ITERATIONS
    if not provider.open_weekdays:
        raise UnresolvableScheduleError(provider.id, 0, "provider has no open weekdays")

    scanned = 0

    def next_open_day(after: date) -> date:
        nonlocal scanned
        candidate = after + ONE_DAY
        while not is_provider_open(provider, candidate):
            scanned += 1
            if scanned > ceiling:
                raise UnresolvableScheduleError(
                    provider.id, ceiling, "no open day within the iteration ceiling"
                )
            candidate += ONE_DAY
        return candidate

    departure_day = start.date()
    cutoff = clock_to_time(provider.latest_departure_time)
    if not is_provider_open(provider, departure_day) or start.time() > cutoff:
        departure_day = next_open_day(departure_day)

    return_day = departure_day
    for _ in range(open_days):
        return_day = next_open_day(return_day)

    return datetime.combine(
        return_day, clock_to_time(provider.reception_time), tzinfo=start.tzinfo
    )


def calculate_end_time(
    task: InternalTask | OutsourcedTask,
    start: datetime,
    index: SnapshotIndex,
    target_id: str | None = None,
    max_iterations: int | None = None,
) -> datetime:
    """
    Completion instant of ``task`` started at ``start``.

    ``target_id`` overrides the task's own station or provider. An internal
    task on a station missing from the snapshot runs for its plain duration.
    """
    start = ensure_utc(start)
    if isinstance(task, InternalTask):
        minutes = task.duration.total_minutes
        station = index.station(target_id or task.station_id)
        if station is None:
            return start + timedelta(minutes=minutes)
        return stretch_end_time(minutes, start, station, max_iterations)
    elif isinstance(task, OutsourcedTask):
        provider = index.provider(target_id or task.provider_id)
        return calculate_outsourced_end_time(
            start, task.duration.open_days, provider, max_iterations
        )
    else:
        assert_never(task)
