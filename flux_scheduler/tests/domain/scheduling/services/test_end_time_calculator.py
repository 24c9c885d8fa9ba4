"""Tests for task end-time calculation, including provider open days."""

from datetime import timedelta

import pytest

from flux_scheduler.domain.scheduling.entities import SnapshotIndex
from flux_scheduler.domain.scheduling.services.end_time_calculator import (
    calculate_end_time,
    calculate_outsourced_end_time,
)
from flux_scheduler.domain.shared.exceptions import UnresolvableScheduleError

from ..factories import (
    at,
    day_after,
    make_internal_task,
    make_outsourced_task,
    make_provider,
    make_snapshot,
    make_station,
)


class TestOutsourcedEndTime:
    """Test open-day counting with departure and reception cutoffs."""

    @pytest.fixture
    def provider(self):
        # Monday-Friday, leaves by 14:00, comes back at 09:00
        return make_provider()

    def test_leaves_before_cutoff(self, provider):
        assert calculate_outsourced_end_time(at(10), 2, provider) == at(
            9, day=day_after(2)
        )

    def test_leaving_at_cutoff_counts_same_day(self, provider):
        assert calculate_outsourced_end_time(at(14), 1, provider) == at(
            9, day=day_after(1)
        )

    def test_leaves_after_cutoff(self, provider):
        assert calculate_outsourced_end_time(at(15), 2, provider) == at(
            9, day=day_after(3)
        )

    def test_skips_weekend(self, provider):
        friday = day_after(4)

        assert calculate_outsourced_end_time(at(10, day=friday), 1, provider) == at(
            9, day=day_after(7)
        )

    def test_leaving_on_closed_day(self, provider):
        saturday = day_after(5)

        assert calculate_outsourced_end_time(at(10, day=saturday), 1, provider) == at(
            9, day=day_after(8)
        )

    def test_closed_dates_are_skipped(self):
        provider = make_provider(closed_dates=frozenset({day_after(1)}))

        assert calculate_outsourced_end_time(at(10), 1, provider) == at(
            9, day=day_after(2)
        )

    def test_custom_clocks(self):
        provider = make_provider(reception_time="16:30", latest_departure_time="10:00")

        assert calculate_outsourced_end_time(at(11), 1, provider) == at(
            16, 30, day=day_after(2)
        )

    def test_unknown_provider_uses_calendar_days(self):
        assert calculate_outsourced_end_time(at(10), 3, None) == at(10) + timedelta(
            days=3
        )

    def test_provider_never_open(self):
        provider = make_provider(open_weekdays=frozenset())

        with pytest.raises(UnresolvableScheduleError, match="no open weekdays"):
            calculate_outsourced_end_time(at(10), 1, provider)

    def test_provider_closed_for_too_long(self):
        provider = make_provider(
            open_weekdays=frozenset({0}),
            closed_dates=frozenset(day_after(7 * week) for week in range(1, 10)),
        )

        with pytest.raises(UnresolvableScheduleError):
            calculate_outsourced_end_time(at(10), 1, provider, max_iterations=20)

    def test_zero_ceiling_is_not_replaced_by_default(self, provider):
        friday = day_after(4)

        with pytest.raises(UnresolvableScheduleError):
            calculate_outsourced_end_time(
                at(10, day=friday), 1, provider, max_iterations=0
            )


class TestCalculateEndTime:
    """Test dispatch over task variants."""

    @pytest.fixture
    def index(self):
        return SnapshotIndex(
            make_snapshot(
                stations=[make_station("station-1")],
                providers=[make_provider("provider-1")],
            )
        )

    def test_internal_task_is_stretched(self, index):
        task = make_internal_task("t1", run_minutes=90, setup_minutes=30)

        assert calculate_end_time(task, at(11), index) == at(14)

    def test_internal_task_on_unknown_station(self, index):
        task = make_internal_task("t1", station_id="elsewhere", run_minutes=90)

        assert calculate_end_time(task, at(11), index) == at(12, 30)

    def test_target_overrides_task_station(self, index):
        task = make_internal_task("t1", station_id="elsewhere", run_minutes=90)

        assert calculate_end_time(task, at(11), index, target_id="station-1") == at(
            13, 30
        )

    def test_outsourced_task(self, index):
        task = make_outsourced_task("t1", open_days=2)

        assert calculate_end_time(task, at(10), index) == at(9, day=day_after(2))
