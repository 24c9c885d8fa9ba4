"""Tests for station group usage helpers."""

from flux_scheduler.domain.scheduling.services.group_capacity import (
    find_exceeded_groups,
    group_usage_at,
    max_group_usage,
)

from ..factories import at, make_assignment, make_group, make_station


class TestGroupUsage:
    def setup_method(self):
        self.stations = [
            make_station("s1", group_id="g1"),
            make_station("s2", group_id="g1"),
            make_station("s3", group_id="g2"),
            make_station("s4"),
        ]
        self.assignments = [
            make_assignment("a1", "t1", at(10), at(12), "s1"),
            make_assignment("a2", "t2", at(11), at(13), "s2"),
            make_assignment("a3", "t3", at(10), at(11), "s3"),
            make_assignment("a4", "t4", at(10), at(11), "s4"),
            make_assignment("a5", "t5", at(10), at(13), "p1", is_outsourced=True),
        ]

    def test_usage_at_instant(self):
        assert group_usage_at(self.assignments, self.stations, at(10, 30)) == {
            "g1": 1,
            "g2": 1,
        }
        assert group_usage_at(self.assignments, self.stations, at(11, 30)) == {"g1": 2}

    def test_peak_usage(self):
        assert max_group_usage(self.assignments, self.stations) == {"g1": 2, "g2": 1}

    def test_exceeded_groups(self):
        groups = [make_group("g1", max_concurrent=1), make_group("g2", max_concurrent=None)]

        assert find_exceeded_groups(groups, self.assignments, self.stations) == ["g1"]

    def test_cap_met_is_not_exceeded(self):
        groups = [make_group("g1", max_concurrent=2)]

        assert find_exceeded_groups(groups, self.assignments, self.stations) == []
