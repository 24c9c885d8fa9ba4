"""Tests for lane layout on unlimited-capacity resources."""

import pytest

from flux_scheduler.domain.scheduling.services.subcolumn_layout import (
    calculate_subcolumn_layout,
    get_subcolumn_layout,
)

from ..factories import at, make_assignment


def _outsourced(assignment_id, start, end):
    return make_assignment(
        assignment_id, f"t-{assignment_id}", start, end, "provider-1", is_outsourced=True
    )


class TestCalculateSubcolumnLayout:
    def test_three_way_overlap(self):
        layouts = calculate_subcolumn_layout(
            [
                _outsourced("a", at(8), at(12)),
                _outsourced("b", at(9), at(11)),
                _outsourced("c", at(10), at(13)),
            ]
        )

        assert [layouts[key].lane_index for key in "abc"] == [0, 1, 2]
        assert {layout.total_lanes for layout in layouts.values()} == {3}
        assert layouts["a"].width_percent == pytest.approx(33.33, abs=0.01)
        assert layouts["c"].left_percent == pytest.approx(66.67, abs=0.01)

    def test_touching_placements_share_lane(self):
        layouts = calculate_subcolumn_layout(
            [_outsourced("a", at(8), at(10)), _outsourced("b", at(10), at(12))]
        )

        assert layouts["a"].lane_index == layouts["b"].lane_index == 0
        assert layouts["b"].total_lanes == 1
        assert layouts["b"].width_percent == 100

    def test_freed_lane_is_reused(self):
        layouts = calculate_subcolumn_layout(
            [
                _outsourced("a", at(8), at(10)),
                _outsourced("b", at(9), at(11)),
                _outsourced("c", at(10, 30), at(12)),
            ]
        )

        assert [layouts[key].lane_index for key in "abc"] == [0, 1, 0]
        assert layouts["c"].total_lanes == 2

    def test_input_order_does_not_matter(self):
        layouts = calculate_subcolumn_layout(
            [_outsourced("late", at(9), at(11)), _outsourced("early", at(8), at(12))]
        )

        assert layouts["early"].lane_index == 0
        assert layouts["late"].lane_index == 1

    def test_empty(self):
        assert calculate_subcolumn_layout([]) == {}


class TestGetSubcolumnLayout:
    def test_missing_assignment_is_full_width(self):
        layout = get_subcolumn_layout("ghost", {})

        assert (layout.lane_index, layout.total_lanes, layout.width_percent) == (0, 1, 100)
        assert layout.left_percent == 0
