"""Tests for swapping adjacent placements."""

from flux_scheduler.domain.scheduling.services.swap import (
    apply_swap,
    find_adjacent_assignment,
)
from flux_scheduler.domain.scheduling.value_objects import SwapDirection

from ..factories import at, make_assignment


def _by_id(result):
    return {a.id: (a.scheduled_start, a.scheduled_end) for a in result.assignments}


class TestFindAdjacentAssignment:
    def setup_method(self):
        self.assignments = [
            make_assignment("a-2", "t-2", at(9), at(10)),
            make_assignment("a-1", "t-1", at(8), at(9)),
            make_assignment("a-other", "t-o", at(8, 30), at(9, 30), "station-2"),
            make_assignment(
                "a-out", "t-out", at(8), at(9), "provider-1", is_outsourced=True
            ),
        ]

    def test_neighbours_in_chronological_order(self):
        assert find_adjacent_assignment(self.assignments, "a-1", SwapDirection.DOWN).id == "a-2"
        assert find_adjacent_assignment(self.assignments, "a-2", SwapDirection.UP).id == "a-1"

    def test_edges_have_no_neighbour(self):
        assert find_adjacent_assignment(self.assignments, "a-1", SwapDirection.UP) is None
        assert find_adjacent_assignment(self.assignments, "a-2", SwapDirection.DOWN) is None

    def test_outsourced_and_unknown(self):
        assert find_adjacent_assignment(self.assignments, "a-out", SwapDirection.UP) is None
        assert find_adjacent_assignment(self.assignments, "ghost", SwapDirection.UP) is None

    def test_accepts_plain_direction_strings(self):
        assert find_adjacent_assignment(self.assignments, "a-1", "down").id == "a-2"


class TestApplySwap:
    """Test order exchange with preserved durations."""

    def setup_method(self):
        self.first = make_assignment("a-1", "t-1", at(8), at(9))
        self.second = make_assignment(
            "a-2", "t-2", at(9), at(10, 30), is_completed=True, completed_at=at(10, 30)
        )

    def test_swap_down(self):
        result = apply_swap([self.first, self.second], "a-1", SwapDirection.DOWN, now=at(12))

        assert result.swapped
        assert result.swapped_with_id == "a-2"
        assert _by_id(result) == {
            "a-2": (at(8), at(9, 30)),
            "a-1": (at(9, 30), at(10, 30)),
        }

    def test_swap_up_from_later_placement(self):
        result = apply_swap([self.first, self.second], "a-2", SwapDirection.UP)

        assert _by_id(result) == {
            "a-2": (at(8), at(9, 30)),
            "a-1": (at(9, 30), at(10, 30)),
        }

    def test_other_fields_carried_over(self):
        result = apply_swap([self.first, self.second], "a-1", SwapDirection.DOWN, now=at(12))
        moved = next(a for a in result.assignments if a.id == "a-2")

        assert moved.is_completed
        assert moved.completed_at == at(10, 30)
        assert moved.updated_at == at(12)

    def test_gap_is_closed_from_anchor(self):
        later = make_assignment("a-3", "t-3", at(11), at(12))

        result = apply_swap([self.first, later], "a-1", SwapDirection.DOWN)

        assert _by_id(result) == {"a-3": (at(8), at(9)), "a-1": (at(9), at(10))}

    def test_down_then_up_restores_adjacent_pair(self):
        swapped = apply_swap([self.first, self.second], "a-1", SwapDirection.DOWN)
        restored = apply_swap(swapped.assignments, "a-1", SwapDirection.UP)

        assert _by_id(restored) == {
            "a-1": (at(8), at(9)),
            "a-2": (at(9), at(10, 30)),
        }

    def test_no_neighbour_is_noop(self):
        result = apply_swap([self.first, self.second], "a-1", SwapDirection.UP)

        assert not result.swapped
        assert result.swapped_with_id is None
        assert result.assignments == [self.first, self.second]
