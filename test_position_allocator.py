import pytest

from kanban_board.services.position_allocator import (
    allocate_position,
    append_position,
    gap_is_exhausted,
    respaced_positions,
)


class TestAllocatePosition:
    """Midpoint allocation between neighbours"""

    def test_midpoint_between_neighbours(self):
        assert allocate_position(1.0, 2.0) == 1.5
        assert allocate_position(2.0, 5.0) == 3.5

    def test_head_of_container_halves_next(self):
        assert allocate_position(None, 4.0) == 2.0

    def test_head_with_non_positive_next_goes_below_it(self):
        assert allocate_position(None, 0.0) == -1.0
        assert allocate_position(None, -3.0) == -4.0

    def test_tail_of_container_adds_one(self):
        assert allocate_position(5.0, None) == 6.0

    def test_empty_container(self):
        assert allocate_position(None, None) == 1.0

    @pytest.mark.parametrize("prev,next", [
        (0.0, 1.0),
        (1.0, 1.5),
        (-2.0, 3.0),
        (1.0, 1.0000001),
        (1000.0, 1000.5),
    ])
    def test_result_is_strictly_between(self, prev, next):
        position = allocate_position(prev, next)
        assert prev < position < next

    def test_repeated_halving_stays_ordered_until_gap_exhausted(self):
        prev, next = 1.0, 2.0
        for _ in range(20):
            next = allocate_position(prev, next)
            assert prev < next
        assert not gap_is_exhausted(prev, next, None, 1e-9)


class TestAppendPosition:

    def test_first_item(self):
        assert append_position(None) == 1.0

    def test_after_maximum(self):
        assert append_position(5.0) == 6.0
        assert append_position(2.5) == 3.5


class TestGapIsExhausted:

    def test_wide_gap(self):
        assert gap_is_exhausted(1.0, 1.5, 2.0, 1e-9) is False

    def test_too_close_to_prev(self):
        assert gap_is_exhausted(1.0, 1.0 + 1e-12, 2.0, 1e-9) is True

    def test_too_close_to_next(self):
        assert gap_is_exhausted(1.0, 2.0 - 1e-12, 2.0, 1e-9) is True

    def test_missing_neighbours_never_exhaust(self):
        assert gap_is_exhausted(None, 1.0, None, 1e-9) is False


def test_respaced_positions():
    assert respaced_positions(0) == []
    assert respaced_positions(3) == [1.0, 2.0, 3.0]
