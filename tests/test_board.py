"""Tests for candy_server.domain.board – board container and grid generator."""

import numpy as np
import pytest

from candy_server.domain.board import BLANK, U64_MASK, Board, generate_grid, next_state


class TestGenerateGrid:
    def test_deterministic(self):
        assert generate_grid(1000, 6, 6) == generate_grid(1000, 6, 6)

    def test_different_seed_changes_grid(self):
        assert generate_grid(1000, 6, 6) != generate_grid(1001, 6, 6)

    def test_known_sequence_for_seed_zero(self):
        board = generate_grid(0, 1, 2)
        # 12345 // 65536 = 0 -> 1 ; 13622895711870 // 65536 = 207868892 -> 3
        assert board.at(0, 0) == 1
        assert board.at(0, 1) == 3

    def test_matches_row_major_lcg(self):
        board = generate_grid(42, 5, 7)
        state = 42
        for r in range(5):
            for c in range(7):
                state = next_state(state)
                assert board.at(r, c) == (state // 65536) % 5 + 1

    def test_colors_in_range_and_outside_blank(self):
        board = generate_grid(123456789, 9, 7)
        active = board.active_region()
        assert active.shape == (9, 7)
        assert active.min() >= 1 and active.max() <= 5
        assert not board.cells[9:, :].any()
        assert not board.cells[:, 7:].any()
        assert board.is_well_formed()

    def test_state_wraps_at_64_bits(self):
        assert next_state(U64_MASK) == (U64_MASK * 1103515245 + 12345) % (1 << 64)
        board = generate_grid(U64_MASK, 10, 7)
        assert board.is_well_formed()

    def test_negative_seed_is_taken_modulo_2_64(self):
        assert generate_grid(-1, 6, 6) == generate_grid(U64_MASK, 6, 6)


class TestBoard:
    def test_new_board_is_blank(self):
        board = Board(6, 6)
        assert board.cells.shape == (10, 10)
        assert (board.cells == BLANK).all()

    @pytest.mark.parametrize("rows, cols", [(0, 5), (11, 5), (5, 11)])
    def test_rejects_region_beyond_capacity(self, rows, cols):
        with pytest.raises(ValueError):
            Board(rows, cols)

    def test_rejects_wrong_cell_shape(self):
        with pytest.raises(ValueError):
            Board(6, 6, np.zeros((6, 6), dtype=np.uint8))

    def test_in_bounds_uses_active_region(self):
        board = Board(5, 7)
        assert board.in_bounds((4, 6))
        assert not board.in_bounds((5, 0))
        assert not board.in_bounds((0, 7))
        assert not board.in_bounds((-1, 0))

    def test_coords_are_bounded_row_major(self):
        coords = list(Board(2, 3).coords())
        assert coords == [(0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)]

    def test_swapped_returns_copy(self):
        board = generate_grid(7, 6, 6)
        a, b = board.at(0, 0), board.at(0, 1)
        swapped = board.swapped((0, 0), (0, 1))
        assert (swapped.at(0, 0), swapped.at(0, 1)) == (b, a)
        assert (board.at(0, 0), board.at(0, 1)) == (a, b)

    def test_grid_round_trip(self):
        board = generate_grid(99, 8, 7)
        grid = board.to_grid()
        assert len(grid) == 10 and all(len(row) == 10 for row in grid)
        assert Board.from_grid(8, 7, grid) == board

    def test_not_well_formed_with_blank_active_cell(self):
        board = generate_grid(5, 6, 6)
        board.cells[2, 2] = BLANK
        assert not board.is_well_formed()

    def test_not_well_formed_with_color_outside_region(self):
        board = generate_grid(5, 6, 6)
        board.cells[7, 7] = 3
        assert not board.is_well_formed()

    def test_pretty_shows_active_region(self):
        lines = generate_grid(5, 2, 3).pretty().splitlines()
        assert len(lines) == 2
        assert all(len(line.split()) == 3 for line in lines)
