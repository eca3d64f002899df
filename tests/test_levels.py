"""Tests for candy_server.domain.levels – the static level catalog."""

import pytest

from candy_server.domain.errors import InvalidLevel, ValidationError
from candy_server.domain.levels import BOARD_CAPACITY, LEVELS, all_levels, get_level, is_valid_level


class TestCatalog:
    def test_exactly_ten_dense_ids(self):
        assert [level.id for level in LEVELS] == list(range(1, 11))

    def test_dimensions_fit_board_capacity(self):
        for level in all_levels():
            assert 1 <= level.rows <= BOARD_CAPACITY
            assert 1 <= level.cols <= BOARD_CAPACITY

    def test_targets_increase(self):
        targets = [level.target_score for level in LEVELS]
        assert targets == sorted(targets)

    def test_level_one(self):
        level = get_level(1)
        assert (level.rows, level.cols, level.target_score, level.time_limit) == (6, 6, 80, 40000)

    def test_level_ten(self):
        level = get_level(10)
        assert (level.rows, level.cols, level.target_score, level.time_limit) == (10, 7, 500, 130000)

    def test_configs_are_immutable(self):
        with pytest.raises(AttributeError):
            get_level(1).rows = 9


class TestInvalidLevel:
    @pytest.mark.parametrize("level", [0, 11, -1, 64])
    def test_out_of_range(self, level):
        assert not is_valid_level(level)
        with pytest.raises(InvalidLevel):
            get_level(level)

    def test_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            get_level(0)
