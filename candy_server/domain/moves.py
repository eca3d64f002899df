"""Swap validation and application."""

from candy_server.domain.board import Board, Coord
from candy_server.domain.errors import InvalidPosition, NotAdjacent
from candy_server.domain.levels import LevelConfig


def in_level_bounds(level_config: LevelConfig, coord: Coord) -> bool:
    r, c = coord
    return 0 <= r < level_config.rows and 0 <= c < level_config.cols


def is_adjacent(from_pos: Coord, to_pos: Coord) -> bool:
    """Orthogonal neighbours: one delta is exactly 1, the other 0."""
    row_diff = abs(from_pos[0] - to_pos[0])
    col_diff = abs(from_pos[1] - to_pos[1])
    return (row_diff == 1 and col_diff == 0) or (row_diff == 0 and col_diff == 1)


def validate_move(level_config: LevelConfig, from_pos: Coord, to_pos: Coord) -> None:
    """Check a swap request against the level's active region.

    Raises:
        InvalidPosition: either cell lies outside [0, rows) x [0, cols).
        NotAdjacent: the cells are not orthogonal neighbours.
    """
    if not (in_level_bounds(level_config, from_pos) and in_level_bounds(level_config, to_pos)):
        raise InvalidPosition()
    if not is_adjacent(from_pos, to_pos):
        raise NotAdjacent()


def apply_swap(board: Board, level_config: LevelConfig, from_pos: Coord, to_pos: Coord) -> Board:
    validate_move(level_config, from_pos, to_pos)
    return board.swapped(from_pos, to_pos)
