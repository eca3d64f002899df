"""Level catalog.

Static table of the ten playable levels. Board dimensions never exceed
the 10x10 board capacity.
"""

from dataclasses import dataclass
from typing import Tuple

from candy_server.domain.errors import InvalidLevel

MIN_LEVEL = 1
MAX_LEVEL = 10
BOARD_CAPACITY = 10


@dataclass(frozen=True)
class LevelConfig:
    id: int
    rows: int
    cols: int
    target_score: int
    time_limit: int  # milliseconds


LEVELS: Tuple[LevelConfig, ...] = (
    LevelConfig(id=1, rows=6, cols=6, target_score=80, time_limit=40000),
    LevelConfig(id=2, rows=5, cols=7, target_score=120, time_limit=50000),
    LevelConfig(id=3, rows=5, cols=7, target_score=150, time_limit=60000),
    LevelConfig(id=4, rows=8, cols=7, target_score=200, time_limit=70000),
    LevelConfig(id=5, rows=9, cols=7, target_score=250, time_limit=80000),
    LevelConfig(id=6, rows=9, cols=7, target_score=280, time_limit=90000),
    LevelConfig(id=7, rows=9, cols=7, target_score=350, time_limit=100000),
    LevelConfig(id=8, rows=10, cols=7, target_score=380, time_limit=110000),
    LevelConfig(id=9, rows=10, cols=7, target_score=400, time_limit=120000),
    LevelConfig(id=10, rows=10, cols=7, target_score=500, time_limit=130000),
)


def is_valid_level(level: int) -> bool:
    return MIN_LEVEL <= level <= MAX_LEVEL


def get_level(level: int) -> LevelConfig:
    """Return the configuration of a level.

    Raises:
        InvalidLevel: level is outside 1..10.
    """
    if not is_valid_level(level):
        raise InvalidLevel()
    return LEVELS[level - 1]


def all_levels() -> Tuple[LevelConfig, ...]:
    return LEVELS
