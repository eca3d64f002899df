"""Game session lifecycle: Idle -> Active -> Ended.

Rule of thumb:
- Each transition checks everything first and only then builds the new record.
- Match detection and live scoring happen client side; the final score
  reported to end_game is trusted as-is.
"""

from dataclasses import replace

from candy_server.domain.board import Coord, generate_grid
from candy_server.domain.errors import GameNotActive, InvalidScore, LevelLocked
from candy_server.domain.levels import get_level
from candy_server.domain.moves import apply_swap
from candy_server.domain.progression import apply_result
from candy_server.domain.records import GameResult, GameSession, PlayerProfile

# scores and running totals are stored as signed 64-bit integers
MAX_SCORE = 2**63 - 1


def start_game(player: str, level: int, profile: PlayerProfile, now: int) -> GameSession:
    """Create a fresh Active session for an unlocked level.

    `now` is both the start time and the grid seed.

    Raises:
        InvalidLevel: level is outside 1..10.
        LevelLocked: the level is not in the profile's unlock bitmap.
    """
    level_config = get_level(level)
    if not profile.unlocked_levels.is_unlocked(level):
        raise LevelLocked()

    board = generate_grid(now, level_config.rows, level_config.cols)
    return GameSession(
        player=player,
        level=level,
        board=board,
        score=0,
        moves_made=0,
        start_time=now,
        is_active=True,
        redeemed=False,
    )


def make_move(session: GameSession, from_pos: Coord, to_pos: Coord) -> GameSession:
    """Swap two adjacent candies and count the move.

    Raises:
        GameNotActive: the session has ended.
        InvalidPosition: a cell lies outside the level's region.
        NotAdjacent: the cells are not orthogonal neighbours.
    """
    if not session.is_active:
        raise GameNotActive()
    level_config = get_level(session.level)
    board = apply_swap(session.board, level_config, from_pos, to_pos)
    return replace(session, board=board, moves_made=session.moves_made + 1)


def end_game(session: GameSession, final_score: int, profile: PlayerProfile) -> GameResult:
    """Close the session with the client-reported score and update progression.

    Raises:
        GameNotActive: the session has already ended.
        InvalidScore: the score is negative or would overflow the candy total.
    """
    if not session.is_active:
        raise GameNotActive()
    if not 0 <= final_score <= MAX_SCORE:
        raise InvalidScore()
    level_config = get_level(session.level)
    won = final_score >= level_config.target_score
    if won and final_score > MAX_SCORE - profile.total_candies_collected:
        raise InvalidScore()

    ended = replace(session, score=final_score, is_active=False)
    updated_profile = apply_result(profile, session.level, final_score, won)
    return GameResult(session=ended, profile=updated_profile, won=won)
