"""Per-player records the game rules operate on."""

from dataclasses import dataclass, field

from candy_server.domain.board import Board
from candy_server.domain.unlocks import UnlockBitmap


@dataclass(frozen=True)
class PlayerProfile:
    authority: str
    total_games: int = 0
    total_wins: int = 0
    highest_level: int = 1
    unlocked_levels: UnlockBitmap = field(default_factory=UnlockBitmap.initial)
    total_candies_collected: int = 0
    total_nfts_minted: int = 0
    created_at: int = 0


@dataclass(frozen=True)
class GameSession:
    """One record per player; a new game replaces it.

    `score` is only meaningful once the session has ended.
    """

    player: str
    level: int
    board: Board
    score: int = 0
    moves_made: int = 0
    start_time: int = 0
    is_active: bool = True
    redeemed: bool = False


@dataclass(frozen=True)
class GameResult:
    session: GameSession
    profile: PlayerProfile
    won: bool


def new_player_profile(authority: str, now: int) -> PlayerProfile:
    return PlayerProfile(authority=authority, created_at=now)
