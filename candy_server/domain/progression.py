from dataclasses import replace

from candy_server.domain.levels import MAX_LEVEL
from candy_server.domain.records import PlayerProfile


def apply_result(profile: PlayerProfile, level: int, final_score: int, won: bool) -> PlayerProfile:
    """Fold one finished game into the player's progression.

    Every game counts towards total_games. A win also adds the score to the
    candy total, unlocks the next level (below 10) and raises highest_level.
    """
    total_games = profile.total_games + 1
    if not won:
        return replace(profile, total_games=total_games)

    unlocked = profile.unlocked_levels
    if level < MAX_LEVEL:
        unlocked = unlocked.unlock(level + 1)

    return replace(
        profile,
        total_games=total_games,
        total_wins=profile.total_wins + 1,
        total_candies_collected=profile.total_candies_collected + final_score,
        unlocked_levels=unlocked,
        highest_level=max(profile.highest_level, level),
    )
