"""Victory reward eligibility and collectible metadata."""

from dataclasses import dataclass

from candy_server.domain.errors import GameStillActive, InsufficientScore, RewardAlreadyClaimed
from candy_server.domain.levels import get_level
from candy_server.domain.rarity import RarityTier, rarity_tier
from candy_server.domain.records import GameSession

REWARD_SYMBOL = "CANDYVIC"
DEFAULT_METADATA_URI = "https://example.com/candy.json"
SELLER_FEE_BASIS_POINTS = 0


@dataclass(frozen=True)
class RewardMetadata:
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int


def reward_tier(session: GameSession) -> RarityTier:
    """Confirm an ended, winning, unredeemed session and grade it.

    Raises:
        GameStillActive: the session has not ended.
        InsufficientScore: the final score is below the level target.
        RewardAlreadyClaimed: a reward was already minted for this session.
    """
    if session.is_active:
        raise GameStillActive()
    level_config = get_level(session.level)
    if session.score < level_config.target_score:
        raise InsufficientScore()
    if session.redeemed:
        raise RewardAlreadyClaimed()
    return rarity_tier(session.score, level_config.target_score)


def reward_metadata(level: int, uri: str = DEFAULT_METADATA_URI) -> RewardMetadata:
    return RewardMetadata(
        name=f"Candy Victory Lvl {level}",
        symbol=REWARD_SYMBOL,
        uri=uri,
        seller_fee_basis_points=SELLER_FEE_BASIS_POINTS,
    )
