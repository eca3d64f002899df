from enum import IntEnum


class RarityTier(IntEnum):
    COMMON = 1
    RARE = 2
    EPIC = 3
    LEGENDARY = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


def rarity_tier(score: int, target_score: int) -> RarityTier:
    """Reward tier from how far the score exceeds the target.

    Caller guarantees score >= target_score.
    """
    pct = score * 100 // target_score
    if pct >= 200:
        return RarityTier.LEGENDARY
    if pct >= 150:
        return RarityTier.EPIC
    if pct >= 120:
        return RarityTier.RARE
    return RarityTier.COMMON
