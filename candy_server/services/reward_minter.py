"""Victory collectible minting.

The minter is a one-shot side effect invoked by the game service after a
win is confirmed and graded. The default implementation records the
collectible in the database; other implementations can hand off to an
external token service.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession
from uuid6 import uuid7

from candy_server.crud import CreateData
from candy_server.domain.rarity import RarityTier
from candy_server.domain.rewards import RewardMetadata
from candy_server.models.schema_models import VictoryRewardSchema


class RewardMinter(ABC):
    @abstractmethod
    async def mint(
        self,
        player: str,
        level: int,
        score: int,
        rarity: RarityTier,
        metadata: RewardMetadata,
        session: AsyncSession,
    ) -> VictoryRewardSchema:
        ...


class DatabaseRewardMinter(RewardMinter):
    async def mint(
        self,
        player: str,
        level: int,
        score: int,
        rarity: RarityTier,
        metadata: RewardMetadata,
        session: AsyncSession,
    ) -> VictoryRewardSchema:
        reward = VictoryRewardSchema(
            mint_id=uuid7(),
            player=player,
            level=level,
            rarity=rarity.label,
            name=metadata.name,
            symbol=metadata.symbol,
            uri=metadata.uri,
            seller_fee_basis_points=metadata.seller_fee_basis_points,
            score=score,
            minted_at=datetime.now(),
        )
        if not await CreateData.create_victory_reward(reward, session):
            raise RuntimeError("Failed to create victory reward")
        logging.info(f"Minted {reward.name} ({reward.rarity}) for {player}: {reward.mint_id}")
        return reward
