"""Database helpers.

These helpers never commit: the service layer owns session/transaction
boundaries (``async with session.begin()``). Writes log and return False on
database errors; reads log and re-raise.
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from candy_server.models.schema_models import (
    GameSessionSchema,
    PlayerProfileSchema,
    SessionTokenSchema,
    UserSchema,
    VictoryCollectionSchema,
    VictoryRewardSchema,
)
from candy_server.models.schemas import (
    GameSessionTable,
    PlayerProfileTable,
    SessionTokenTable,
    UserTable,
    VictoryCollectionTable,
    VictoryRewardTable,
)

COLLECTION_ID = 1


class CreateData:
    @staticmethod
    async def create_user_data(user: UserSchema, session: AsyncSession) -> bool:
        """Create user data to authenticate the user

        Args:
            user (UserSchema): username, salted password hash and salt
        """
        try:
            session.add(UserTable(**user.model_dump()))
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to create user data: {e}")
            return False

    @staticmethod
    async def create_player_profile(profile: PlayerProfileSchema, session: AsyncSession) -> bool:
        """Create a player profile

        Args:
            profile (PlayerProfileSchema): Fresh profile with only level 1 unlocked
        """
        try:
            session.add(PlayerProfileTable(**profile.model_dump()))
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to create player profile: {e}")
            return False

    @staticmethod
    async def create_session_token(token: SessionTokenSchema, session: AsyncSession) -> bool:
        try:
            session.add(SessionTokenTable(**token.model_dump()))
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to create session token: {e}")
            return False

    @staticmethod
    async def create_victory_collection(collection: VictoryCollectionSchema, session: AsyncSession) -> bool:
        try:
            session.add(VictoryCollectionTable(**collection.model_dump()))
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to create victory collection: {e}")
            return False

    @staticmethod
    async def create_victory_reward(reward: VictoryRewardSchema, session: AsyncSession) -> bool:
        """Record a minted victory collectible

        Args:
            reward (VictoryRewardSchema): Mint id, rarity and metadata of the collectible
        """
        try:
            session.add(VictoryRewardTable(**reward.model_dump()))
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to create victory reward: {e}")
            return False


class ReadData:
    @staticmethod
    async def read_user_data(username: str, session: AsyncSession) -> UserSchema | None:
        """Read user data to get salt and password hash

        Args:
            username (str): username of the user

        Returns:
            UserSchema: username, password hash and salt
        """
        try:
            stmt = select(UserTable).where(UserTable.username == username)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return UserSchema.model_validate(result)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read user data: {e}")
            raise

    @staticmethod
    async def read_player_profile(authority: str, session: AsyncSession) -> PlayerProfileSchema | None:
        """Read the profile owned by a player

        Args:
            authority (str): Player identity

        Returns:
            PlayerProfileSchema: Stats and unlock bitmap of the player
        """
        try:
            stmt = select(PlayerProfileTable).where(PlayerProfileTable.authority == authority)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return PlayerProfileSchema.model_validate(result)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read player profile: {e}")
            raise

    @staticmethod
    async def read_game_session(player: str, session: AsyncSession) -> GameSessionSchema | None:
        """Read the (single) game session record of a player"""
        try:
            stmt = select(GameSessionTable).where(GameSessionTable.player == player)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return GameSessionSchema.model_validate(result)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read game session: {e}")
            raise

    @staticmethod
    async def read_session_token(token_hash: str, session: AsyncSession) -> SessionTokenSchema | None:
        try:
            stmt = select(SessionTokenTable).where(SessionTokenTable.token_hash == token_hash)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return SessionTokenSchema.model_validate(result)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read session token: {e}")
            raise

    @staticmethod
    async def read_victory_collection(session: AsyncSession) -> VictoryCollectionSchema | None:
        try:
            stmt = select(VictoryCollectionTable).where(VictoryCollectionTable.collection_id == COLLECTION_ID)
            result = await session.execute(stmt)
            result = result.scalars().first()
            if result is None:
                return None
            return VictoryCollectionSchema.model_validate(result)
        except SQLAlchemyError as e:
            logging.error(f"Failed to read victory collection: {e}")
            raise

    @staticmethod
    async def read_victory_rewards(player: str, session: AsyncSession) -> List[VictoryRewardSchema]:
        try:
            stmt = (
                select(VictoryRewardTable)
                .where(VictoryRewardTable.player == player)
                .order_by(VictoryRewardTable.minted_at)
            )
            result = await session.execute(stmt)
            return [VictoryRewardSchema.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            logging.error(f"Failed to read victory rewards: {e}")
            raise


class UpdateData:
    @staticmethod
    async def update_player_profile(profile: PlayerProfileSchema, session: AsyncSession) -> bool:
        """Overwrite the stats and unlock bitmap of an existing profile

        Args:
            profile (PlayerProfileSchema): Profile returned by the game rules
        """
        try:
            stmt = select(PlayerProfileTable).where(PlayerProfileTable.authority == profile.authority)
            result = await session.execute(stmt)
            result = result.scalars().first()

            if result is None:
                return False

            result.total_games = profile.total_games
            result.total_wins = profile.total_wins
            result.highest_level = profile.highest_level
            result.unlocked_levels = profile.unlocked_levels
            result.total_candies_collected = profile.total_candies_collected
            result.total_nfts_minted = profile.total_nfts_minted
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to update player profile: {e}")
            return False

    @staticmethod
    async def upsert_game_session(game_session: GameSessionSchema, session: AsyncSession) -> bool:
        """Write the player's session record, replacing any previous one

        Args:
            game_session (GameSessionSchema): Whole record including the 10x10 grid
        """
        try:
            await session.merge(GameSessionTable(**game_session.model_dump()))
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to upsert game session: {e}")
            return False

    @staticmethod
    async def update_session_delegation(player: str, delegated: bool, session: AsyncSession) -> bool:
        try:
            stmt = select(GameSessionTable).where(GameSessionTable.player == player)
            result = await session.execute(stmt)
            result = result.scalars().first()

            if result is None:
                return False

            result.delegated = delegated
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to update session delegation: {e}")
            return False

    @staticmethod
    async def increment_total_victories(session: AsyncSession) -> bool:
        try:
            stmt = select(VictoryCollectionTable).where(VictoryCollectionTable.collection_id == COLLECTION_ID)
            result = await session.execute(stmt)
            result = result.scalars().first()

            if result is None:
                return False

            result.total_victories += 1
            await session.flush()
            return True
        except SQLAlchemyError as e:
            logging.error(f"Failed to update victory collection: {e}")
            return False


class DeleteData:
    @staticmethod
    async def delete_expired_session_tokens(now: int, session: AsyncSession) -> int:
        """Delete session tokens whose validity window has passed

        Args:
            now (int): Current unix time in seconds

        Returns:
            int: Number of deleted tokens
        """
        try:
            stmt = delete(SessionTokenTable).where(SessionTokenTable.valid_until <= now)
            result = await session.execute(stmt)
            return result.rowcount or 0
        except SQLAlchemyError as e:
            logging.error(f"Failed to delete expired session tokens: {e}")
            raise
