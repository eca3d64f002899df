"""Game service layer.

- Routers do not touch DB sessions or Redis directly; they call this module.
- This layer owns session/transaction boundaries and wires the clock, the
  execution context, authorization and the reward minter around the pure
  game rules in ``candy_server.domain``.
- Transitions for the same player must not run concurrently; callers
  serialize them.
- Redis writes of a delegated session are flushed only after the database
  transaction commits.
"""

import hashlib
import logging
import secrets
import time
from dataclasses import replace
from typing import Callable, List, Tuple

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from uuid6 import uuid7

from candy_server.converter import DataConverter
from candy_server.crud import CreateData, DeleteData, ReadData, UpdateData
from candy_server.domain import session_rules
from candy_server.domain.auth_gate import AuthGate, DelegatedCredential, require_authorized
from candy_server.domain.board import Coord
from candy_server.domain.errors import (
    CollectionAlreadyExists,
    CollectionNotFound,
    InvalidAuth,
    PlayerAlreadyExists,
    PlayerNotFound,
    SessionNotFound,
)
from candy_server.domain.levels import LevelConfig, all_levels
from candy_server.domain.records import GameResult, GameSession, PlayerProfile, new_player_profile
from candy_server.domain.rewards import reward_metadata, reward_tier
from candy_server.execution_context import ExecutionContext
from candy_server.load_secrets import reward_metadata_uri, session_token_ttl_seconds
from candy_server.models.dc_models import ExecutionContextName
from candy_server.models.schema_models import (
    SessionTokenSchema,
    VictoryCollectionSchema,
    VictoryRewardSchema,
)
from candy_server.services.reward_minter import DatabaseRewardMinter, RewardMinter

data_converter = DataConverter()


def unix_now() -> int:
    return int(time.time())


def hash_session_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class GameService:
    def __init__(
        self,
        Session: async_sessionmaker,
        redis: Redis,
        clock: Callable[[], int] = unix_now,
        minter: RewardMinter | None = None,
        metadata_uri: str = reward_metadata_uri,
    ):
        self.Session = Session
        self.redis = redis
        self.clock = clock
        self.minter = minter or DatabaseRewardMinter()
        self.metadata_uri = metadata_uri

    # ==== Players =================================================================

    async def initialize_player(self, authority: str) -> PlayerProfile:
        profile = new_player_profile(authority, self.clock())
        async with self.Session() as session:
            async with session.begin():
                if await ReadData.read_player_profile(authority, session) is not None:
                    raise PlayerAlreadyExists()
                success = await CreateData.create_player_profile(
                    data_converter.convert_profile_to_profileschema(profile), session
                )
                if not success:
                    raise RuntimeError("Failed to create player profile")
        logging.info(f"Player profile initialized for: {authority}")
        return profile

    async def get_player_profile(self, authority: str) -> PlayerProfile:
        async with self.Session() as session:
            return await self._read_profile(authority, session)

    def list_levels(self) -> Tuple[LevelConfig, ...]:
        return all_levels()

    async def initialize_collection(self, authority: str) -> VictoryCollectionSchema:
        collection = VictoryCollectionSchema(collection_id=1, authority=authority, total_victories=0)
        async with self.Session() as session:
            async with session.begin():
                if await ReadData.read_victory_collection(session) is not None:
                    raise CollectionAlreadyExists()
                if not await CreateData.create_victory_collection(collection, session):
                    raise RuntimeError("Failed to create victory collection")
        logging.info(f"Victory collection initialized by: {authority}")
        return collection

    async def get_victory_collection(self) -> VictoryCollectionSchema:
        async with self.Session() as session:
            collection = await ReadData.read_victory_collection(session)
        if collection is None:
            raise CollectionNotFound()
        return collection

    async def list_victory_rewards(self, authority: str) -> List[VictoryRewardSchema]:
        async with self.Session() as session:
            return await ReadData.read_victory_rewards(authority, session)

    # ==== Game session ============================================================

    async def get_game_session(self, authority: str) -> Tuple[GameSession, ExecutionContextName]:
        async with self.Session() as session:
            context = await ExecutionContext.open(authority, session, self.redis)
            game_session = await context.load_session()
        if game_session is None:
            raise SessionNotFound()
        return game_session, context.state

    async def start_game(self, authority: str, level: int) -> GameSession:
        """Start a new game, replacing any previous session record of the player."""
        now = self.clock()
        async with self.Session() as session:
            async with session.begin():
                profile = await self._read_profile(authority, session)
                game_session = session_rules.start_game(authority, level, profile, now)
                context = await ExecutionContext.open(authority, session, self.redis)
                await context.save_session(game_session)
            await context.flush()
        logging.info(f"Game session started for level {level} by {authority}")
        return game_session

    async def make_move(
        self,
        caller: str,
        gate: AuthGate,
        player: str,
        from_pos: Coord,
        to_pos: Coord,
    ) -> GameSession:
        """Swap two candies in the player's session once the caller is authorized."""
        async with self.Session() as session:
            async with session.begin():
                context = await ExecutionContext.open(player, session, self.redis)
                game_session = await context.load_session()
                if game_session is None:
                    raise SessionNotFound()
                require_authorized(gate, caller, game_session.player, self.clock())
                game_session = session_rules.make_move(game_session, from_pos, to_pos)
                await context.save_session(game_session)
            await context.flush()
        logging.info(f"Move executed: ({from_pos[0]},{from_pos[1]}) <-> ({to_pos[0]},{to_pos[1]})")
        return game_session

    async def end_game(self, authority: str, final_score: int) -> GameResult:
        """Close the session with the client-reported score and update the profile."""
        async with self.Session() as session:
            async with session.begin():
                profile = await self._read_profile(authority, session)
                context = await ExecutionContext.open(authority, session, self.redis)
                game_session = await context.load_session()
                if game_session is None:
                    raise SessionNotFound()
                result = session_rules.end_game(game_session, final_score, profile)
                await context.save_session(result.session)
                await self._write_profile(result.profile, session)
            await context.flush()
        logging.info(
            f"Game ended - Level: {result.session.level}, Score: {final_score}, "
            f"Result: {'WIN' if result.won else 'LOSS'}"
        )
        return result

    async def mint_victory(self, authority: str) -> VictoryRewardSchema:
        """Grade an ended winning session and mint its collectible once."""
        async with self.Session() as session:
            async with session.begin():
                profile = await self._read_profile(authority, session)
                context = await ExecutionContext.open(authority, session, self.redis)
                game_session = await context.load_session()
                if game_session is None:
                    raise SessionNotFound()
                rarity = reward_tier(game_session)
                if await ReadData.read_victory_collection(session) is None:
                    raise CollectionNotFound()

                metadata = reward_metadata(game_session.level, self.metadata_uri)
                reward = await self.minter.mint(
                    authority, game_session.level, game_session.score, rarity, metadata, session
                )
                await context.save_session(replace(game_session, redeemed=True))
                await self._write_profile(replace(profile, total_nfts_minted=profile.total_nfts_minted + 1), session)
                if not await UpdateData.increment_total_victories(session):
                    raise RuntimeError("Failed to update victory collection")
            await context.flush()
        logging.info(f"Victory recorded - Rarity: {rarity.label}")
        return reward

    # ==== Execution context =======================================================

    async def delegate_game(self, authority: str) -> GameSession:
        async with self.Session() as session:
            async with session.begin():
                context = await ExecutionContext.open(authority, session, self.redis)
                return await context.delegate()

    async def commit_game(self, authority: str) -> GameSession:
        async with self.Session() as session:
            async with session.begin():
                context = await ExecutionContext.open(authority, session, self.redis)
                return await context.commit()

    async def undelegate_game(self, authority: str) -> GameSession:
        async with self.Session() as session:
            async with session.begin():
                context = await ExecutionContext.open(authority, session, self.redis)
                game_session = await context.undelegate()
            await context.flush()
        return game_session

    # ==== Delegated credentials ===================================================

    async def create_session_token(self, authority: str, ttl_seconds: int | None = None) -> Tuple[str, DelegatedCredential]:
        """Issue a bearer token that may act on the authority's session until it expires.

        Only the SHA-256 digest of the token is stored.
        """
        token = secrets.token_urlsafe(32)
        token_hash = hash_session_token(token)
        token_id = uuid7()
        valid_until = self.clock() + (ttl_seconds or session_token_ttl_seconds)
        async with self.Session() as session:
            async with session.begin():
                success = await CreateData.create_session_token(
                    SessionTokenSchema(
                        token_id=token_id,
                        token_hash=token_hash,
                        authority=authority,
                        valid_until=valid_until,
                    ),
                    session,
                )
                if not success:
                    raise RuntimeError("Failed to create session token")
        logging.info(f"Session token issued for {authority}, valid until {valid_until}")
        return token, DelegatedCredential(signer=str(token_id), authority=authority, valid_until=valid_until)

    async def resolve_session_token(self, token: str) -> Tuple[str, DelegatedCredential]:
        """Return (caller, credential) for a presented bearer token.

        The bearer acts under the token id, which is also the credential signer.
        The credential then limits the bearer to its authority and validity window.

        Raises:
            InvalidAuth: the token is unknown.
        """
        token_hash = hash_session_token(token)
        async with self.Session() as session:
            token_data = await ReadData.read_session_token(token_hash, session)
        if token_data is None:
            raise InvalidAuth()
        credential = DelegatedCredential(
            signer=str(token_data.token_id),
            authority=token_data.authority,
            valid_until=token_data.valid_until,
        )
        return str(token_data.token_id), credential

    async def delete_expired_session_tokens(self) -> int:
        async with self.Session() as session:
            async with session.begin():
                deleted = await DeleteData.delete_expired_session_tokens(self.clock(), session)
        logging.info(f"Deleted {deleted} expired session tokens")
        return deleted

    # ==== Helpers =================================================================

    async def _read_profile(self, authority: str, session: AsyncSession) -> PlayerProfile:
        profile_data = await ReadData.read_player_profile(authority, session)
        if profile_data is None:
            raise PlayerNotFound()
        return data_converter.convert_profileschema_to_profile(profile_data)

    async def _write_profile(self, profile: PlayerProfile, session: AsyncSession) -> None:
        success = await UpdateData.update_player_profile(
            data_converter.convert_profile_to_profileschema(profile), session
        )
        if not success:
            raise RuntimeError("Failed to update player profile")
