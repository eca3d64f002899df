"""Where a player's game session record currently lives.

Local: the durable database holds the record.
Delegated: a copy lives in Redis for fast move execution. ``commit`` publishes
the Redis copy back to the database, ``undelegate`` commits and withdraws it.

Game rules never look at the state: they call ``load_session`` and
``save_session`` and the context routes to the right store.

Redis writes and deletes made while delegated are held back until ``flush``,
which the service calls once the database transaction has committed. A
rolled back transaction therefore leaves the Redis copy untouched.
"""

import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from candy_server.converter import DataConverter
from candy_server.crud import ReadData, UpdateData
from candy_server.domain.errors import SessionAlreadyDelegated, SessionNotDelegated, SessionNotFound
from candy_server.domain.records import GameSession
from candy_server.models.dc_models import ExecutionContextName

data_converter = DataConverter()


class SessionRecordStore(ABC):
    @abstractmethod
    async def load(self, player: str) -> GameSession | None:
        ...

    @abstractmethod
    async def save(self, game_session: GameSession) -> None:
        ...


class DatabaseSessionStore(SessionRecordStore):
    """Session records in the database, inside the caller's transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def load(self, player: str) -> GameSession | None:
        session_data = await ReadData.read_game_session(player, self.session)
        if session_data is None:
            return None
        return data_converter.convert_sessionschema_to_session(session_data)

    async def save(self, game_session: GameSession, delegated: bool = False) -> None:
        session_data = data_converter.convert_session_to_sessionschema(game_session, delegated=delegated)
        if not await UpdateData.upsert_game_session(session_data, self.session):
            raise RuntimeError("Failed to save game session")

    async def is_delegated(self, player: str) -> bool:
        session_data = await ReadData.read_game_session(player, self.session)
        return session_data is not None and session_data.delegated

    async def set_delegated(self, player: str, delegated: bool) -> None:
        if not await UpdateData.update_session_delegation(player, delegated, self.session):
            raise RuntimeError("Failed to update session delegation")


class RedisSessionStore(SessionRecordStore):
    """Session records in Redis under ``game_session:{player}``."""

    def __init__(self, redis: Redis):
        self.redis = redis

    @staticmethod
    def key(player: str) -> str:
        return f"game_session:{player}"

    async def load(self, player: str) -> GameSession | None:
        payload = await self.redis.get(self.key(player))
        if payload is None:
            return None
        return data_converter.convert_payload_to_session(payload)

    async def save(self, game_session: GameSession) -> None:
        await self.redis.set(self.key(game_session.player), data_converter.convert_session_to_payload(game_session))

    async def delete(self, player: str) -> None:
        await self.redis.delete(self.key(player))


class ExecutionContext:
    def __init__(
        self,
        player: str,
        state: ExecutionContextName,
        database_store: DatabaseSessionStore,
        redis_store: RedisSessionStore,
    ):
        self.player = player
        self.state = state
        self.database_store = database_store
        self.redis_store = redis_store
        self.pending: List[Callable[[], Awaitable[None]]] = []

    @classmethod
    async def open(cls, player: str, session: AsyncSession, redis: Redis) -> "ExecutionContext":
        """Build the context of a player from the delegation flag stored with the record."""
        database_store = DatabaseSessionStore(session)
        delegated = await database_store.is_delegated(player)
        state = ExecutionContextName.delegated if delegated else ExecutionContextName.local
        return cls(player, state, database_store, RedisSessionStore(redis))

    @property
    def is_delegated(self) -> bool:
        return self.state == ExecutionContextName.delegated

    @property
    def store(self) -> SessionRecordStore:
        return self.redis_store if self.is_delegated else self.database_store

    async def load_session(self) -> GameSession | None:
        return await self.store.load(self.player)

    async def save_session(self, game_session: GameSession) -> None:
        if self.is_delegated:
            self.pending.append(lambda: self.redis_store.save(game_session))
        else:
            await self.database_store.save(game_session)

    async def flush(self) -> None:
        """Apply the Redis writes held back during the transaction."""
        pending, self.pending = self.pending, []
        for operation in pending:
            await operation()

    async def delegate(self) -> GameSession:
        """Copy the record into Redis and route further transitions there."""
        if self.is_delegated:
            raise SessionAlreadyDelegated()
        game_session = await self.database_store.load(self.player)
        if game_session is None:
            raise SessionNotFound()
        # a copy left by a rolled back delegate is overwritten by the next one
        await self.redis_store.save(game_session)
        await self.database_store.set_delegated(self.player, True)
        self.state = ExecutionContextName.delegated
        logging.info(f"Game session of {self.player} delegated")
        return game_session

    async def commit(self) -> GameSession:
        """Publish the Redis copy to the database; stays delegated."""
        if not self.is_delegated:
            raise SessionNotDelegated()
        game_session = await self.redis_store.load(self.player)
        if game_session is None:
            raise SessionNotFound()
        await self.database_store.save(game_session, delegated=True)
        logging.info(f"Game session of {self.player} committed")
        return game_session

    async def undelegate(self) -> GameSession:
        """Commit, then withdraw the Redis copy and return to the database."""
        game_session = await self.commit()
        await self.database_store.set_delegated(self.player, False)
        self.pending.append(lambda: self.redis_store.delete(self.player))
        self.state = ExecutionContextName.local
        logging.info(f"Game session of {self.player} undelegated")
        return game_session
