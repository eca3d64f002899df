"""Shared fixtures: temporary SQLite database, in-memory Redis double, fixed clock."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Optional

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from candy_server.db import build_session_factory, create_tables
from candy_server.services.game_service import GameService


class InMemoryRedis:
    """Just the async string commands the execution context uses."""

    def __init__(self) -> None:
        self.data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.data.pop(key, None) is not None)


class FixedClock:
    def __init__(self, now: int = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture()
def engine(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}", poolclass=NullPool)
    asyncio.run(create_tables(engine))
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture()
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture()
def redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture()
def service(session_factory, redis, clock) -> GameService:
    return GameService(session_factory, redis, clock=clock)
