import logging

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from candy_server.load_secrets import database_url
from candy_server.models.schemas import Base

logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def build_engine(url: str) -> AsyncEngine:
    if url.startswith("postgresql"):
        return create_async_engine(url, pool_size=20, max_overflow=20)
    return create_async_engine(url, echo=False)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        autocommit=False,
        class_=AsyncSession,
        autoflush=True,
        bind=bind,
        expire_on_commit=False,
    )


async def create_tables(bind: AsyncEngine) -> None:
    """Create tables if they do not exist yet."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


engine = build_engine(database_url)

# Centralized session factory to avoid creating it in router modules.
Session = build_session_factory(engine)
