from datetime import datetime

from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, BigInteger, Boolean, DateTime, Integer, String, Uuid
from uuid6 import uuid7


class Base(DeclarativeBase):
    pass


class UserTable(Base):
    __tablename__ = "users"
    username = Column(String, primary_key=True, index=True)
    hash_password = Column(String)
    salt = Column(String)


class PlayerProfileTable(Base):
    __tablename__ = "player_profile"
    authority = Column(String, primary_key=True, index=True)
    total_games = Column(BigInteger, default=0)
    total_wins = Column(BigInteger, default=0)
    highest_level = Column(Integer, default=1)
    unlocked_levels = Column(BigInteger, default=1)  # bit (L-1) = level L
    total_candies_collected = Column(BigInteger, default=0)
    total_nfts_minted = Column(BigInteger, default=0)
    created_at = Column(BigInteger)


class GameSessionTable(Base):
    __tablename__ = "game_session"
    player = Column(String, primary_key=True, index=True)
    level = Column(Integer)
    grid = Column(JSON)  # 10x10 nested list, only rows x cols is meaningful
    score = Column(BigInteger, default=0)
    moves_made = Column(Integer, default=0)
    start_time = Column(BigInteger)
    is_active = Column(Boolean, default=True)
    redeemed = Column(Boolean, default=False)
    delegated = Column(Boolean, default=False)


class SessionTokenTable(Base):
    __tablename__ = "session_token"
    token_id = Column(Uuid, primary_key=True, default=uuid7)
    token_hash = Column(String, index=True, unique=True)
    authority = Column(String, index=True)
    valid_until = Column(BigInteger)


class VictoryCollectionTable(Base):
    __tablename__ = "victory_collection"
    collection_id = Column(Integer, primary_key=True, default=1)
    authority = Column(String)
    total_victories = Column(BigInteger, default=0)


class VictoryRewardTable(Base):
    __tablename__ = "victory_reward"
    mint_id = Column(Uuid, primary_key=True, default=uuid7)
    player = Column(String, index=True)
    level = Column(Integer)
    rarity = Column(String)
    name = Column(String)
    symbol = Column(String)
    uri = Column(String)
    seller_fee_basis_points = Column(Integer, default=0)
    score = Column(BigInteger)
    minted_at = Column(DateTime, default=datetime.now)
