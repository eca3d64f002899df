from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel


class UserSchema(BaseModel):
    """Stored credentials for HTTP Basic authentication."""
    username: str
    hash_password: str
    salt: str

    class Config:
        from_attributes = True


class PlayerProfileSchema(BaseModel):
    authority: str
    total_games: int
    total_wins: int
    highest_level: int
    unlocked_levels: int
    total_candies_collected: int
    total_nfts_minted: int
    created_at: int

    class Config:
        from_attributes = True


class GameSessionSchema(BaseModel):
    player: str
    level: int
    grid: List[List[int]]
    score: int
    moves_made: int
    start_time: int
    is_active: bool
    redeemed: bool = False
    delegated: bool = False

    class Config:
        from_attributes = True


class SessionTokenSchema(BaseModel):
    token_id: UUID
    token_hash: str
    authority: str
    valid_until: int

    class Config:
        from_attributes = True


class VictoryCollectionSchema(BaseModel):
    collection_id: int
    authority: str
    total_victories: int

    class Config:
        from_attributes = True


class VictoryRewardSchema(BaseModel):
    mint_id: UUID
    player: str
    level: int
    rarity: str
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int
    score: int
    minted_at: datetime

    class Config:
        from_attributes = True
