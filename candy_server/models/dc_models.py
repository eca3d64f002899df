from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from candy_server.domain.session_rules import MAX_SCORE


class ExecutionContextName(str, Enum):
    local = "local"  # record lives in the durable database
    delegated = "delegated"  # record lives in the fast Redis context


class LevelModel(BaseModel):
    id: int
    rows: int
    cols: int
    target_score: int
    time_limit: int

    class Config:
        from_attributes = True


class PlayerProfileModel(BaseModel):
    authority: str
    total_games: int
    total_wins: int
    highest_level: int
    unlocked_levels: List[int]
    total_candies_collected: int
    total_nfts_minted: int
    created_at: int


class GameSessionModel(BaseModel):
    player: str
    level: int
    rows: int
    cols: int
    grid: List[List[int]]  # active rows x cols region only
    score: int
    moves_made: int
    start_time: int
    is_active: bool
    redeemed: bool
    context: Optional[ExecutionContextName] = None


class StartGameModel(BaseModel):
    level: int = Field(ge=1)


class MoveModel(BaseModel):
    player: str
    from_row: int
    from_col: int
    to_row: int
    to_col: int


class EndGameModel(BaseModel):
    final_score: int = Field(ge=0, le=MAX_SCORE)


class EndGameResultModel(BaseModel):
    won: bool
    session: GameSessionModel
    profile: PlayerProfileModel


class VictoryRewardModel(BaseModel):
    mint_id: UUID
    player: str
    level: int
    rarity: str
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int


class SessionTokenRequestModel(BaseModel):
    ttl_seconds: Optional[int] = Field(default=None, gt=0)


class SessionTokenModel(BaseModel):
    token: str
    authority: str
    valid_until: int


class VictoryCollectionModel(BaseModel):
    authority: str
    total_victories: int
