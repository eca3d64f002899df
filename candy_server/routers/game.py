import logging
from typing import List, Tuple

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasicCredentials

from candy_server.authentication.basic_authentication import (
    BasicAuthentication,
    optional_security,
    security,
)
from candy_server.converter import DataConverter
from candy_server.db import Session
from candy_server.domain.auth_gate import AuthGate, DirectIdentity
from candy_server.domain.errors import (
    AuthError,
    CandyCrushError,
    EconomyError,
    ProgressionError,
    StateError,
    ValidationError,
)
from candy_server.models.dc_models import (
    EndGameModel,
    EndGameResultModel,
    ExecutionContextName,
    GameSessionModel,
    LevelModel,
    MoveModel,
    PlayerProfileModel,
    SessionTokenModel,
    SessionTokenRequestModel,
    StartGameModel,
    VictoryCollectionModel,
    VictoryRewardModel,
)
from candy_server.models.schema_models import UserSchema
from candy_server.redis_client import redis
from candy_server.services.game_service import GameService

game_router = APIRouter()
data_converter = DataConverter()

game_service = GameService(Session, redis)
basic_auth = BasicAuthentication(Session)

ERROR_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthError, status.HTTP_401_UNAUTHORIZED),
    (ProgressionError, status.HTTP_403_FORBIDDEN),
    (StateError, status.HTTP_409_CONFLICT),
    (EconomyError, status.HTTP_422_UNPROCESSABLE_CONTENT),
)


def error_status(error: CandyCrushError) -> int:
    for category, status_code in ERROR_STATUS:
        if isinstance(error, category):
            return status_code
    return status.HTTP_400_BAD_REQUEST


async def candy_crush_error_handler(request: Request, error: CandyCrushError) -> JSONResponse:
    """Send typed game errors to the client as {"detail": {"error", "message"}}."""
    status_code = error_status(error)
    logging.info(f"{request.url.path} rejected: {type(error).__name__} ({status_code})")
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": type(error).__name__, "message": error.message}},
    )


def get_game_service() -> GameService:
    return game_service


def get_basic_auth() -> BasicAuthentication:
    return basic_auth


async def current_user(
    credentials: HTTPBasicCredentials = Depends(security),
    auth: BasicAuthentication = Depends(get_basic_auth),
) -> UserSchema:
    return await auth.verify(credentials)


async def resolve_caller(
    credentials: HTTPBasicCredentials | None = Depends(optional_security),
    x_session_token: str | None = Header(default=None),
    auth: BasicAuthentication = Depends(get_basic_auth),
    service: GameService = Depends(get_game_service),
) -> Tuple[str, AuthGate]:
    """Identify the caller either by a delegated session token or by Basic credentials."""
    if x_session_token is not None:
        return await service.resolve_session_token(x_session_token)
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )
    user_data = await auth.verify(credentials)
    return user_data.username, DirectIdentity()


class PlayerServer:
    @staticmethod
    @game_router.post("/initialize-player", response_model=PlayerProfileModel)
    async def initialize_player(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> PlayerProfileModel:
        profile = await service.initialize_player(user_data.username)
        return data_converter.convert_profile_to_profilemodel(profile)

    @staticmethod
    @game_router.get("/player-profile", response_model=PlayerProfileModel)
    async def get_player_profile(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> PlayerProfileModel:
        profile = await service.get_player_profile(user_data.username)
        return data_converter.convert_profile_to_profilemodel(profile)

    @staticmethod
    @game_router.get("/levels", response_model=List[LevelModel])
    async def list_levels(service: GameService = Depends(get_game_service)) -> List[LevelModel]:
        return [LevelModel.model_validate(level) for level in service.list_levels()]

    @staticmethod
    @game_router.post("/session-token", response_model=SessionTokenModel)
    async def create_session_token(
        request_data: SessionTokenRequestModel,
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> SessionTokenModel:
        """Issue a token that lets another signer make moves on the user's session"""
        token, credential = await service.create_session_token(user_data.username, request_data.ttl_seconds)
        return SessionTokenModel(token=token, authority=credential.authority, valid_until=credential.valid_until)


class GameServer:
    @staticmethod
    @game_router.post("/start-game", response_model=GameSessionModel)
    async def start_game(
        request_data: StartGameModel,
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> GameSessionModel:
        game_session = await service.start_game(user_data.username, request_data.level)
        return data_converter.convert_session_to_sessionmodel(game_session)

    @staticmethod
    @game_router.get("/game-session", response_model=GameSessionModel)
    async def get_game_session(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> GameSessionModel:
        game_session, context = await service.get_game_session(user_data.username)
        return data_converter.convert_session_to_sessionmodel(game_session, context)

    @staticmethod
    @game_router.post("/make-move", response_model=GameSessionModel)
    async def make_move(
        move: MoveModel,
        caller: Tuple[str, AuthGate] = Depends(resolve_caller),
        service: GameService = Depends(get_game_service),
    ) -> GameSessionModel:
        """Swap two adjacent candies in the player's session

        Args:
            move (MoveModel): player whose session is played and the two cells
            caller (Tuple[str, AuthGate]): the player itself or a session token bound to it
        """
        caller_id, gate = caller
        game_session = await service.make_move(
            caller_id,
            gate,
            move.player,
            (move.from_row, move.from_col),
            (move.to_row, move.to_col),
        )
        return data_converter.convert_session_to_sessionmodel(game_session)

    @staticmethod
    @game_router.post("/end-game", response_model=EndGameResultModel)
    async def end_game(
        request_data: EndGameModel,
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> EndGameResultModel:
        result = await service.end_game(user_data.username, request_data.final_score)
        return EndGameResultModel(
            won=result.won,
            session=data_converter.convert_session_to_sessionmodel(result.session),
            profile=data_converter.convert_profile_to_profilemodel(result.profile),
        )


class RewardServer:
    @staticmethod
    @game_router.post("/initialize-collection", response_model=VictoryCollectionModel)
    async def initialize_collection(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> VictoryCollectionModel:
        collection = await service.initialize_collection(user_data.username)
        return VictoryCollectionModel(authority=collection.authority, total_victories=collection.total_victories)

    @staticmethod
    @game_router.post("/mint-victory", response_model=VictoryRewardModel)
    async def mint_victory(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> VictoryRewardModel:
        reward = await service.mint_victory(user_data.username)
        return VictoryRewardModel.model_validate(reward.model_dump())

    @staticmethod
    @game_router.get("/victory-rewards", response_model=List[VictoryRewardModel])
    async def list_victory_rewards(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> List[VictoryRewardModel]:
        rewards = await service.list_victory_rewards(user_data.username)
        return [VictoryRewardModel.model_validate(reward.model_dump()) for reward in rewards]


class ExecutionContextServer:
    @staticmethod
    @game_router.post("/delegate-game", response_model=GameSessionModel)
    async def delegate_game(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> GameSessionModel:
        game_session = await service.delegate_game(user_data.username)
        return data_converter.convert_session_to_sessionmodel(game_session, ExecutionContextName.delegated)

    @staticmethod
    @game_router.post("/commit-game", response_model=GameSessionModel)
    async def commit_game(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> GameSessionModel:
        game_session = await service.commit_game(user_data.username)
        return data_converter.convert_session_to_sessionmodel(game_session, ExecutionContextName.delegated)

    @staticmethod
    @game_router.post("/undelegate-game", response_model=GameSessionModel)
    async def undelegate_game(
        user_data: UserSchema = Depends(current_user),
        service: GameService = Depends(get_game_service),
    ) -> GameSessionModel:
        game_session = await service.undelegate_game(user_data.username)
        return data_converter.convert_session_to_sessionmodel(game_session, ExecutionContextName.local)
