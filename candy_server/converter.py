import json

from candy_server.domain.board import Board
from candy_server.domain.levels import get_level
from candy_server.domain.records import GameSession, PlayerProfile
from candy_server.domain.unlocks import UnlockBitmap
from candy_server.models.dc_models import (
    ExecutionContextName,
    GameSessionModel,
    PlayerProfileModel,
)
from candy_server.models.schema_models import GameSessionSchema, PlayerProfileSchema


class DataConverter:
    """This class is used to convert data between different formats."""

    def convert_profileschema_to_profile(self, profile_data: PlayerProfileSchema) -> PlayerProfile:
        return PlayerProfile(
            authority=profile_data.authority,
            total_games=profile_data.total_games,
            total_wins=profile_data.total_wins,
            highest_level=profile_data.highest_level,
            unlocked_levels=UnlockBitmap(profile_data.unlocked_levels),
            total_candies_collected=profile_data.total_candies_collected,
            total_nfts_minted=profile_data.total_nfts_minted,
            created_at=profile_data.created_at,
        )

    def convert_profile_to_profileschema(self, profile: PlayerProfile) -> PlayerProfileSchema:
        return PlayerProfileSchema(
            authority=profile.authority,
            total_games=profile.total_games,
            total_wins=profile.total_wins,
            highest_level=profile.highest_level,
            unlocked_levels=profile.unlocked_levels.bits,
            total_candies_collected=profile.total_candies_collected,
            total_nfts_minted=profile.total_nfts_minted,
            created_at=profile.created_at,
        )

    def convert_sessionschema_to_session(self, session_data: GameSessionSchema) -> GameSession:
        """Rebuild the domain session; the board region comes from the level catalog."""
        level_config = get_level(session_data.level)
        return GameSession(
            player=session_data.player,
            level=session_data.level,
            board=Board.from_grid(level_config.rows, level_config.cols, session_data.grid),
            score=session_data.score,
            moves_made=session_data.moves_made,
            start_time=session_data.start_time,
            is_active=session_data.is_active,
            redeemed=session_data.redeemed,
        )

    def convert_session_to_sessionschema(self, session: GameSession, delegated: bool = False) -> GameSessionSchema:
        return GameSessionSchema(
            player=session.player,
            level=session.level,
            grid=session.board.to_grid(),
            score=session.score,
            moves_made=session.moves_made,
            start_time=session.start_time,
            is_active=session.is_active,
            redeemed=session.redeemed,
            delegated=delegated,
        )

    def convert_session_to_payload(self, session: GameSession) -> str:
        """Serialize a session for the Redis execution context."""
        return self.convert_session_to_sessionschema(session, delegated=True).model_dump_json()

    def convert_payload_to_session(self, payload: str) -> GameSession:
        return self.convert_sessionschema_to_session(GameSessionSchema.model_validate(json.loads(payload)))

    def convert_profile_to_profilemodel(self, profile: PlayerProfile) -> PlayerProfileModel:
        """Convert the PlayerProfile to the PlayerProfileModel to send client"""
        return PlayerProfileModel(
            authority=profile.authority,
            total_games=profile.total_games,
            total_wins=profile.total_wins,
            highest_level=profile.highest_level,
            unlocked_levels=profile.unlocked_levels.levels(),
            total_candies_collected=profile.total_candies_collected,
            total_nfts_minted=profile.total_nfts_minted,
            created_at=profile.created_at,
        )

    def convert_session_to_sessionmodel(
        self, session: GameSession, context: ExecutionContextName | None = None
    ) -> GameSessionModel:
        """Convert the GameSession to the GameSessionModel to send client

        Only the active rows x cols region of the board is sent.
        """
        board = session.board
        return GameSessionModel(
            player=session.player,
            level=session.level,
            rows=board.rows,
            cols=board.cols,
            grid=board.active_region().tolist(),
            score=session.score,
            moves_made=session.moves_made,
            start_time=session.start_time,
            is_active=session.is_active,
            redeemed=session.redeemed,
            context=context,
        )
