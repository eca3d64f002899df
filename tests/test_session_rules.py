"""Tests for candy_server.domain.session_rules – the Idle/Active/Ended lifecycle."""

from dataclasses import replace

import pytest

from candy_server.domain.board import generate_grid
from candy_server.domain.errors import (
    GameNotActive,
    InvalidLevel,
    InvalidPosition,
    InvalidScore,
    LevelLocked,
    NotAdjacent,
)
from candy_server.domain.records import PlayerProfile, new_player_profile
from candy_server.domain.session_rules import MAX_SCORE, end_game, make_move, start_game
from candy_server.domain.unlocks import UnlockBitmap

NOW = 1_700_000_000


@pytest.fixture()
def profile() -> PlayerProfile:
    return new_player_profile("alice", NOW)


@pytest.fixture()
def all_unlocked() -> PlayerProfile:
    return PlayerProfile(authority="alice", unlocked_levels=UnlockBitmap((1 << 10) - 1))


class TestStartGame:
    @pytest.mark.parametrize("level", range(2, 11))
    def test_locked_levels(self, profile, level):
        with pytest.raises(LevelLocked):
            start_game("alice", level, profile, NOW)

    @pytest.mark.parametrize("level", range(1, 11))
    def test_unlocked_levels(self, all_unlocked, level):
        session = start_game("alice", level, all_unlocked, NOW)
        assert session.is_active
        assert session.level == level
        assert session.board.is_well_formed()

    @pytest.mark.parametrize("level", [0, 11])
    def test_invalid_level(self, all_unlocked, level):
        with pytest.raises(InvalidLevel):
            start_game("alice", level, all_unlocked, NOW)

    def test_initial_fields(self, profile):
        session = start_game("alice", 1, profile, NOW)
        assert session.player == "alice"
        assert session.score == 0
        assert session.moves_made == 0
        assert session.start_time == NOW
        assert not session.redeemed
        assert session.board == generate_grid(NOW, 6, 6)


class TestMakeMove:
    def test_swaps_and_counts(self, profile):
        session = start_game("alice", 1, profile, NOW)
        a, b = session.board.at(0, 0), session.board.at(0, 1)
        moved = make_move(session, (0, 0), (0, 1))
        assert (moved.board.at(0, 0), moved.board.at(0, 1)) == (b, a)
        assert moved.moves_made == 1
        assert session.moves_made == 0

    def test_involution(self, profile):
        session = start_game("alice", 1, profile, NOW)
        moved = make_move(make_move(session, (2, 3), (3, 3)), (3, 3), (2, 3))
        assert moved.board == session.board
        assert moved.moves_made == 2

    def test_not_active(self, profile):
        session = replace(start_game("alice", 1, profile, NOW), is_active=False)
        with pytest.raises(GameNotActive):
            make_move(session, (0, 0), (0, 1))

    def test_not_adjacent(self, profile):
        session = start_game("alice", 1, profile, NOW)
        with pytest.raises(NotAdjacent):
            make_move(session, (0, 0), (2, 2))

    def test_invalid_position(self, profile):
        session = start_game("alice", 1, profile, NOW)
        with pytest.raises(InvalidPosition):
            make_move(session, (5, 5), (5, 6))


class TestEndGame:
    def test_win(self, profile):
        session = start_game("alice", 1, profile, NOW)
        result = end_game(session, 90, profile)
        assert result.won
        assert not result.session.is_active
        assert result.session.score == 90
        assert result.profile.total_wins == 1
        assert result.profile.total_games == 1
        assert result.profile.unlocked_levels.is_unlocked(2)
        assert result.profile.highest_level == 1

    def test_exact_target_wins(self, profile):
        result = end_game(start_game("alice", 1, profile, NOW), 80, profile)
        assert result.won

    def test_loss(self, profile):
        result = end_game(start_game("alice", 1, profile, NOW), 79, profile)
        assert not result.won
        assert result.session.score == 79
        assert result.profile.total_games == 1
        assert result.profile.total_wins == 0
        assert result.profile.total_candies_collected == 0
        assert not result.profile.unlocked_levels.is_unlocked(2)

    def test_cannot_end_twice(self, profile):
        result = end_game(start_game("alice", 1, profile, NOW), 90, profile)
        with pytest.raises(GameNotActive):
            end_game(result.session, 90, result.profile)

    def test_no_moves_after_end(self, profile):
        result = end_game(start_game("alice", 1, profile, NOW), 90, profile)
        with pytest.raises(GameNotActive):
            make_move(result.session, (0, 0), (0, 1))

    @pytest.mark.parametrize("score", [-1, MAX_SCORE + 1])
    def test_score_out_of_range(self, profile, score):
        with pytest.raises(InvalidScore):
            end_game(start_game("alice", 1, profile, NOW), score, profile)

    def test_win_would_overflow_candy_total(self, profile):
        rich = replace(profile, total_candies_collected=MAX_SCORE - 100)
        session = start_game("alice", 1, rich, NOW)
        assert end_game(session, 100, rich).profile.total_candies_collected == MAX_SCORE
        with pytest.raises(InvalidScore):
            end_game(session, 101, rich)
        assert not end_game(session, 79, rich).won


class TestScenario:
    def test_level_one_walkthrough(self, profile):
        session = start_game("alice", 1, profile, NOW)
        assert session.is_active

        session = make_move(session, (0, 0), (0, 1))
        with pytest.raises(NotAdjacent):
            make_move(session, (0, 0), (2, 2))

        result = end_game(session, 90, profile)
        assert result.won
        assert result.profile.unlocked_levels.bits == 0b11
        assert result.profile.total_wins == 1
        assert result.profile.total_games == 1
        assert result.profile.highest_level == 1

        # a new game replaces the ended session
        restarted = start_game("alice", 2, result.profile, NOW + 60)
        assert restarted.is_active and restarted.level == 2 and restarted.moves_made == 0
