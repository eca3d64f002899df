"""Tests for candy_server.domain.unlocks and candy_server.domain.progression."""

import pytest

from candy_server.domain.progression import apply_result
from candy_server.domain.records import PlayerProfile, new_player_profile
from candy_server.domain.unlocks import UnlockBitmap


class TestUnlockBitmap:
    def test_initial_has_only_level_one(self):
        bitmap = UnlockBitmap.initial()
        assert bitmap.bits == 1
        assert bitmap.levels() == [1]

    def test_unlock_adds_bit(self):
        bitmap = UnlockBitmap.initial().unlock(3)
        assert bitmap.bits == 0b101
        assert bitmap.is_unlocked(3)
        assert not bitmap.is_unlocked(2)

    def test_unlock_is_idempotent(self):
        bitmap = UnlockBitmap.initial().unlock(2)
        assert bitmap.unlock(2) == bitmap

    @pytest.mark.parametrize("level", [0, 65, -3])
    def test_out_of_field_levels(self, level):
        assert not UnlockBitmap((1 << 64) - 1).is_unlocked(level)
        with pytest.raises(ValueError):
            UnlockBitmap.initial().unlock(level)


class TestApplyResult:
    def test_new_profile(self):
        profile = new_player_profile("alice", 1234)
        assert profile.unlocked_levels.is_unlocked(1)
        assert profile.highest_level == 1
        assert profile.created_at == 1234

    def test_loss_only_counts_game(self):
        profile = new_player_profile("alice", 0)
        updated = apply_result(profile, 1, 50, won=False)
        assert updated.total_games == 1
        assert updated.total_wins == 0
        assert updated.total_candies_collected == 0
        assert updated.unlocked_levels == profile.unlocked_levels
        assert updated.highest_level == profile.highest_level

    def test_win_unlocks_next_level(self):
        profile = new_player_profile("alice", 0)
        updated = apply_result(profile, 1, 90, won=True)
        assert updated.total_games == 1
        assert updated.total_wins == 1
        assert updated.total_candies_collected == 90
        assert updated.unlocked_levels.is_unlocked(2)
        assert updated.highest_level == 1

    def test_win_on_last_level_unlocks_nothing(self):
        profile = PlayerProfile(authority="bob", unlocked_levels=UnlockBitmap((1 << 10) - 1), highest_level=9)
        updated = apply_result(profile, 10, 600, won=True)
        assert updated.unlocked_levels.bits == (1 << 10) - 1
        assert updated.highest_level == 10

    def test_highest_level_never_decreases(self):
        profile = PlayerProfile(authority="bob", unlocked_levels=UnlockBitmap(0b11111), highest_level=4)
        updated = apply_result(profile, 2, 200, won=True)
        assert updated.highest_level == 4
        assert updated.unlocked_levels.bits == 0b11111

    def test_candies_accumulate(self):
        profile = new_player_profile("alice", 0)
        profile = apply_result(profile, 1, 90, won=True)
        profile = apply_result(profile, 2, 130, won=True)
        profile = apply_result(profile, 3, 10, won=False)
        assert profile.total_candies_collected == 220
        assert (profile.total_games, profile.total_wins) == (3, 2)
        assert profile.unlocked_levels.levels() == [1, 2, 3]

    def test_input_profile_unchanged(self):
        profile = new_player_profile("alice", 0)
        apply_result(profile, 1, 90, won=True)
        assert profile.total_games == 0
        assert profile.unlocked_levels.bits == 1
