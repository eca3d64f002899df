"""Tests for candy_server.domain.auth_gate – direct and delegated authorization."""

import pytest

from candy_server.domain.auth_gate import DelegatedCredential, DirectIdentity, require_authorized
from candy_server.domain.errors import AuthError, InvalidAuth


class TestDirectIdentity:
    def test_player_itself(self):
        assert DirectIdentity().authorize("alice", "alice")

    def test_someone_else(self):
        assert not DirectIdentity().authorize("mallory", "alice")


class TestDelegatedCredential:
    credential = DelegatedCredential(signer="key-1", authority="alice", valid_until=2000)

    def test_valid_signer_within_window(self):
        assert self.credential.authorize("key-1", "alice", now=1999)

    def test_expired(self):
        assert not self.credential.authorize("key-1", "alice", now=2000)

    def test_no_time_given(self):
        assert not self.credential.authorize("key-1", "alice")

    def test_wrong_signer(self):
        assert not self.credential.authorize("key-2", "alice", now=1000)

    def test_bound_to_other_authority(self):
        assert not self.credential.authorize("key-1", "bob", now=1000)


class TestRequireAuthorized:
    def test_passes(self):
        require_authorized(DirectIdentity(), "alice", "alice")

    def test_raises_invalid_auth(self):
        with pytest.raises(InvalidAuth) as excinfo:
            require_authorized(DirectIdentity(), "mallory", "alice")
        assert isinstance(excinfo.value, AuthError)
        assert excinfo.value.message == "Invalid authentication"
