"""Authorization of the acting caller against a session's player.

A caller is accepted either as the player itself or through a delegated
credential bound to the player with its own validity window.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from candy_server.domain.errors import InvalidAuth


class AuthGate(ABC):
    @abstractmethod
    def authorize(self, caller: str, expected_authority: str, now: int | None = None) -> bool:
        ...


@dataclass(frozen=True)
class DirectIdentity(AuthGate):
    def authorize(self, caller: str, expected_authority: str, now: int | None = None) -> bool:
        return caller == expected_authority


@dataclass(frozen=True)
class DelegatedCredential(AuthGate):
    signer: str
    authority: str
    valid_until: int  # unix seconds

    def is_valid_at(self, now: int) -> bool:
        return now < self.valid_until

    def authorize(self, caller: str, expected_authority: str, now: int | None = None) -> bool:
        if now is None or not self.is_valid_at(now):
            return False
        return caller == self.signer and self.authority == expected_authority


def require_authorized(gate: AuthGate, caller: str, expected_authority: str, now: int | None = None) -> None:
    if not gate.authorize(caller, expected_authority, now):
        raise InvalidAuth()
