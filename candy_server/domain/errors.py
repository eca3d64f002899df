"""Typed errors raised by the game rules.

Every transition validates all of its preconditions before touching any
record, so catching one of these means nothing was changed.
"""


class CandyCrushError(Exception):
    message = "Candy crush error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


# ==== Categories ==============================================================


class ValidationError(CandyCrushError):
    pass


class StateError(CandyCrushError):
    pass


class AuthError(CandyCrushError):
    pass


class ProgressionError(CandyCrushError):
    pass


class EconomyError(CandyCrushError):
    pass


# ==== Validation ==============================================================


class InvalidLevel(ValidationError):
    message = "Invalid level number"


class InvalidPosition(ValidationError):
    message = "Invalid grid position"


class NotAdjacent(ValidationError):
    message = "Candies are not adjacent"


class InvalidScore(ValidationError):
    message = "Score out of range"


# ==== State ===================================================================


class GameNotActive(StateError):
    message = "Game session is not active"


class GameStillActive(StateError):
    message = "Game is still active"


class SessionNotFound(StateError):
    message = "Game session not found"


class PlayerNotFound(StateError):
    message = "Player profile not found"


class PlayerAlreadyExists(StateError):
    message = "Player profile already exists"


class CollectionNotFound(StateError):
    message = "Victory collection not initialized"


class CollectionAlreadyExists(StateError):
    message = "Victory collection already initialized"


class SessionAlreadyDelegated(StateError):
    message = "Game session is already delegated"


class SessionNotDelegated(StateError):
    message = "Game session is not delegated"


# ==== Auth / progression / economy ============================================


class InvalidAuth(AuthError):
    message = "Invalid authentication"


class LevelLocked(ProgressionError):
    message = "Level is locked"


class InsufficientScore(EconomyError):
    message = "Insufficient score to mint NFT"


class RewardAlreadyClaimed(EconomyError):
    message = "Victory reward already claimed for this session"
