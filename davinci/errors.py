"""
Rule-violation errors for the Da Vinci Code engine.

Every rejected command raises a GameError subclass before touching any
state, so callers can show the message and keep playing.
"""

from enum import Enum


class ErrorKind(str, Enum):
    CANNOT_GUESS_SELF = 'CannotGuessSelf'
    CARD_ALREADY_REVEALED = 'CardAlreadyRevealed'
    MUST_DRAW_FIRST = 'MustDrawFirst'
    NO_CARDS_OF_COLOR = 'NoCardsOfColor'
    INVALID_PENALTY_SELECTION = 'InvalidPenaltySelection'
    DISTRIBUTION_ERROR = 'DistributionError'
    ILLEGAL_PHASE_TRANSITION = 'IllegalPhaseTransition'
    INVALID_TARGET = 'InvalidTarget'
    INVALID_GUESS_VALUE = 'InvalidGuessValue'


class GameError(Exception):
    """Base class for recoverable rule violations."""

    kind: ErrorKind = ErrorKind.ILLEGAL_PHASE_TRANSITION

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'error': self.kind.value, 'message': self.message}


class CannotGuessSelf(GameError):
    kind = ErrorKind.CANNOT_GUESS_SELF


class CardAlreadyRevealed(GameError):
    kind = ErrorKind.CARD_ALREADY_REVEALED


class MustDrawFirst(GameError):
    kind = ErrorKind.MUST_DRAW_FIRST


class NoCardsOfColor(GameError):
    kind = ErrorKind.NO_CARDS_OF_COLOR


class InvalidPenaltySelection(GameError):
    kind = ErrorKind.INVALID_PENALTY_SELECTION


class DistributionError(GameError):
    kind = ErrorKind.DISTRIBUTION_ERROR


class IllegalPhaseTransition(GameError):
    kind = ErrorKind.ILLEGAL_PHASE_TRANSITION


class InvalidTarget(GameError):
    kind = ErrorKind.INVALID_TARGET


class InvalidGuessValue(GameError):
    kind = ErrorKind.INVALID_GUESS_VALUE
