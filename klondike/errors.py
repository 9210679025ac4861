"""Exception hierarchy raised by the Klondike engine and its collaborators."""

from __future__ import annotations


class KlondikeError(RuntimeError):
    """Base class for every rule or lookup failure."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class GameNotFound(KlondikeError):
    """Raised when a game id is unknown to the repository."""


class CorruptGameState(KlondikeError):
    """Raised when a stored payload cannot be turned back into a game."""


class InvalidDeck(KlondikeError):
    """Raised when a deal is attempted with anything but 52 cards."""


class InvalidState(KlondikeError):
    """Raised when a game that is no longer being played is mutated."""


class PileNotFound(KlondikeError):
    """Raised when a pile id does not resolve."""


class EmptySource(KlondikeError):
    """Raised when moving from a pile that holds no cards."""


class EmptyStock(KlondikeError):
    """Raised when drawing with an empty stock and nothing to recycle."""


class IllegalSource(KlondikeError):
    """Raised when cards are moved directly out of the stock."""


class InsufficientCards(KlondikeError):
    """Raised when more cards are requested than a pile holds."""


class InvalidCardCount(KlondikeError):
    """Raised when a move or draw asks for fewer than one card."""


class InvalidSequence(KlondikeError):
    """Raised when a multi-card move breaks the tableau stacking rule."""


class IllegalDestination(KlondikeError):
    """Raised when the destination pile rejects the moving card."""


class InvalidOperation(KlondikeError):
    """Raised when the stock is recycled while not eligible."""
