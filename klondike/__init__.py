"""Klondike Solitaire rules engine."""

__all__ = [
    "cards",
    "piles",
    "state",
    "errors",
    "game",
    "serialize",
    "deck",
    "repository",
    "rules_schema",
    "service",
    "logging_utils",
    "autoplay",
]
