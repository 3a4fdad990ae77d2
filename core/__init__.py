"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, EmptyDeckError, Rank, Suit
from core.hand import Hand, score_hand

__all__ = [
    "Card",
    "Deck",
    "EmptyDeckError",
    "Rank",
    "Suit",
    "Hand",
    "score_hand",
]
