"""Multi-player blackjack engine with pluggable decision providers."""

from arena.cards import Card, Deck, Rank, Suit
from arena.errors import EmptyDeckError, InvalidBetError, ProviderError
from arena.hand import Hand, Outcome, evaluate_outcome
from arena.player import Dealer, Player
from arena.rules import TableRules
from arena.usage import UsageTracker

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "EmptyDeckError",
    "InvalidBetError",
    "ProviderError",
    "Hand",
    "Outcome",
    "evaluate_outcome",
    "Dealer",
    "Player",
    "TableRules",
    "UsageTracker",
]
