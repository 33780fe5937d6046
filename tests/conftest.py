"""Pytest fixtures for blackjack arena tests."""

import pytest
from random import Random

from arena.cards import Card, Deck
from arena.context import ActionContext, BetContext
from arena.game import EventEmitter
from arena.hand import Hand
from arena.player import Dealer, Player
from arena.strategy import (
    Action,
    ActionDecision,
    BetDecision,
    DecisionProvider,
    RuleBasedStrategy,
)


class ScriptedStrategy(DecisionProvider):
    """Replays fixed bets and actions, recording every context it sees."""

    name = "scripted"

    def __init__(self, bets=(), actions=()):
        self.bets = list(bets)
        self.actions = list(actions)
        self.bet_contexts: list[BetContext] = []
        self.action_contexts: list[ActionContext] = []

    def decide_bet(self, context):
        self.bet_contexts.append(context)
        amount = self.bets.pop(0) if self.bets else context.min_bet
        return BetDecision(amount, "scripted bet")

    def decide_action(self, context):
        self.action_contexts.append(context)
        action = self.actions.pop(0) if self.actions else Action.STAND
        return ActionDecision(action, "scripted action")


class RaisingStrategy(DecisionProvider):
    """A provider whose every call blows up."""

    name = "raising"

    def decide_bet(self, context):
        raise RuntimeError("bet backend down")

    def decide_action(self, context):
        raise RuntimeError("action backend down")


def _cards(text: str) -> list[Card]:
    return [Card.from_string(token) for token in text.split()]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def make_cards():
    """Parse 'AS KH 10D' into a list of cards."""
    return _cards


@pytest.fixture
def make_hand():
    """Build a hand from card notation."""

    def _make(text: str) -> Hand:
        return Hand(cards=_cards(text))

    return _make


@pytest.fixture
def stacked_deck():
    """Build a deck that deals the given cards in order."""

    def _make(text: str) -> Deck:
        return Deck.stacked(_cards(text))

    return _make


@pytest.fixture
def scripted():
    """Factory for scripted decision providers."""
    return ScriptedStrategy


@pytest.fixture
def raising_strategy():
    """A provider that raises on every call."""
    return RaisingStrategy()


@pytest.fixture
def rule_strategy():
    """The rule-based basic strategy provider."""
    return RuleBasedStrategy()


@pytest.fixture
def events():
    """A fresh event emitter."""
    return EventEmitter()


@pytest.fixture
def dealer():
    """A dealer with an empty hand."""
    return Dealer()


@pytest.fixture
def player(rng):
    """A fallback-policy player with 100 chips."""
    return Player("Alice", balance=100, rng=rng)


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return Hand(cards=_cards("AS KH"))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return Hand(cards=_cards("AS 6H"))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return Hand(cards=_cards("10S 6H"))


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return Hand(cards=_cards("10S 6H KC"))
