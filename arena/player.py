"""Seats at the table: betting players and the dealer."""

import logging
from dataclasses import dataclass, field
from random import Random

from arena.cards import Card
from arena.context import ActionContext, ActionRecord, BetContext
from arena.errors import InvalidBetError
from arena.hand import Hand, Outcome
from arena.strategy.base import (
    Action,
    ActionDecision,
    BetDecision,
    DecisionProvider,
    DecisionSource,
)

logger = logging.getLogger(__name__)

DEFAULT_BALANCE = 500


def settlement_credit(outcome: Outcome, wager: int) -> int:
    """
    Return the amount credited back to the balance for a settled wager.

    Blackjack pays 3:2 with integer truncation, so an odd wager loses the
    half unit (wager 5 credits 12, not 12.5).
    """
    if outcome == Outcome.WIN:
        return wager * 2
    if outcome == Outcome.BLACKJACK_WIN:
        return wager + (wager * 3) // 2
    if outcome == Outcome.PUSH:
        return wager
    return 0


@dataclass
class Dealer:
    """The house seat: a hand and a fixed drawing rule, no money."""

    name: str = "Dealer"
    hand: Hand = field(default_factory=Hand)

    def receive(self, card: Card) -> Card:
        """Add a dealt card to the hand."""
        return self.hand.add_card(card)

    def clear_for_new_round(self) -> None:
        """Empty the hand."""
        self.hand.clear()

    @property
    def up_card(self) -> Card:
        """The first card dealt, the only one exposed during player turns."""
        if not self.hand.cards:
            raise RuntimeError("Dealer has no up card before the deal")
        return self.hand.cards[0]

    def should_hit(self, hit_soft_17: bool) -> bool:
        """Determine if the dealer should draw another card."""
        value = self.hand.value
        if value < 17:
            return True
        if value == 17 and self.hand.is_soft and hit_soft_17:
            return True
        return False


class Player:
    """
    A betting seat bound to an optional decision provider.

    The balance only moves down through ``place_bet`` and
    ``try_double_down`` and only moves up through the settlement methods,
    so ``balance + current_bet`` is conserved until settlement.
    """

    def __init__(
        self,
        name: str,
        balance: int = DEFAULT_BALANCE,
        strategy: DecisionProvider | None = None,
        rng: Random | None = None,
    ) -> None:
        if balance < 0:
            raise ValueError("Balance cannot be negative")
        self.name = name
        self.balance = balance
        self.strategy = strategy
        self.hand = Hand()
        self.current_bet = 0
        self.history: list[ActionRecord] = []
        self._rng = rng or Random()

    def __repr__(self) -> str:
        return f"Player({self.name!r}, balance={self.balance}, bet={self.current_bet})"

    def __str__(self) -> str:
        return f"{self.name}: {self.hand}"

    @property
    def label(self) -> str:
        """Provider label for transcripts (``fallback`` when none is bound)."""
        if self.strategy is None:
            return "fallback"
        return self.strategy.name

    def receive(self, card: Card) -> Card:
        """Add a dealt card to the hand."""
        return self.hand.add_card(card)

    def clear_for_new_round(self) -> None:
        """Reset hand, wager and action history."""
        self.hand.clear()
        self.current_bet = 0
        self.history.clear()

    # Betting

    def place_bet(self, amount: int) -> None:
        """Debit ``amount`` from the balance and record it as the wager."""
        if amount <= 0:
            raise InvalidBetError(f"Bet must be positive, got {amount}")
        if amount > self.balance:
            raise InvalidBetError(
                f"Bet of {amount} exceeds available balance of {self.balance}"
            )
        self.balance -= amount
        self.current_bet = amount

    @property
    def can_double_down(self) -> bool:
        """Check if the wager can be doubled on the current hand."""
        return (
            self.current_bet > 0
            and self.balance >= self.current_bet
            and len(self.hand) == 2
        )

    def try_double_down(self) -> bool:
        """Double the wager if eligible; leave everything untouched otherwise."""
        if not self.can_double_down:
            return False
        self.balance -= self.current_bet
        self.current_bet *= 2
        return True

    # Settlement

    def win_plain(self) -> None:
        """Return the stake plus even-money profit."""
        self._settle(Outcome.WIN)

    def win_blackjack(self) -> None:
        """Return the stake plus a 3:2 payout."""
        self._settle(Outcome.BLACKJACK_WIN)

    def push(self) -> None:
        """Return the stake only."""
        self._settle(Outcome.PUSH)

    def lose(self) -> None:
        """Forfeit the stake."""
        self._settle(Outcome.LOSE)

    def settle(self, outcome: Outcome) -> int:
        """Apply the settlement for ``outcome`` and return the amount credited."""
        return self._settle(outcome)

    def _settle(self, outcome: Outcome) -> int:
        credit = settlement_credit(outcome, self.current_bet)
        self.balance += credit
        self.current_bet = 0
        return credit

    # Decisions

    def decide_bet(self, context: BetContext) -> BetDecision:
        """Ask the bound provider for a wager, or apply the fallback policy."""
        if self.strategy is None:
            return self._fallback_bet(context)
        try:
            return self.strategy.decide_bet(context)
        except Exception as exc:
            logger.warning("Bet provider for %s failed: %s", self.name, exc)
            return BetDecision(
                amount=context.min_bet,
                rationale=f"[Provider failure, defaulting to min bet] {exc!r}",
                source=DecisionSource.ENGINE,
            )

    def decide_action(self, context: ActionContext) -> ActionDecision:
        """Ask the bound provider for an action, or apply the fallback policy."""
        if self.strategy is None:
            return self._fallback_action(context)
        try:
            return self.strategy.decide_action(context)
        except Exception as exc:
            logger.warning("Action provider for %s failed: %s", self.name, exc)
            return ActionDecision(
                action=Action.STAND,
                rationale=f"[Provider failure, defaulting to stand] {exc!r}",
                source=DecisionSource.ENGINE,
            )

    def _fallback_bet(self, context: BetContext) -> BetDecision:
        max_units = max(1, context.balance // context.min_bet)
        units = self._rng.randint(1, max_units)
        return BetDecision(
            amount=units * context.min_bet,
            rationale=f"Fallback policy: random bet of {units} unit(s)",
            source=DecisionSource.ENGINE,
        )

    def _fallback_action(self, context: ActionContext) -> ActionDecision:
        value = context.hand_value
        if context.can_double_down and 9 <= value <= 11:
            action = Action.DOUBLE_DOWN
        elif value < 17:
            action = Action.HIT
        else:
            action = Action.STAND
        return ActionDecision(
            action=action,
            rationale=f"Fallback policy: {action} on {value}",
            source=DecisionSource.ENGINE,
        )

    def record_action(
        self,
        action: Action,
        rationale: str,
        card_received: Card | None = None,
        hand_description: str | None = None,
        hand_value: int | None = None,
    ) -> ActionRecord:
        """
        Append a decision to this hand's history.

        The snapshot defaults to the current hand; callers that record after
        drawing pass the pre-action description and value explicitly.
        """
        record = ActionRecord(
            hand_description=hand_description if hand_description is not None else str(self.hand),
            hand_value=hand_value if hand_value is not None else self.hand.value,
            action=action,
            card_received=card_received,
            rationale=rationale,
        )
        self.history.append(record)
        return record
