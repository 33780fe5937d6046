"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from arena.cards import Card


class Outcome(Enum):
    """Settlement outcome of one player's hand against the dealer."""

    WIN = "Win"
    LOSE = "Lose"
    PUSH = "Push"
    BLACKJACK_WIN = "BlackjackWin"

    def __str__(self) -> str:
        return self.value


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> Card:
        """Add a card to the hand."""
        self.cards.append(card)
        return card

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    @property
    def hard_value(self) -> int:
        """Total with every Ace counted as 1."""
        return sum(card.value for card in self.cards)

    @property
    def value(self) -> int:
        """
        Calculate the best hand value.

        Aces start at 1 and are promoted to 11 one at a time while the
        total stays at or below 21. Returns the highest value that doesn't
        bust, or the all-low bust value.
        """
        total = self.hard_value
        aces = sum(1 for card in self.cards if card.is_ace)

        while aces > 0 and total + 10 <= 21:
            total += 10
            aces -= 1

        return total

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A natural blackjack is never reported soft; it is settled before
        softness can matter.
        """
        if not any(card.is_ace for card in self.cards):
            return False
        if self.is_blackjack:
            return False
        return self.value != self.hard_value

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def num_cards(self) -> int:
        """Return the number of cards in the hand."""
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        if not self.cards:
            return "(empty)"
        cards_str = " ".join(str(card) for card in self.cards)
        if self.is_blackjack:
            return f"{cards_str} (Blackjack)"
        if self.is_busted:
            return f"{cards_str} (BUST {self.value})"
        soft = " soft" if self.is_soft else ""
        return f"{cards_str} ({self.value}{soft})"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


def evaluate_outcome(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare a player's hand against the dealer's.

    Naturals are checked before busts, so a player blackjack still wins
    against a dealer who would otherwise have made 21 in three cards, and a
    dealer natural beats every non-natural player hand.
    """
    player_bj = player_hand.is_blackjack
    dealer_bj = dealer_hand.is_blackjack

    if player_bj and dealer_bj:
        return Outcome.PUSH
    if player_bj:
        return Outcome.BLACKJACK_WIN
    if dealer_bj:
        return Outcome.LOSE

    # Player busts always loses, even if the dealer busts too
    if player_hand.is_busted:
        return Outcome.LOSE
    if dealer_hand.is_busted:
        return Outcome.WIN

    player_value = player_hand.value
    dealer_value = dealer_hand.value
    if player_value > dealer_value:
        return Outcome.WIN
    if player_value < dealer_value:
        return Outcome.LOSE
    return Outcome.PUSH
