"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass
from enum import Enum, auto
from random import Random
from typing import Iterable, Iterator

from arena.errors import EmptyDeckError


class Suit(Enum):
    """Card suits."""

    CLUBS = auto()
    DIAMONDS = auto()
    HEARTS = auto()
    SPADES = auto()

    def __str__(self) -> str:
        symbols = {
            Suit.CLUBS: "♣",
            Suit.DIAMONDS: "♦",
            Suit.HEARTS: "♥",
            Suit.SPADES: "♠",
        }
        return symbols[self]


class Rank(Enum):
    """Card ranks with blackjack values."""

    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        if self.value <= 10:
            return str(self.value)
        return {
            Rank.JACK: "J",
            Rank.QUEEN: "Q",
            Rank.KING: "K",
            Rank.ACE: "A",
        }[self]

    @property
    def blackjack_values(self) -> tuple[int, ...]:
        """
        Return the possible point values, lowest first.

        Aces are ambiguous (1 or 11); face cards count 10.
        """
        if self == Rank.ACE:
            return (1, 11)
        if self.value <= 10:
            return (self.value,)
        return (10,)

    @property
    def low_value(self) -> int:
        """Return the lowest point value (Ace = 1)."""
        return self.blackjack_values[0]

    @property
    def up_card_value(self) -> int:
        """Return the value used when reading a dealer up card (Ace = 11)."""
        return self.blackjack_values[-1]

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


@dataclass(frozen=True, slots=True)
class Card:
    """Immutable playing card."""

    rank: Rank
    suit: Suit

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        return f"Card({self.rank.name}, {self.suit.name})"

    @property
    def value(self) -> int:
        """Return the low blackjack point value (Ace = 1)."""
        return self.rank.low_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    @classmethod
    def from_string(cls, s: str) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]

        rank_map = {
            "2": Rank.TWO,
            "3": Rank.THREE,
            "4": Rank.FOUR,
            "5": Rank.FIVE,
            "6": Rank.SIX,
            "7": Rank.SEVEN,
            "8": Rank.EIGHT,
            "9": Rank.NINE,
            "10": Rank.TEN,
            "T": Rank.TEN,
            "J": Rank.JACK,
            "Q": Rank.QUEEN,
            "K": Rank.KING,
            "A": Rank.ACE,
        }

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        if rank_str not in rank_map:
            raise ValueError(f"Invalid rank: {rank_str}")
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(rank_map[rank_str], suit_map[suit_str])


def standard_cards() -> list[Card]:
    """Return one ordered 52-card set."""
    return [Card(rank, suit) for suit in Suit for rank in Rank]


class Deck:
    """
    A single-use deck of one or more 52-card sets.

    Cards are drawn front-to-back past a cursor; nothing is ever returned
    to the deck. A fresh deck is built for every round.
    """

    def __init__(
        self,
        deck_count: int = 1,
        shuffle: bool = True,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a deck.

        Args:
            deck_count: Number of standard 52-card sets combined
            shuffle: Shuffle the cards on construction
            rng: Random number generator for shuffling
        """
        if deck_count < 1:
            raise ValueError("Deck must have at least 1 card set")

        self._deck_count = deck_count
        self._rng = rng or Random()
        self._cards: list[Card] = [
            card for _ in range(deck_count) for card in standard_cards()
        ]
        self._cursor = 0
        if shuffle:
            self.shuffle()

    @classmethod
    def stacked(cls, cards: Iterable[Card]) -> "Deck":
        """Build an unshuffled deck that deals ``cards`` in the given order."""
        deck = cls(shuffle=False)
        deck._cards = list(cards)
        deck._deck_count = max(1, len(deck._cards) // 52)
        return deck

    def shuffle(self) -> None:
        """Shuffle every card and rewind the cursor."""
        self._rng.shuffle(self._cards)
        self._cursor = 0

    def draw(self) -> Card:
        """Draw the next card."""
        if self._cursor >= len(self._cards):
            raise EmptyDeckError("Cannot draw from empty deck")
        card = self._cards[self._cursor]
        self._cursor += 1
        return card

    @property
    def has_cards(self) -> bool:
        """Check if any card is left to draw."""
        return self._cursor < len(self._cards)

    @property
    def remaining(self) -> int:
        """Return the number of undrawn cards."""
        return len(self._cards) - self._cursor

    @property
    def total_cards(self) -> int:
        """Return the full size of the deck."""
        return len(self._cards)

    @property
    def deck_count(self) -> int:
        """Return the number of 52-card sets."""
        return self._deck_count

    def __len__(self) -> int:
        return self.remaining

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards[self._cursor:])
