"""Table rule configuration."""

from dataclasses import dataclass

from arena.player import DEFAULT_BALANCE


@dataclass(frozen=True)
class TableRules:
    """
    Blackjack table rules configuration.

    Only the dealer's soft-17 policy and the deck count vary; payouts are
    fixed at even money and 3:2 for naturals.
    """

    # Deck configuration
    num_decks: int = 1
    shuffle: bool = True

    # Betting
    min_bet: int = 5
    starting_balance: int = DEFAULT_BALANCE

    # Dealer rules
    dealer_hits_soft_17: bool = True  # H17 vs S17

    # Game length; None plays until one player remains
    max_rounds: int | None = 100

    def __post_init__(self) -> None:
        """Validate rule combinations."""
        if self.num_decks < 1 or self.num_decks > 8:
            raise ValueError("num_decks must be between 1 and 8")
        if self.min_bet < 1:
            raise ValueError("min_bet must be at least 1")
        if self.starting_balance < 0:
            raise ValueError("starting_balance cannot be negative")
        if self.max_rounds is not None and self.max_rounds < 0:
            raise ValueError("max_rounds cannot be negative")

    @property
    def dealer_rule(self) -> str:
        """Short label for the soft-17 rule."""
        return "H17" if self.dealer_hits_soft_17 else "S17"
