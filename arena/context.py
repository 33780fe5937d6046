"""Immutable decision snapshots handed to decision providers."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from arena.cards import Card
from arena.strategy.base import Action

if TYPE_CHECKING:
    from arena.player import Dealer, Player


@dataclass(frozen=True)
class OpponentInfo:
    """Another seat as seen during bet collection."""

    name: str
    balance: int  # includes the opponent's current wager
    current_bet: int  # 0 while the opponent has not bet yet


@dataclass(frozen=True)
class BetContext:
    """Everything a provider may see when choosing a wager."""

    player_name: str
    balance: int
    min_bet: int
    opponents: tuple[OpponentInfo, ...] = ()


@dataclass(frozen=True)
class OpponentHandInfo:
    """Another active player's visible hand."""

    name: str
    hand_description: str
    hand_value: int
    is_bust: bool


@dataclass(frozen=True)
class ActionRecord:
    """One decision taken earlier in the current hand."""

    hand_description: str
    hand_value: int
    action: Action
    card_received: Card | None
    rationale: str


@dataclass(frozen=True)
class ActionContext:
    """Everything a provider may see when choosing an action."""

    player_name: str
    hand_description: str
    hand_value: int
    is_soft: bool
    dealer_up_card: Card
    current_bet: int
    balance: int
    can_double_down: bool
    other_players: tuple[OpponentHandInfo, ...] = ()
    action_history: tuple[ActionRecord, ...] = ()


def build_bet_context(
    player: "Player",
    roster: Sequence["Player"],
    min_bet: int,
) -> BetContext:
    """
    Snapshot the table for ``player``'s bet.

    Opponents are read at call time, so players earlier in the seating
    order show their placed bets and later ones show 0.
    """
    opponents = tuple(
        OpponentInfo(
            name=other.name,
            balance=other.balance + other.current_bet,
            current_bet=other.current_bet,
        )
        for other in roster
        if other is not player
    )
    return BetContext(
        player_name=player.name,
        balance=player.balance,
        min_bet=min_bet,
        opponents=opponents,
    )


def build_action_context(
    player: "Player",
    active_players: Sequence["Player"],
    dealer: "Dealer",
) -> ActionContext:
    """
    Snapshot the table for ``player``'s next action.

    Only the dealer's up card is exposed; the hole card and the rest of
    the deck never reach a provider.
    """
    hand = player.hand
    others = tuple(
        OpponentHandInfo(
            name=other.name,
            hand_description=str(other.hand),
            hand_value=other.hand.value,
            is_bust=other.hand.is_busted,
        )
        for other in active_players
        if other is not player
    )
    return ActionContext(
        player_name=player.name,
        hand_description=str(hand),
        hand_value=hand.value,
        is_soft=hand.is_soft,
        dealer_up_card=dealer.up_card,
        current_bet=player.current_bet,
        balance=player.balance,
        can_double_down=player.can_double_down,
        other_players=others,
        action_history=tuple(player.history),
    )
