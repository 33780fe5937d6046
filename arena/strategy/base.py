"""Decision provider interface and decision value types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from arena.context import ActionContext, BetContext


class Action(Enum):
    """Possible in-hand player actions."""

    HIT = "Hit"
    STAND = "Stand"
    DOUBLE_DOWN = "DoubleDown"

    def __str__(self) -> str:
        return self.value


class DecisionSource(Enum):
    """Who made a decision: the bound provider or the engine's fallback."""

    PROVIDER = "provider"
    ENGINE = "engine"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BetDecision:
    """A bet amount plus the rationale behind it."""

    amount: int
    rationale: str
    source: DecisionSource = DecisionSource.PROVIDER


@dataclass(frozen=True)
class ActionDecision:
    """An in-hand action plus the rationale behind it."""

    action: Action
    rationale: str
    source: DecisionSource = DecisionSource.PROVIDER


class DecisionProvider(ABC):
    """
    Supplies bets and actions for one seat.

    Implementations receive immutable context snapshots and must always
    return a decision; malformed upstream answers are turned into the
    documented fallbacks (minimum bet, Stand) rather than raised.
    """

    #: Label reported in transcripts and usage summaries.
    name: str = "provider"

    @abstractmethod
    def decide_bet(self, context: "BetContext") -> BetDecision:
        """Choose a wager for the coming round."""
        ...

    @abstractmethod
    def decide_action(self, context: "ActionContext") -> ActionDecision:
        """Choose the next action for the current hand."""
        ...

    def close(self) -> None:
        """Release any resources held by the provider."""
