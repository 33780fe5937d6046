"""Rule-based decision provider backed by basic strategy tables."""

from enum import Enum, auto
from typing import TYPE_CHECKING, Mapping

from arena.strategy.base import Action, ActionDecision, BetDecision, DecisionProvider

if TYPE_CHECKING:
    from arena.context import ActionContext, BetContext


class Play(Enum):
    """Table entries; conditional plays resolve against what is allowed."""

    HIT = auto()
    STAND = auto()
    DOUBLE_OR_HIT = auto()  # Double if allowed, else hit


# Type aliases for clarity
DealerUpcard = int  # 2-11 (11 = Ace)
HandKey = tuple[int, DealerUpcard]


class RuleBasedStrategy(DecisionProvider):
    """
    Conservative bets and a simplified basic strategy.

    Pre-computed dictionaries for O(1) lookup, keyed by
    (player total, dealer upcard value).
    """

    name = "rule-based"

    #: Bankroll, in minimum bets, above which two units are wagered
    comfortable_units = 20

    def __init__(self) -> None:
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()

    def decide_bet(self, context: "BetContext") -> BetDecision:
        """Bet two units with a comfortable bankroll, otherwise one."""
        units = 2 if context.balance > context.min_bet * self.comfortable_units else 1
        amount = min(context.min_bet * units, context.balance)
        if units > 1:
            rationale = "Comfortable bankroll, betting 2 units"
        else:
            rationale = "Conservative 1-unit bet to preserve bankroll"
        return BetDecision(amount=amount, rationale=rationale)

    def decide_action(self, context: "ActionContext") -> ActionDecision:
        """Look up the hand in the strategy tables."""
        dealer_value = context.dealer_up_card.rank.up_card_value
        action = self.get_action(
            context.hand_value,
            dealer_value,
            is_soft=context.is_soft,
            can_double=context.can_double_down,
        )
        return ActionDecision(
            action=action,
            rationale=self._reasoning(context.hand_value, dealer_value, context.is_soft, action),
        )

    def get_action(
        self,
        player_total: int,
        dealer_upcard: int,
        is_soft: bool = False,
        can_double: bool = True,
    ) -> Action:
        """
        Get the basic strategy action.

        Args:
            player_total: Player's best hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether the hand is soft
            can_double: Whether doubling is allowed

        Returns:
            The recommended action
        """
        if player_total >= 21:
            return Action.STAND

        table = self._soft_table if is_soft else self._hard_table
        play = table.get((player_total, dealer_upcard))
        if play is None:
            return Action.STAND if player_total >= 17 else Action.HIT

        if play == Play.DOUBLE_OR_HIT:
            return Action.DOUBLE_DOWN if can_double else Action.HIT
        if play == Play.STAND:
            return Action.STAND
        return Action.HIT

    def _build_hard_table(self) -> Mapping[HandKey, Play]:
        """Build hard totals strategy table."""
        H = Play.HIT
        S = Play.STAND
        D = Play.DOUBLE_OR_HIT

        # Dealer upcards: 2, 3, 4, 5, 6, 7, 8, 9, 10, A(11)
        table: dict[HandKey, Play] = {}

        # Hard 4-11: hit unless doubling
        for total in range(4, 12):
            for dealer in range(2, 12):
                table[(total, dealer)] = H

        # Hard 9 vs 3-6
        for dealer in range(3, 7):
            table[(9, dealer)] = D

        # Hard 10 vs 2-9
        for dealer in range(2, 10):
            table[(10, dealer)] = D

        # Hard 11 always
        for dealer in range(2, 12):
            table[(11, dealer)] = D

        # Hard 12-16: stand against bust cards
        for total in range(12, 17):
            for dealer in range(2, 7):
                table[(total, dealer)] = S
            for dealer in range(7, 12):
                table[(total, dealer)] = H

        # Hard 17+: always stand
        for total in range(17, 21):
            for dealer in range(2, 12):
                table[(total, dealer)] = S

        return table

    def _build_soft_table(self) -> Mapping[HandKey, Play]:
        """Build soft totals strategy table."""
        H = Play.HIT
        S = Play.STAND

        table: dict[HandKey, Play] = {}

        # Soft 12-17: always hit
        for total in range(12, 18):
            for dealer in range(2, 12):
                table[(total, dealer)] = H

        # Soft 18: stand vs 2-8, hit vs 9-A
        for dealer in range(2, 9):
            table[(18, dealer)] = S
        for dealer in range(9, 12):
            table[(18, dealer)] = H

        # Soft 19+: always stand
        for total in (19, 20):
            for dealer in range(2, 12):
                table[(total, dealer)] = S

        return table

    @staticmethod
    def _reasoning(total: int, dealer: int, is_soft: bool, action: Action) -> str:
        if action == Action.DOUBLE_DOWN:
            if total == 11:
                return "Basic strategy: Always double on 11"
            return f"Basic strategy: Double on {total} vs dealer {dealer}"
        if action == Action.HIT:
            if is_soft:
                return f"Basic strategy: Hit soft {total}"
            if total <= 11:
                return "Basic strategy: Always hit 11 or less"
            return f"Basic strategy: Hit {total} vs dealer {dealer}"
        if is_soft:
            if total >= 19:
                return "Basic strategy: Stand on soft 19+"
            return f"Basic strategy: Stand on soft {total} vs dealer {dealer}"
        if total >= 17:
            return f"Basic strategy: Stand on hard {total}"
        return f"Basic strategy: Stand on {total} vs dealer bust card"
