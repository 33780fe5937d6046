"""Single-hand state machine: bets, deal, player turns, dealer turn, settlement."""

from dataclasses import dataclass, field, replace
from typing import Sequence

from transitions import Machine

from arena.cards import Card, Deck
from arena.context import build_action_context, build_bet_context
from arena.game.events import EventEmitter, EventType
from arena.game.state import RoundState
from arena.hand import Outcome, evaluate_outcome
from arena.player import Dealer, Player
from arena.strategy.base import Action, ActionDecision, BetDecision, DecisionSource


@dataclass(frozen=True)
class PlayerResult:
    """How one player's wager was settled."""

    name: str
    outcome: Outcome
    wager: int
    credited: int
    balance: int


@dataclass(frozen=True)
class RoundResult:
    """Settlements of one round; empty when nobody could bet."""

    round_number: int
    results: tuple[PlayerResult, ...] = field(default_factory=tuple)

    @property
    def was_played(self) -> bool:
        """Check if any cards were dealt."""
        return bool(self.results)


class Round:
    """
    One hand of blackjack, played once and discarded.

    The round reads and mutates the deck, dealer and players it is given
    and owns nothing else. Decision providers are consulted strictly one at
    a time; the deck is never touched while a decision is pending.
    """

    # State machine states
    STATES = [s.name.lower() for s in RoundState]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "begin_betting", "source": "reset", "dest": "bet_collection"},
        {"trigger": "begin_deal", "source": "bet_collection", "dest": "dealing"},
        {"trigger": "no_bets", "source": "bet_collection", "dest": "complete"},
        {"trigger": "begin_player_turns", "source": "dealing", "dest": "player_turns"},
        {"trigger": "begin_dealer_turn", "source": "player_turns", "dest": "dealer_turn"},
        {"trigger": "begin_settlement", "source": "dealer_turn", "dest": "settlement"},
        {"trigger": "finish", "source": "settlement", "dest": "complete"},
    ]

    def __init__(
        self,
        deck: Deck,
        dealer: Dealer,
        players: Sequence[Player],
        min_bet: int = 5,
        hit_soft_17: bool = True,
        events: EventEmitter | None = None,
    ) -> None:
        """
        Initialize a round.

        Args:
            deck: Fresh deck for this hand
            dealer: The table's dealer
            players: Roster in seating order
            min_bet: Table minimum; poorer players sit the round out
            hit_soft_17: Dealer draws on soft 17 when True
            events: Emitter for transcript events
        """
        if deck is None:
            raise ValueError("Round requires a deck")
        if dealer is None:
            raise ValueError("Round requires a dealer")
        if players is None:
            raise ValueError("Round requires a player list")
        if min_bet < 1:
            raise ValueError("min_bet must be at least 1")

        self.deck = deck
        self.dealer = dealer
        self.players = list(players)
        self.min_bet = min_bet
        self.hit_soft_17 = hit_soft_17
        self.events = events or EventEmitter()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="reset",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> RoundState:
        """Get current round state as enum."""
        return RoundState[self._machine_state.upper()]  # type: ignore

    def play(self, round_number: int) -> RoundResult:
        """Run the round from reset to settlement."""
        if self.state != RoundState.RESET:
            raise RuntimeError("A round can only be played once")

        self.events.emit_new(EventType.ROUND_STARTED, round_number=round_number)

        self.dealer.clear_for_new_round()
        for player in self.players:
            player.clear_for_new_round()

        self.begin_betting()
        active = self._collect_bets()
        if not active:
            self.events.emit_new(EventType.ROUND_SKIPPED, round_number=round_number)
            self.no_bets()
            return RoundResult(round_number=round_number)

        self.begin_deal()
        self._deal_initial_cards(active)

        self.begin_player_turns()
        for player in active:
            self._play_turn(player, active)

        self.begin_dealer_turn()
        self._play_dealer()

        self.begin_settlement()
        results = self._settle(active)

        self.finish()
        self.events.emit_new(EventType.ROUND_ENDED, round_number=round_number)
        return RoundResult(round_number=round_number, results=tuple(results))

    # Betting

    def _collect_bets(self) -> list[Player]:
        """Ask each qualifying player for a wager, in seating order."""
        active: list[Player] = []
        for player in self.players:
            if player.balance < self.min_bet:
                self.events.emit_new(
                    EventType.PLAYER_SITS_OUT,
                    player=player.name,
                    balance=player.balance,
                    min_bet=self.min_bet,
                )
                continue

            context = build_bet_context(player, self.players, self.min_bet)
            decision = self._clamp_bet(player.decide_bet(context), player)
            player.place_bet(decision.amount)
            self.events.emit_new(
                EventType.BET_PLACED,
                player=player.name,
                amount=decision.amount,
                balance=player.balance,
                rationale=decision.rationale,
                source=str(decision.source),
            )
            active.append(player)
        return active

    def _clamp_bet(self, decision: BetDecision, player: Player) -> BetDecision:
        """Force a provider's wager into ``[min_bet, balance]``."""
        try:
            requested = int(decision.amount)
        except (TypeError, ValueError, OverflowError):
            return BetDecision(
                amount=self.min_bet,
                rationale=(
                    f"[Invalid bet {decision.amount!r}, defaulting to min bet] "
                    f"{decision.rationale}"
                ),
                source=DecisionSource.ENGINE,
            )

        amount = min(max(requested, self.min_bet), player.balance)
        if amount == requested and isinstance(decision.amount, int):
            return decision
        return replace(
            decision,
            amount=amount,
            rationale=f"[Bet {decision.amount} clamped to {amount}] {decision.rationale}",
        )

    # Dealing

    def _draw(self) -> Card:
        return self.deck.draw()

    def _deal_initial_cards(self, active: list[Player]) -> None:
        """Two cards to each player in seat order, then two to the dealer."""
        for player in active:
            player.receive(self._draw())
            player.receive(self._draw())
        self.dealer.receive(self._draw())
        self.dealer.receive(self._draw())

        self.events.emit_new(
            EventType.INITIAL_HANDS,
            dealer_up_card=str(self.dealer.up_card),
            hands={player.name: str(player.hand) for player in active},
        )

    # Player turns

    def _checked_action(self, player: Player, decision: ActionDecision) -> ActionDecision:
        """Replace decisions the engine cannot execute as given."""
        if not isinstance(decision.action, Action):
            return ActionDecision(
                action=Action.STAND,
                rationale=(
                    f"[Unknown action {decision.action!r}, defaulting to stand] "
                    f"{decision.rationale}"
                ),
                source=DecisionSource.ENGINE,
            )
        if decision.action == Action.DOUBLE_DOWN and not player.can_double_down:
            return ActionDecision(
                action=Action.HIT,
                rationale=f"[DoubleDown not allowed, downgraded to hit] {decision.rationale}",
                source=DecisionSource.ENGINE,
            )
        return decision

    def _play_turn(self, player: Player, active: list[Player]) -> None:
        """Consult ``player``'s provider until they stand, double or bust."""
        hand = player.hand
        if hand.is_blackjack:
            self.events.emit_new(
                EventType.PLAYER_BLACKJACK, player=player.name, hand=str(hand)
            )
            return

        while not hand.is_busted:
            context = build_action_context(player, active, self.dealer)
            decision = self._checked_action(player, player.decide_action(context))
            description, value = str(hand), hand.value

            if decision.action == Action.DOUBLE_DOWN:
                doubled = player.try_double_down()
                card = player.receive(self._draw())
                taken = Action.DOUBLE_DOWN if doubled else Action.HIT
                player.record_action(taken, decision.rationale, card, description, value)
                self.events.emit_new(
                    EventType.PLAYER_DOUBLE if doubled else EventType.PLAYER_HIT,
                    player=player.name,
                    card=str(card),
                    hand=str(hand),
                    bet=player.current_bet,
                    rationale=decision.rationale,
                    source=str(decision.source),
                )
                break

            if decision.action == Action.HIT:
                card = player.receive(self._draw())
                player.record_action(Action.HIT, decision.rationale, card, description, value)
                self.events.emit_new(
                    EventType.PLAYER_HIT,
                    player=player.name,
                    card=str(card),
                    hand=str(hand),
                    bet=player.current_bet,
                    rationale=decision.rationale,
                    source=str(decision.source),
                )
                continue

            player.record_action(Action.STAND, decision.rationale, None, description, value)
            self.events.emit_new(
                EventType.PLAYER_STAND,
                player=player.name,
                hand=str(hand),
                rationale=decision.rationale,
                source=str(decision.source),
            )
            break

        if hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, player=player.name, hand=str(hand))

    # Dealer turn

    def _play_dealer(self) -> None:
        """Reveal the hole card and draw by the house rule."""
        hand = self.dealer.hand
        self.events.emit_new(EventType.DEALER_REVEALS, hand=str(hand))

        if hand.is_blackjack:
            self.events.emit_new(EventType.DEALER_BLACKJACK, hand=str(hand))
            return

        while self.dealer.should_hit(self.hit_soft_17):
            card = self.dealer.receive(self._draw())
            self.events.emit_new(EventType.DEALER_HITS, card=str(card), hand=str(hand))

        if hand.is_busted:
            self.events.emit_new(EventType.DEALER_BUSTS, hand=str(hand))
        else:
            self.events.emit_new(EventType.DEALER_STANDS, hand=str(hand), value=hand.value)

    # Settlement

    def _settle(self, active: list[Player]) -> list[PlayerResult]:
        """Evaluate and pay every active player against the dealer."""
        results: list[PlayerResult] = []
        for player in active:
            outcome = evaluate_outcome(player.hand, self.dealer.hand)
            wager = player.current_bet
            credited = player.settle(outcome)
            result = PlayerResult(
                name=player.name,
                outcome=outcome,
                wager=wager,
                credited=credited,
                balance=player.balance,
            )
            results.append(result)
            self.events.emit_new(
                EventType.PLAYER_SETTLED,
                player=player.name,
                hand=str(player.hand),
                dealer_hand=str(self.dealer.hand),
                outcome=str(outcome),
                wager=wager,
                credited=credited,
                balance=player.balance,
            )
        return results
