"""Multi-round table lifecycle: roster, eliminations and termination."""

import logging
from dataclasses import dataclass
from enum import Enum
from random import Random
from typing import Callable

from arena.cards import Deck
from arena.game.events import EventEmitter, EventType, GameEvent
from arena.game.round import Round, RoundResult
from arena.player import Dealer, Player
from arena.rules import TableRules
from arena.strategy.base import DecisionProvider

logger = logging.getLogger(__name__)


class GameEndReason(Enum):
    """Why a game stopped."""

    SINGLE_SURVIVOR = "single_survivor"
    ROUND_CAP = "round_cap"
    NO_PLAYERS = "no_players"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Standing:
    """A player's final balance."""

    name: str
    balance: int
    eliminated: bool = False


@dataclass(frozen=True)
class GameResult:
    """Final state of a game."""

    winner: str | None
    reason: GameEndReason
    rounds_played: int
    standings: tuple[Standing, ...]


class Table:
    """
    A dealer, a roster of players, and the rules they play under.

    The roster only shrinks between rounds, when a player can no longer
    cover the minimum bet.
    """

    def __init__(
        self,
        rules: TableRules | None = None,
        rng: Random | None = None,
        events: EventEmitter | None = None,
        deck_factory: Callable[[], Deck] | None = None,
    ) -> None:
        """
        Initialize a table.

        Args:
            rules: Table rules (uses defaults if not provided)
            rng: Random number generator for shuffles and fallback bets
            events: Emitter shared with every round played here
            deck_factory: Builds the deck for each round; defaults to a
                freshly shuffled deck per the rules
        """
        self.rules = rules or TableRules()
        self.dealer = Dealer()
        self.players: list[Player] = []
        self.events = events or EventEmitter()
        self._rng = rng
        self._deck_factory = deck_factory or self._new_deck
        self._seated: list[Player] = []

    def _new_deck(self) -> Deck:
        return Deck(self.rules.num_decks, shuffle=self.rules.shuffle, rng=self._rng)

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    def add_player(
        self,
        name: str | None = None,
        strategy: DecisionProvider | None = None,
        balance: int | None = None,
    ) -> Player:
        """Seat a new player at the end of the seating order."""
        if not name or not name.strip():
            name = f"Player {len(self._seated) + 1}"
        player = Player(
            name,
            balance=self.rules.starting_balance if balance is None else balance,
            strategy=strategy,
            rng=self._rng,
        )
        self.players.append(player)
        self._seated.append(player)
        return player

    def play_round(
        self,
        round_number: int,
        min_bet: int | None = None,
        hit_soft_17: bool | None = None,
    ) -> RoundResult:
        """Play one hand with a fresh deck."""
        round_ = Round(
            self._deck_factory(),
            self.dealer,
            self.players,
            min_bet=self.rules.min_bet if min_bet is None else min_bet,
            hit_soft_17=self.rules.dealer_hits_soft_17 if hit_soft_17 is None else hit_soft_17,
            events=self.events,
        )
        return round_.play(round_number)

    def remove_bankrupt_players(self, min_bet: int) -> list[Player]:
        """Evict every player whose balance is below ``min_bet``."""
        evicted = [p for p in self.players if p.balance < min_bet]
        for player in evicted:
            self.players.remove(player)
            logger.info("%s eliminated with balance %d", player.name, player.balance)
            self.events.emit_new(
                EventType.PLAYER_ELIMINATED,
                player=player.name,
                balance=player.balance,
            )
        return evicted

    def standings(self) -> tuple[Standing, ...]:
        """Balances of everyone ever seated, in seating order."""
        return tuple(
            Standing(p.name, p.balance, eliminated=p not in self.players)
            for p in self._seated
        )

    def play_until_one_remaining(
        self,
        min_bet: int | None = None,
        hit_soft_17: bool | None = None,
        max_rounds: int | None = None,
    ) -> GameResult:
        """
        Play rounds until one player is left or the round cap is reached.

        Omitted arguments fall back to the table rules. At the cap the
        highest balance wins; ties go to the earliest seat.
        """
        min_bet = self.rules.min_bet if min_bet is None else min_bet
        max_rounds = self.rules.max_rounds if max_rounds is None else max_rounds

        self.events.emit_new(
            EventType.GAME_STARTED,
            players=[p.name for p in self.players],
            min_bet=min_bet,
            max_rounds=max_rounds,
        )
        for player in self.players:
            self.events.emit_new(
                EventType.PLAYER_JOINED,
                player=player.name,
                balance=player.balance,
                provider=player.label,
            )

        rounds_played = 0
        while True:
            self.remove_bankrupt_players(min_bet)

            if not self.players:
                return self._finish(None, GameEndReason.NO_PLAYERS, rounds_played)

            if len(self.players) == 1:
                return self._finish(
                    self.players[0], GameEndReason.SINGLE_SURVIVOR, rounds_played
                )

            if max_rounds is not None and rounds_played >= max_rounds:
                leader = max(self.players, key=lambda p: p.balance)
                return self._finish(leader, GameEndReason.ROUND_CAP, rounds_played)

            self.play_round(rounds_played + 1, min_bet=min_bet, hit_soft_17=hit_soft_17)
            rounds_played += 1

    def _finish(
        self,
        winner: Player | None,
        reason: GameEndReason,
        rounds_played: int,
    ) -> GameResult:
        result = GameResult(
            winner=winner.name if winner else None,
            reason=reason,
            rounds_played=rounds_played,
            standings=self.standings(),
        )
        logger.info(
            "Game over after %d rounds (%s), winner: %s",
            rounds_played,
            reason,
            result.winner,
        )
        self.events.emit_new(
            EventType.GAME_ENDED,
            reason=str(reason),
            winner=result.winner,
            balance=winner.balance if winner else None,
            rounds_played=rounds_played,
            standings={s.name: s.balance for s in result.standings},
        )
        return result
