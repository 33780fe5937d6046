"""Line-oriented game transcript driven by table events."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Callable, TextIO

from arena.game.events import EventEmitter, EventType, GameEvent


def _with_rationale(line: str, data: dict) -> str:
    rationale = data.get("rationale")
    if not rationale:
        return line
    return f"{line} [{data.get('source', 'provider')}] \"{rationale}\""


_FORMATTERS: dict[EventType, Callable[[dict], str]] = {
    EventType.GAME_STARTED: lambda d: "=== Game Start ===",
    EventType.PLAYER_JOINED: lambda d: (
        f"{d['player']} joins the game with balance: ${d['balance']} ({d['provider']})"
    ),
    EventType.PLAYER_ELIMINATED: lambda d: (
        f"{d['player']} is eliminated (Balance: ${d['balance']})."
    ),
    EventType.ROUND_STARTED: lambda d: f"\n=== New Round #{d['round_number']} ===",
    EventType.ROUND_SKIPPED: lambda d: "No active players with valid bets.",
    EventType.ROUND_ENDED: lambda d: f"=== End of Round #{d['round_number']} ===",
    EventType.PLAYER_SITS_OUT: lambda d: (
        f"{d['player']} cannot meet the minimum bet of ${d['min_bet']} and sits out."
    ),
    EventType.BET_PLACED: lambda d: _with_rationale(
        f"{d['player']} bets ${d['amount']} (Remaining Balance: ${d['balance']})", d
    ),
    EventType.INITIAL_HANDS: lambda d: "\n".join(
        [f"Dealer shows: {d['dealer_up_card']} ??"]
        + [f"{name}: {hand}" for name, hand in d["hands"].items()]
    ),
    EventType.PLAYER_HIT: lambda d: _with_rationale(
        f"{d['player']} hits, draws {d['card']} -> {d['hand']}", d
    ),
    EventType.PLAYER_DOUBLE: lambda d: _with_rationale(
        f"{d['player']} doubles down, draws {d['card']} -> {d['hand']} "
        f"(Total Bet: ${d['bet']})",
        d,
    ),
    EventType.PLAYER_STAND: lambda d: _with_rationale(
        f"{d['player']} stands -> {d['hand']}", d
    ),
    EventType.PLAYER_BLACKJACK: lambda d: f"{d['player']} has Blackjack.",
    EventType.PLAYER_BUSTS: lambda d: f"{d['player']} busts -> {d['hand']}",
    EventType.DEALER_REVEALS: lambda d: f"Dealer reveals: {d['hand']}",
    EventType.DEALER_BLACKJACK: lambda d: "Dealer has Blackjack.",
    EventType.DEALER_HITS: lambda d: f"Dealer hits, draws {d['card']} -> {d['hand']}",
    EventType.DEALER_STANDS: lambda d: f"Dealer stands on {d['value']}.",
    EventType.DEALER_BUSTS: lambda d: f"Dealer busts -> {d['hand']}",
    EventType.PLAYER_SETTLED: lambda d: (
        f"{d['player']}: {d['hand']} vs Dealer {d['dealer_hand']} => "
        f"{d['outcome']} (Balance: ${d['balance']})"
    ),
    EventType.GAME_ENDED: lambda d: _format_game_end(d),
}


def _format_game_end(data: dict) -> str:
    reason = data["reason"]
    if reason == "no_players":
        return "No players left with sufficient balance."
    if reason == "round_cap":
        return (
            f"Round cap reached after {data['rounds_played']} rounds. "
            f"Winner: {data['winner']} (Balance: ${data['balance']})"
        )
    return f"Winner: {data['winner']} (Balance: ${data['balance']})"


def format_event(event: GameEvent) -> str:
    """Render one event as transcript text (may span lines for the deal)."""
    formatter = _FORMATTERS.get(event.event_type)
    if formatter is None:
        return str(event)
    return formatter(event.data)


class Transcript:
    """
    Append-only recorder of human-readable game lines.

    Attach it to an emitter and every event is written, in order, to each
    sink. The engine never reads it back.
    """

    def __init__(self, *sinks: TextIO, keep_lines: bool = True) -> None:
        self._sinks = list(sinks)
        self._lines: list[str] = []
        self._keep_lines = keep_lines
        self._owned: list[TextIO] = []
        self._path: Path | None = None
        self._emitter: EventEmitter | None = None

    @classmethod
    def to_file(
        cls,
        results_dir: str | Path = "Results",
        filename: str | None = None,
        echo: bool = True,
        keep_lines: bool = True,
    ) -> "Transcript":
        """Open a transcript writing to a timestamped log file (and stdout)."""
        directory = Path(results_dir)
        directory.mkdir(parents=True, exist_ok=True)
        filename = filename or f"game_{datetime.now():%Y%m%d_%H%M%S}.log"
        path = directory / filename

        stream = path.open("a", encoding="utf-8")
        sinks = (stream, sys.stdout) if echo else (stream,)
        transcript = cls(*sinks, keep_lines=keep_lines)
        transcript._owned.append(stream)
        transcript._path = path
        return transcript

    @property
    def path(self) -> Path | None:
        """File backing this transcript, if any."""
        return self._path

    @property
    def lines(self) -> list[str]:
        """Every line written so far (empty when ``keep_lines`` is off)."""
        return self._lines.copy()

    def attach(self, emitter: EventEmitter) -> None:
        """Start recording every event published by ``emitter``."""
        self.detach()
        emitter.subscribe(self.handle)
        self._emitter = emitter

    def detach(self) -> None:
        """Stop recording."""
        if self._emitter is not None:
            self._emitter.unsubscribe(self.handle)
            self._emitter = None

    def handle(self, event: GameEvent) -> None:
        """Event handler: format and write."""
        self.write(format_event(event))

    def write(self, text: str = "") -> None:
        """Write one or more lines to every sink."""
        for line in text.split("\n"):
            if self._keep_lines:
                self._lines.append(line)
            for sink in self._sinks:
                sink.write(line + "\n")
                sink.flush()

    def close(self) -> None:
        """Detach and close any file this transcript opened."""
        self.detach()
        for stream in self._owned:
            stream.close()
        self._owned.clear()

    def __enter__(self) -> "Transcript":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
