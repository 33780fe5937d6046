"""Round and table state machines."""

from arena.game.events import EventEmitter, EventType, GameEvent
from arena.game.state import RoundState
from arena.game.round import PlayerResult, Round, RoundResult
from arena.game.table import GameEndReason, GameResult, Standing, Table
from arena.game.transcript import Transcript, format_event

__all__ = [
    "EventEmitter",
    "EventType",
    "GameEvent",
    "RoundState",
    "PlayerResult",
    "Round",
    "RoundResult",
    "GameEndReason",
    "GameResult",
    "Standing",
    "Table",
    "Transcript",
    "format_event",
]
