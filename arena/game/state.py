"""Round state enumeration."""

from enum import Enum, auto


class RoundState(Enum):
    """
    Round state machine states.

    Flow: RESET → BET_COLLECTION → DEALING → PLAYER_TURNS → DEALER_TURN → SETTLEMENT → COMPLETE
    """

    # Hands, wagers and histories cleared
    RESET = auto()

    # Asking each seat for a wager
    BET_COLLECTION = auto()

    # Two cards to every qualifying player, then the dealer
    DEALING = auto()

    # Players act in seating order
    PLAYER_TURNS = auto()

    # Dealer reveals and draws
    DEALER_TURN = auto()

    # Wagers paid out or collected
    SETTLEMENT = auto()

    # Round finished; the round object is spent
    COMPLETE = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[RoundState, list[RoundState]] = {
    RoundState.RESET: [RoundState.BET_COLLECTION],
    RoundState.BET_COLLECTION: [RoundState.DEALING, RoundState.COMPLETE],  # COMPLETE if nobody bets
    RoundState.DEALING: [RoundState.PLAYER_TURNS],
    RoundState.PLAYER_TURNS: [RoundState.DEALER_TURN],
    RoundState.DEALER_TURN: [RoundState.SETTLEMENT],
    RoundState.SETTLEMENT: [RoundState.COMPLETE],
    RoundState.COMPLETE: [],  # Terminal state
}


def is_valid_transition(from_state: RoundState, to_state: RoundState) -> bool:
    """
    Check if a state transition is valid.

    Args:
        from_state: Current state
        to_state: Desired state

    Returns:
        True if the transition is allowed
    """
    return to_state in VALID_TRANSITIONS.get(from_state, [])
