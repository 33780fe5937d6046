"""Prompt construction for LLM-backed players."""

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from arena.context import ActionContext, ActionRecord, BetContext, OpponentHandInfo

SYSTEM_PROMPT = (
    "You are a professional and strategic blackjack player. Be concise. "
    "Always respond with valid JSON only, no markdown."
)


def build_bet_prompt(ctx: "BetContext") -> str:
    """Builds the wager prompt, including every opponent's standing so far."""
    if ctx.opponents:
        opponents = "\n".join(
            f"  - {o.name}: Balance ${o.balance}, Bet ${o.current_bet}"
            if o.current_bet > 0
            else f"  - {o.name}: Balance ${o.balance} (not yet bet)"
            for o in ctx.opponents
        )
    else:
        opponents = "  (none)"

    return (
        f"You are playing blackjack at a casino. Your name is {ctx.player_name}.\n"
        f"\n"
        f"YOUR STATUS:\n"
        f"- Balance: ${ctx.balance}\n"
        f"- Minimum bet: ${ctx.min_bet}\n"
        f"\n"
        f"OTHER PLAYERS AT THE TABLE:\n"
        f"{opponents}\n"
        f"\n"
        f"Decide how much to bet (must be between ${ctx.min_bet} and ${ctx.balance}).\n"
        f"Consider your position relative to other players and how much risk you want to take.\n"
        f"\n"
        f"Respond with ONLY valid JSON in this exact format:\n"
        '{"amount": <number>, "reasoning": "<your strategic thinking in 1-2 sentences>"}'
    )


def build_history_section(history: Sequence["ActionRecord"]) -> str:
    """Summarise the decisions already taken this hand."""
    if not history:
        return "THIS IS YOUR FIRST DECISION THIS HAND."

    lines = ["YOUR DECISIONS THIS HAND:"]
    for entry in history:
        lines.append(f"  - Hand was {entry.hand_description} (value {entry.hand_value})")
        lines.append(f"    You chose: {entry.action}")
        lines.append(f'    Reasoning: "{entry.rationale}"')
        if entry.card_received is not None:
            lines.append(f"    Card received: {entry.card_received}")
    return "\n".join(lines)


def build_other_players_section(others: Sequence["OpponentHandInfo"]) -> str:
    """List the other active players' visible hands."""
    if not others:
        return "OTHER PLAYERS: (none)"
    lines = [
        f"  - {p.name}: {p.hand_description} (value {p.hand_value}){' BUST' if p.is_bust else ''}"
        for p in others
    ]
    return "OTHER PLAYERS' VISIBLE HANDS:\n" + "\n".join(lines)


def build_action_prompt(ctx: "ActionContext") -> str:
    """
    Builds a single-turn action prompt.

    The final instruction pins the JSON shape so the response can be
    validated; DoubleDown is only offered when it is currently allowed.
    """
    actions = "Hit, Stand, or DoubleDown" if ctx.can_double_down else "Hit or Stand"
    soft = " (soft)" if ctx.is_soft else ""
    double_note = (
        "Note: DoubleDown doubles your bet and you receive exactly one more card.\n"
        if ctx.can_double_down
        else ""
    )

    return (
        f"You are playing blackjack. Your name is {ctx.player_name}.\n"
        f"You and other AI players are playing together during a relaxing casino night.\n"
        f"Make strategic decisions based on your hand, the dealer's up card, "
        f"and other players' visible hands.\n"
        f"\n"
        f"DEALER SHOWS: {ctx.dealer_up_card}\n"
        f"\n"
        f"{build_history_section(ctx.action_history)}\n"
        f"\n"
        f"YOUR CURRENT HAND: {ctx.hand_description}\n"
        f"- Value: {ctx.hand_value}{soft}\n"
        f"- Current bet: ${ctx.current_bet}\n"
        f"- Remaining balance: ${ctx.balance}\n"
        f"\n"
        f"{build_other_players_section(ctx.other_players)}\n"
        f"\n"
        f"AVAILABLE ACTIONS: {actions}\n"
        f"{double_note}"
        f"\n"
        f"Respond with ONLY valid JSON in this exact format:\n"
        '{"action": "Hit" or "Stand" or "DoubleDown", '
        '"reasoning": "<your strategic thinking in 1-2 sentences>"}'
    )
