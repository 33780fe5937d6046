"""Roster construction shared by the CLI and the HTTP API."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Literal

from arena.strategy.base import DecisionProvider
from arena.strategy.basic import RuleBasedStrategy
from arena.strategy.llm import LLMStrategy
from arena.usage import UsageTracker

if TYPE_CHECKING:
    from arena.game.table import Table
    from config import LLMConfig

StrategyKind = Literal["rule", "fallback", "llm"]
STRATEGY_KINDS: tuple[str, ...] = ("rule", "fallback", "llm")


@dataclass(frozen=True)
class PlayerSpec:
    """How to seat one player."""

    name: str
    strategy: StrategyKind = "rule"
    model: str | None = None
    balance: int | None = None


def parse_player_spec(text: str) -> PlayerSpec:
    """
    Parse ``Name[:strategy[:model]]``.

    The model id may itself contain colons (``vendor/model:free``).
    """
    name, _, rest = text.partition(":")
    name = name.strip()
    if not name:
        raise ValueError(f"Player spec needs a name: {text!r}")
    strategy, _, model = rest.partition(":")
    strategy = strategy.strip().lower() or "rule"
    if strategy not in STRATEGY_KINDS:
        raise ValueError(f"Unknown strategy {strategy!r}; expected one of {STRATEGY_KINDS}")
    if strategy == "llm" and not model.strip():
        raise ValueError(f"LLM player {name!r} needs a model id")
    return PlayerSpec(name=name, strategy=strategy, model=model.strip() or None)  # type: ignore[arg-type]


def build_provider(
    spec: PlayerSpec,
    usage: UsageTracker,
    llm: "LLMConfig",
) -> DecisionProvider | None:
    """Create the decision provider for ``spec``; ``None`` means engine fallback."""
    if spec.strategy == "fallback":
        return None
    if spec.strategy == "rule":
        return RuleBasedStrategy()
    if not llm.api_key:
        raise ValueError("LLM players need OPENROUTER_API_KEY to be set")
    if not spec.model:
        raise ValueError(f"LLM player {spec.name!r} needs a model id")
    return LLMStrategy(
        spec.model,
        api_key=llm.api_key,
        base_url=llm.base_url,
        temperature=llm.temperature,
        max_retries=llm.max_retries,
        timeout=llm.timeout,
        usage=usage,
    )


def seat_players(
    table: "Table",
    specs: Iterable[PlayerSpec],
    usage: UsageTracker,
    llm: "LLMConfig",
) -> list[DecisionProvider]:
    """Seat every spec at ``table``; returns the providers created."""
    providers: list[DecisionProvider] = []
    for spec in specs:
        provider = build_provider(spec, usage, llm)
        table.add_player(spec.name, strategy=provider, balance=spec.balance)
        if provider is not None:
            providers.append(provider)
    return providers


def close_providers(providers: Iterable[DecisionProvider]) -> None:
    """Release resources held by providers (HTTP clients)."""
    for provider in providers:
        provider.close()
