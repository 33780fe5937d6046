"""Decision providers."""

from arena.strategy.base import (
    Action,
    ActionDecision,
    BetDecision,
    DecisionProvider,
    DecisionSource,
)
from arena.strategy.basic import RuleBasedStrategy
from arena.strategy.llm import LLMStrategy

__all__ = [
    "Action",
    "ActionDecision",
    "BetDecision",
    "DecisionProvider",
    "DecisionSource",
    "RuleBasedStrategy",
    "LLMStrategy",
]
