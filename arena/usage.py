"""Token usage aggregation for decision providers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UsageTotals:
    """Accumulated token counts for one model."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def add(self, input_tokens: int, output_tokens: int, total_tokens: int) -> "UsageTotals":
        """Return new totals including one more call."""
        return UsageTotals(
            self.input_tokens + input_tokens,
            self.output_tokens + output_tokens,
            self.total_tokens + total_tokens,
        )


class UsageTracker:
    """
    Aggregates usage reported by providers, keyed by model id.

    Owned by whoever wires the table together and handed to each provider;
    the engine never reads it.
    """

    def __init__(self) -> None:
        self._by_model: dict[str, UsageTotals] = {}

    def add_usage(
        self,
        model: str,
        input_tokens: int,
        output_tokens: int,
        total_tokens: int,
    ) -> None:
        """Record one call's token counts."""
        current = self._by_model.get(model, UsageTotals())
        self._by_model[model] = current.add(input_tokens, output_tokens, total_tokens)

    def snapshot(self) -> dict[str, UsageTotals]:
        """Copy of the per-model totals."""
        return dict(self._by_model)

    def summary(self) -> str:
        """Human-readable totals, one line per model."""
        lines = [
            f"{model}: input={t.input_tokens}, output={t.output_tokens}, total={t.total_tokens}"
            for model, t in sorted(self._by_model.items())
        ]
        return "\n".join(["Token usage by model:"] + lines)

    def __len__(self) -> int:
        return len(self._by_model)
