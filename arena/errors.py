"""Engine exception types."""


class EmptyDeckError(IndexError):
    """Raised when drawing from an exhausted deck."""


class InvalidBetError(ValueError):
    """Raised when a wager is non-positive or exceeds the player's balance."""


class ProviderError(RuntimeError):
    """Raised by a decision provider's transport after exhausting retries."""
