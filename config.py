"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field

from arena.rules import TableRules


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
    return [o.strip() for o in origins.split(",") if o.strip()]


def _parse_max_rounds() -> int | None:
    """Parse ARENA_MAX_ROUNDS; ``none`` or an empty value means uncapped."""
    raw = os.getenv("ARENA_MAX_ROUNDS", "100").strip().lower()
    if raw in ("", "none"):
        return None
    return int(raw)


@dataclass(frozen=True)
class GameConfig:
    """Default table configuration."""

    num_decks: int = field(default_factory=lambda: int(os.getenv("ARENA_NUM_DECKS", "2")))
    shuffle: bool = True
    min_bet: int = field(default_factory=lambda: int(os.getenv("ARENA_MIN_BET", "5")))
    starting_balance: int = field(
        default_factory=lambda: int(os.getenv("ARENA_STARTING_BALANCE", "500"))
    )
    dealer_hits_soft_17: bool = field(
        default_factory=lambda: _env_bool("ARENA_HIT_SOFT_17", "true")
    )
    max_rounds: int | None = field(default_factory=_parse_max_rounds)

    def to_rules(self, **overrides: object) -> TableRules:
        """Build validated table rules, with optional per-game overrides."""
        values = {
            "num_decks": self.num_decks,
            "shuffle": self.shuffle,
            "min_bet": self.min_bet,
            "starting_balance": self.starting_balance,
            "dealer_hits_soft_17": self.dealer_hits_soft_17,
            "max_rounds": self.max_rounds,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return TableRules(**values)  # type: ignore[arg-type]


@dataclass(frozen=True)
class LLMConfig:
    """Chat-completion endpoint used by LLM players."""

    api_key: str | None = field(default_factory=lambda: os.getenv("OPENROUTER_API_KEY"))
    base_url: str = field(
        default_factory=lambda: os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")
    )
    temperature: float = field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7"))
    )
    timeout: float = field(default_factory=lambda: float(os.getenv("LLM_TIMEOUT", "60")))
    max_retries: int = field(default_factory=lambda: int(os.getenv("LLM_MAX_RETRIES", "2")))


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["*"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(default_factory=lambda: _env_bool("RATE_LIMIT_ENABLED", "true"))
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "60"))
    )
    games_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_GAMES_RPM", "10"))
    )


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    results_dir: str = field(default_factory=lambda: os.getenv("RESULTS_DIR", "Results"))

    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    game: GameConfig = field(default_factory=GameConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


# Global configuration instance
config = AppConfig()
