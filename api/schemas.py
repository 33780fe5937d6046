"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field, model_validator
from typing import Literal


class PlayerRequest(BaseModel):
    """One seat in a requested game."""

    name: str = Field(..., min_length=1, max_length=64)
    strategy: Literal["rule", "fallback", "llm"] = "rule"
    model: str | None = Field(default=None, description="Model id for llm players")
    balance: int | None = Field(default=None, ge=0, description="Starting balance")

    @model_validator(mode="after")
    def _llm_needs_model(self) -> "PlayerRequest":
        if self.strategy == "llm" and not self.model:
            raise ValueError("llm players require a model id")
        return self


class GameRequest(BaseModel):
    """Request to simulate a full game."""

    players: list[PlayerRequest] = Field(..., min_length=1, max_length=8)
    min_bet: int | None = Field(default=None, ge=1)
    hit_soft_17: bool | None = None
    max_rounds: int | None = Field(default=None, ge=0, le=1000)
    deck_count: int | None = Field(default=None, ge=1, le=8)

    @model_validator(mode="after")
    def _unique_names(self) -> "GameRequest":
        names = [p.name for p in self.players]
        if len(set(names)) != len(names):
            raise ValueError("player names must be unique")
        return self


class StandingResponse(BaseModel):
    """A player's final balance."""

    name: str
    balance: int
    eliminated: bool


class UsageResponse(BaseModel):
    """Token totals for one model."""

    input_tokens: int
    output_tokens: int
    total_tokens: int


class GameResultResponse(BaseModel):
    """Outcome of a simulated game."""

    winner: str | None
    reason: Literal["single_survivor", "round_cap", "no_players"]
    rounds_played: int
    standings: list[StandingResponse]
    transcript: list[str]
    usage: dict[str, UsageResponse]
