"""Game simulation endpoints."""

from fastapi import APIRouter, HTTPException, Request

from api.limits import limiter
from api.schemas import GameRequest, GameResultResponse, StandingResponse, UsageResponse
from arena.game import Table, Transcript
from arena.roster import PlayerSpec, close_providers, seat_players
from arena.usage import UsageTracker
from config import config

router = APIRouter()


@router.post("", response_model=GameResultResponse)
@limiter.limit(f"{config.rate_limit.games_per_minute}/minute")
def run_game(request: Request, game: GameRequest) -> GameResultResponse:
    """
    Play a complete game and return the result with its transcript.

    Runs on FastAPI's worker thread pool; provider calls block until the
    upstream model answers or times out.
    """
    try:
        rules = config.game.to_rules(
            num_decks=game.deck_count,
            min_bet=game.min_bet,
            dealer_hits_soft_17=game.hit_soft_17,
            max_rounds=game.max_rounds,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    usage = UsageTracker()
    table = Table(rules)
    specs = [
        PlayerSpec(name=p.name, strategy=p.strategy, model=p.model, balance=p.balance)
        for p in game.players
    ]
    try:
        providers = seat_players(table, specs, usage, config.llm)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    transcript = Transcript()
    transcript.attach(table.events)
    try:
        result = table.play_until_one_remaining()
    finally:
        transcript.detach()
        close_providers(providers)

    return GameResultResponse(
        winner=result.winner,
        reason=str(result.reason),
        rounds_played=result.rounds_played,
        standings=[
            StandingResponse(name=s.name, balance=s.balance, eliminated=s.eliminated)
            for s in result.standings
        ],
        transcript=transcript.lines,
        usage={
            model: UsageResponse(
                input_tokens=t.input_tokens,
                output_tokens=t.output_tokens,
                total_tokens=t.total_tokens,
            )
            for model, t in usage.snapshot().items()
        },
    )
