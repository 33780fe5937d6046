"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from api.limits import limiter, rate_limit_exceeded_handler
from api.routes import games
from config import config

app = FastAPI(
    title="Blackjack Arena",
    description="Multi-player blackjack simulations with pluggable decision providers",
    version="0.1.0",
    debug=config.debug,
)

# Add rate limiter to app state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# CORS middleware with configurable origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors.allowed_origins,
    allow_credentials=config.cors.allow_credentials,
    allow_methods=config.cors.allow_methods,
    allow_headers=config.cors.allow_headers,
)


@app.get("/api/health")
@limiter.limit(f"{config.rate_limit.requests_per_minute}/minute")
async def health_check(request: Request) -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# Include routers
app.include_router(games.router, prefix="/api/games", tags=["games"])


def run() -> None:
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn

    logging.basicConfig(level=config.log_level)
    uvicorn.run("api.main:app", host=config.host, port=config.port, log_level=config.log_level.lower())
