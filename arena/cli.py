"""
Command-line entry point: seat a roster and play until one player remains.

Example:
    blackjack-arena --player "Alice:rule" --player "Bob:fallback" \
        --player "Mimo:llm:xiaomi/mimo-v2-flash" --min-bet 5 --max-rounds 100
"""

import argparse
import logging
import time
from datetime import timedelta

from arena.game import EventEmitter, Table, Transcript
from arena.roster import close_providers, parse_player_spec, seat_players
from arena.usage import UsageTracker
from config import config

logger = logging.getLogger(__name__)

DEFAULT_ROSTER = ["Player 1:rule", "Player 2:fallback"]


def build_parser() -> argparse.ArgumentParser:
    """CLI arguments; defaults come from the environment-backed config."""
    game = config.game
    parser = argparse.ArgumentParser(
        prog="blackjack-arena",
        description="Multi-player blackjack with pluggable decision providers.",
    )
    parser.add_argument(
        "--player",
        action="append",
        dest="players",
        metavar="NAME[:rule|fallback|llm[:MODEL]]",
        help="Seat a player (repeatable, seating order is argument order).",
    )
    parser.add_argument("--min-bet", type=int, default=game.min_bet)
    parser.add_argument("--max-rounds", type=int, default=game.max_rounds)
    parser.add_argument("--decks", type=int, default=game.num_decks)
    parser.add_argument("--balance", type=int, default=game.starting_balance)
    parser.add_argument(
        "--stand-soft-17",
        action="store_true",
        help="Dealer stands on soft 17 (default: hits, unless ARENA_HIT_SOFT_17=false).",
    )
    parser.add_argument("--results-dir", default=config.results_dir)
    parser.add_argument("--quiet", action="store_true", help="Do not echo the transcript.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run one game and print the usage summary."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        specs = [parse_player_spec(p) for p in (args.players or DEFAULT_ROSTER)]
        rules = config.game.to_rules(
            num_decks=args.decks,
            min_bet=args.min_bet,
            starting_balance=args.balance,
            dealer_hits_soft_17=False if args.stand_soft_17 else None,
            max_rounds=args.max_rounds,
        )
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    usage = UsageTracker()
    table = Table(rules, events=EventEmitter(keep_history=False))
    try:
        providers = seat_players(table, specs, usage, config.llm)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    started = time.monotonic()
    with Transcript.to_file(
        args.results_dir, echo=not args.quiet, keep_lines=False
    ) as transcript:
        transcript.attach(table.events)
        try:
            table.play_until_one_remaining()
        finally:
            close_providers(providers)

        elapsed = timedelta(seconds=int(time.monotonic() - started))
        transcript.write()
        transcript.write(usage.summary())
        transcript.write(f"Game duration: {elapsed}")
        logger.info("Game log saved to: %s", transcript.path)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
