"""
Gem Hall CLI - Command-line interface for the engine.

Usage:
    gemhall simulate --games 100 --difficulties easy medium hard
    gemhall serve [--host HOST] [--port PORT]
"""

import argparse
import logging
import sys

from .config import get_settings
from .bots import Difficulty


def main(argv=None):
    """Main CLI entry point."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Gem Hall - gem trading card game with computer opponents",
        prog="gemhall",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser(
        "simulate", help="Play computer-only games and report balance statistics"
    )
    simulate_parser.add_argument("--games", "-n", type=int, default=100, help="Number of games")
    simulate_parser.add_argument(
        "--difficulties", "-d",
        nargs="+",
        default=["easy", "medium", "hard"],
        choices=[d.value for d in Difficulty],
        help="One difficulty per seat (2-4 seats)",
    )
    simulate_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    simulate_parser.add_argument(
        "--max-turns", type=int, default=None, help="Per-game safety bound on turns"
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=settings.host, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=settings.port, help="Bind port")

    args = parser.parse_args(argv)

    if args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "serve":
        cmd_serve(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_simulate(args):
    """Run a batch of computer-only games."""
    from .session import run_simulation

    if not 2 <= len(args.difficulties) <= 4:
        print("Error: a game needs 2-4 players")
        sys.exit(1)
    if args.games < 1:
        print("Error: --games must be at least 1")
        sys.exit(1)

    print(f"Simulating {args.games} games...")
    report = run_simulation(
        args.difficulties,
        args.games,
        seed=args.seed,
        max_chain_turns=args.max_turns,
    )
    print(report.format())


def cmd_serve(args):
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "gemhall.api.app:app",
        host=args.host,
        port=args.port,
        log_level=get_settings().log_level.lower(),
    )


if __name__ == "__main__":
    main()
