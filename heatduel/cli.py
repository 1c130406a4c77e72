"""
Heat Duel CLI - Command-line interface for the engine.

Usage:
    heatduel play [--mode classic|simultaneous] [--policy NAME]    Bot vs bot duel
    heatduel serve [--host HOST] [--port PORT]                     Run the HTTP API
"""

import argparse
import logging
import sys

from .config import Settings


def main(argv=None):
    """Main CLI entry point."""
    settings = Settings.from_env()

    parser = argparse.ArgumentParser(
        description="Heat Duel - Two-player heat card duel",
        prog="heatduel",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: HEATDUEL_LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Play command
    play_parser = subparsers.add_parser("play", help="Run a bot vs bot duel and print the log")
    play_parser.add_argument("--mode", choices=["classic", "simultaneous"], default="classic")
    play_parser.add_argument(
        "--policy", choices=["first_attack", "first_legal", "random"], default="first_attack",
    )
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for random bots")
    play_parser.add_argument("--deck-p1", help="JSON deck file for p1 (default: standard deck)")
    play_parser.add_argument("--deck-p2", help="JSON deck file for p2 (default: standard deck)")
    play_parser.add_argument("--copies", type=int, default=2,
                             help="Copies of each standard card in a default deck")
    play_parser.add_argument("--max-turns", type=int, default=settings.max_auto_turns,
                             help="Stop after this many turns")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "play":
        return cmd_play(args, settings)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def cmd_play(args, settings):
    """Run a bot vs bot duel."""
    from .decks import DeckFormatError, load_deck, standard_deck
    from .session import SessionManager, GameLoop, LoopState

    try:
        deck_p1 = load_deck(args.deck_p1) if args.deck_p1 else standard_deck(args.copies)
        deck_p2 = load_deck(args.deck_p2) if args.deck_p2 else standard_deck(args.copies)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        return 1
    except DeckFormatError as e:
        print(f"Error: {e}", file=sys.stderr)
        for detail in e.errors:
            print(f"  - {detail}", file=sys.stderr)
        return 1

    manager = SessionManager(settings=settings)
    session = manager.create_session(
        deck_p1,
        deck_p2,
        mode=args.mode,
        bot_sides=("p1", "p2"),
        policy=args.policy,
        seed=args.seed,
    )
    loop = GameLoop(session, max_auto_turns=args.max_turns)
    result = loop.start()

    for line in session.engine.log:
        print(line)

    print()
    if result.loop_state is LoopState.GAME_OVER:
        print(f"Winner: {result.winner}")
    else:
        print(f"No winner ({result.loop_state.value})")
    for warning in result.warnings:
        print(f"  - {warning}")

    manager.end_session(session.session_id)
    return 0


def cmd_serve(args):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("heatduel.api.app:app", host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
