"""
Entry point for Da Vinci Code
Starts a hot-seat game in the local terminal.
"""

import argparse
import logging
import sys

from davinci.game_engine import GameEngine
from davinci.session import ConsoleSession
from davinci.settings import get_settings, parse_names
from davinci.terminal_ui import Colors, TerminalUI
from davinci.version import VERSION


def build_parser(settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play Da Vinci Code in your terminal")
    parser.add_argument("--players", type=int, choices=(2, 3, 4), default=settings['players'],
                        help="Number of players (2-4)")
    parser.add_argument("--seed", type=int, default=settings['seed'], help="Seed for a reproducible deal")
    parser.add_argument("--names", default=None, help="Comma separated player names")
    parser.add_argument("--reveal-all", action="store_true", help="Debug: show every card")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(argv=None) -> int:
    try:
        settings = get_settings()
    except ValueError as e:
        print(f"❌ Error: {e}")
        return 2

    args = build_parser(settings).parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=getattr(logging, settings['log_level'], logging.INFO))

    if args.no_color:
        Colors.disable()

    settings['seed'] = args.seed
    names = parse_names(args.names) if args.names is not None else settings['player_names']

    engine = GameEngine(seed=args.seed)
    session = ConsoleSession(engine, TerminalUI(reveal_all=args.reveal_all), clear_screen=not args.debug)
    try:
        session.run(args.players, names, settings)
    except KeyboardInterrupt:
        print("\n👋 Leaving the table...")
    return 0


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
