"""
Command handlers for the Da Vinci Code console session.

Turns typed lines into engine commands. Players and cards are numbered
from 1 on screen and converted to 0-based ids here.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from davinci.session import ConsoleSession

from davinci.terminal_ui import Colors

HELP_LINES = [
    ("draw", "draw a card (you pick the color when both are left)"),
    ("black | white", "choose the color to draw"),
    ("guess", "start a guess"),
    ("guess <player> <card> <value>", "guess a card's value in one go"),
    ("target <player> <card>", "pick an opponent's hidden card to guess"),
    ("value <0-11>", "submit your guess for the picked card"),
    ("cancel", "cancel the current guess"),
    ("penalty <card>", "reveal one of your own hidden cards after a wrong guess"),
    ("confirm", "confirm the penalty reveal and end your turn"),
    ("end", "end your turn (your drawn card joins your hand)"),
    ("peek", "show/hide your own hidden cards"),
    ("debug", "show/hide every card (debug)"),
    ("log", "show the full game log"),
    ("reset [players]", "deal a new game"),
    ("quit", "leave the game"),
]


def parse_numbers(args: List[str]) -> Optional[List[int]]:
    try:
        return [int(a) for a in args]
    except ValueError:
        return None


class CommandHandler:
    """Handles command processing for a console session."""

    def __init__(self, session: 'ConsoleSession'):
        self.session = session

    @property
    def engine(self):
        return self.session.engine

    def process_command(self, cmd: str) -> bool:
        """Process one typed line. Returns True when the board should be redrawn."""
        logging.debug(f"Console command: '{cmd}'")
        parts = cmd.strip().lower().split()
        if not parts:
            return False
        name, args = parts[0], parts[1:]

        if name in ("quit", "exit"):
            self.session.stop()
            return False

        if name == "help":
            self.show_help()
            return False

        if name == "log":
            self.show_log()
            return False

        if name in ("peek", "togglecards", "tgc"):
            self.session.write(self.session.ui.toggle_self_reveal())
            return True

        if name == "debug":
            self.session.write(self.session.ui.toggle_reveal_all())
            return True

        if name == "draw":
            return self.run("draw")

        if name in ("black", "white"):
            return self.run("choose_draw_color", name)

        if name == "color" and len(args) == 1:
            return self.run("choose_draw_color", args[0])

        if name == "guess":
            return self.handle_guess(args)

        if name == "target":
            return self.handle_target(args)

        if name == "value":
            return self.handle_value(args)

        if name == "cancel":
            return self.run("cancel_guess")

        if name in ("penalty", "reveal"):
            return self.handle_penalty(args)

        if name == "confirm":
            return self.run("confirm_penalty_and_end_turn")

        if name in ("end", "pass"):
            return self.run("end_turn")

        if name == "reset":
            return self.handle_reset(args)

        # a bare number answers the value prompt
        if len(parts) == 1 and name.isdigit() and self.engine.get_public_state().get('phase') == 'awaiting_guess_value':
            return self.handle_value(parts)

        logging.debug(f"Unknown console command: {cmd}")
        self.session.write(f"❓ Unknown command: {cmd}")
        self.session.write(f"💡 Type '{Colors.GREEN}help{Colors.RESET}' for available commands.")
        return False

    def run(self, command: str, *args) -> bool:
        """Send a command to the engine and report a rejection in red."""
        before = self.engine.get_public_state()
        outcome = self.engine.dispatch(command, *args)
        if not outcome['ok']:
            self.session.write(f"❌ {Colors.RED}{outcome['message']}{Colors.RESET}")
            return False
        state = outcome['state']
        if state.get('current_player') != before.get('current_player'):
            self.session.ui.hide_for_handover()
        return True

    def usage(self, text: str) -> bool:
        self.session.write(f"💡 Usage: {Colors.GREEN}{text}{Colors.RESET}")
        return False

    def handle_guess(self, args: List[str]) -> bool:
        if not args:
            return self.run("begin_guess")
        numbers = parse_numbers(args)
        if numbers is None or len(numbers) != 3:
            return self.usage("guess <player> <card> <value>")
        player, card, value = numbers
        if not self.run("select_guess_target", player - 1, card - 1):
            return False
        self.run("submit_guess", value)
        return True

    def handle_target(self, args: List[str]) -> bool:
        numbers = parse_numbers(args)
        if numbers is None or len(numbers) != 2:
            return self.usage("target <player> <card>")
        return self.run("select_guess_target", numbers[0] - 1, numbers[1] - 1)

    def handle_value(self, args: List[str]) -> bool:
        numbers = parse_numbers(args)
        if numbers is None or len(numbers) != 1:
            return self.usage("value <0-11>")
        return self.run("submit_guess", numbers[0])

    def handle_penalty(self, args: List[str]) -> bool:
        numbers = parse_numbers(args)
        if numbers is None or len(numbers) != 1:
            return self.usage("penalty <card>")
        return self.run("select_penalty_card", numbers[0] - 1)

    def handle_reset(self, args: List[str]) -> bool:
        numbers = parse_numbers(args)
        if numbers is None or len(numbers) > 1:
            return self.usage("reset [players]")
        self.session.ui.hide_for_handover()
        return self.run("reset_game", *numbers)

    def show_help(self):
        self.session.write(f"{Colors.BOLD}{Colors.CYAN}Commands:{Colors.RESET}")
        for usage, text in HELP_LINES:
            self.session.write(f"  {Colors.GREEN}{usage:<30}{Colors.RESET} {text}")

    def show_log(self):
        history = self.engine.get_public_state().get('action_history') or []
        if not history:
            self.session.write(f"{Colors.DIM}Nothing has happened yet.{Colors.RESET}")
            return
        for i, entry in enumerate(history, 1):
            self.session.write(f"{Colors.DIM}{i:>3}.{Colors.RESET} {entry}")
