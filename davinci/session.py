"""
Local hot-seat console session for Da Vinci Code.

Reads one command per line from an input stream, feeds it to the
CommandHandler and redraws the board. Input and output streams are
injectable so the whole loop can be driven from tests.
"""

import logging
import sys
from typing import Optional, TextIO

from davinci.commands import CommandHandler
from davinci.game_engine import GameEngine
from davinci.settings import format_banner
from davinci.version import get_version_info
from davinci.terminal_ui import Colors, TerminalUI


class ConsoleSession:
    """Session handler for players sharing one terminal."""

    def __init__(self, engine: GameEngine, ui: Optional[TerminalUI] = None,
                 stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None,
                 clear_screen: bool = True):
        self.engine = engine
        self.ui = ui or TerminalUI()
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._running = False
        self._clear_screen = clear_screen
        self.handler = CommandHandler(self)

    def write(self, text: str):
        self._stdout.write(text + "\n")
        self._stdout.flush()

    def stop(self):
        logging.debug("Console session stopping")
        self._running = False
        self.write("Goodbye!")

    @property
    def running(self) -> bool:
        return self._running

    def redraw(self):
        self.write(self.ui.render(self.engine.get_public_state(), clear=self._clear_screen))

    def prompt(self):
        self._stdout.write("❯ ")
        self._stdout.flush()

    def run(self, player_count: int, names=None, settings=None):
        """Deal a game and play until `quit` or end of input."""
        self.write(format_banner(settings or get_version_info()))
        outcome = self.engine.dispatch('start_game', player_count, names)
        if not outcome['ok']:
            self.write(f"❌ {Colors.RED}{outcome['message']}{Colors.RESET}")
            return
        self.write(f"💡 Type '{Colors.GREEN}help{Colors.RESET}' for commands.")
        self.redraw()

        self._running = True
        while self._running:
            self.prompt()
            line = self._stdin.readline()
            if not line:
                logging.debug("End of input, leaving session")
                self._running = False
                break
            if self.handler.process_command(line):
                self.redraw()
                if self.engine.get_public_state().get('game_over'):
                    self.write(f"💡 Type '{Colors.GREEN}reset{Colors.RESET}' to play again "
                               f"or '{Colors.GREEN}quit{Colors.RESET}' to leave.")
