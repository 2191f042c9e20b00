"""
Terminal UI renderer for Da Vinci Code with colours and cards.

This keeps presentation logic out of the engine: the session calls
`TerminalUI.render(state)` with an engine snapshot and prints the string.
Which card values are shown is decided here, never in the engine.
"""

from .ui.colors import Colors
from .ui.cards import cards_horizontal
from .visibility import card_visible

# phase -> hint line listing the commands that make sense there
ACTION_HINTS = {
    'awaiting_draw': "draw",
    'awaiting_color_choice': "black, white",
    'awaiting_guess_or_end_turn': "guess, target <player> <card>, end",
    'awaiting_guess_target': "target <player> <card>, cancel",
    'awaiting_guess_value': "value <0-11>, target <player> <card>, cancel",
    'awaiting_penalty_card_choice': "penalty <card>",
    'awaiting_penalty_confirmation': "confirm",
    'game_over': "reset [players], quit",
}
EMPTY_DECK_HINT = "guess, target <player> <card>, end"


class TerminalUI:
    def __init__(self, reveal_all: bool = False):
        self.self_reveal = False  # current player peeking at their own hand
        self.reveal_all = reveal_all  # debug: show every card

    def toggle_self_reveal(self) -> str:
        """Toggle the current player's view of their own hidden cards."""
        self.self_reveal = not self.self_reveal
        if self.self_reveal:
            return f"{Colors.GREEN}👀 Your cards are now visible to you{Colors.RESET}"
        return f"{Colors.YELLOW}🙈 Your cards are hidden again{Colors.RESET}"

    def toggle_reveal_all(self) -> str:
        self.reveal_all = not self.reveal_all
        if self.reveal_all:
            return f"{Colors.MAGENTA}🔍 DEBUG: all cards shown{Colors.RESET}"
        return f"{Colors.MAGENTA}🔍 DEBUG: hidden cards concealed{Colors.RESET}"

    def hide_for_handover(self):
        # the next player must not inherit the previous player's peek
        self.self_reveal = False

    def render_hand(self, player: dict, viewer_id, selection=None) -> str:
        cards = player['hand']
        visible = [
            card_visible(c, player['id'], viewer_id, self.self_reveal, self.reveal_all)
            for c in cards
        ]
        markers = []
        for idx in range(len(cards)):
            selected = (selection and selection['player_id'] == player['id']
                        and selection['card_index'] == idx)
            markers.append(f"^{idx + 1}^" if selected else str(idx + 1))
        return cards_horizontal(cards, visible, markers)

    def render(self, game_state: dict, viewer_id=None, clear: bool = True) -> str:
        """Render the snapshot as a colorized string; `viewer_id` defaults to the current player."""
        out = []
        if clear:
            out.append(Colors.CLEAR_SCREEN)
        out.append(f"{Colors.BOLD}{Colors.YELLOW}🔐 DA VINCI CODE 🔐{Colors.RESET}")
        out.append("")

        if not game_state.get('started'):
            out.append(f"{Colors.DIM}{game_state.get('message', '')}{Colors.RESET}")
            return "\n".join(out)

        current = game_state['current_player']
        if viewer_id is None:
            viewer_id = current

        if game_state.get('game_over'):
            winner = game_state.get('winner_name')
            if winner:
                out.append(f"{Colors.BOLD}{Colors.GREEN}🏆 GAME OVER: {winner} wins!{Colors.RESET}")
            else:
                out.append(f"{Colors.BOLD}{Colors.YELLOW}🤝 GAME OVER: it's a draw.{Colors.RESET}")
        else:
            out.append(f"{Colors.BOLD}{Colors.CYAN}🎯 {game_state['current_player_name']}'s turn "
                       f"(turn {game_state['turn_number']}){Colors.RESET}")
        out.append("")

        deck_size = game_state['deck_size']
        deck_colors = game_state['deck_colors']
        if deck_size:
            out.append(f"{Colors.BOLD}🂠 Deck: {deck_size} cards{Colors.RESET} "
                       f"{Colors.DIM}(black {deck_colors['black']}, white {deck_colors['white']}){Colors.RESET}")
        else:
            out.append(f"{Colors.BOLD}{Colors.RED}🂠 Deck: empty{Colors.RESET}")
        out.append("")

        selection = game_state.get('guess_target')
        for player in game_state['players']:
            is_current = player['id'] == current
            marker = " 🎯" if is_current else ""
            hidden = player['hidden_count']
            out.append(f"{Colors.BOLD}{Colors.CYAN}{player['id'] + 1}. {player['name']}{Colors.RESET}"
                       f"{Colors.DIM} ({hidden} hidden){Colors.RESET}{marker}")
            out.append(self.render_hand(player, viewer_id, selection))

            drawn = player.get('drawn_card')
            if drawn:
                shown = self.reveal_all or player['id'] == viewer_id
                out.append(f"{Colors.DIM}  drawn this turn:{Colors.RESET}")
                out.append(cards_horizontal([drawn], [shown], ['new']))
            out.append("")

        phase = game_state.get('phase') or 'unknown'
        out.append(f"{Colors.DIM}Phase: {phase.replace('_', ' ').title()}{Colors.RESET}")

        message = game_state.get('message')
        if message:
            out.append(f"{Colors.BOLD}{message}{Colors.RESET}")

        history = game_state.get('action_history') or []
        if history:
            out.append("")
            out.append(f"{Colors.BOLD}{Colors.CYAN}📜 Recent Actions:{Colors.RESET}")
            for action in history[-5:]:
                out.append(f"{Colors.DIM}  {action}{Colors.RESET}")

        out.append("")
        hint = ACTION_HINTS.get(phase, '')
        if phase == 'awaiting_draw' and deck_size == 0:
            hint = EMPTY_DECK_HINT
        out.append(f"{Colors.BOLD}Available actions: {Colors.GREEN}{hint}{Colors.RESET}"
                   f"{Colors.DIM} (peek, help, quit){Colors.RESET}")

        return "\n".join(out)
