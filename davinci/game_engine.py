"""
Turn state machine for Da Vinci Code.

GameEngine owns the single Game aggregate and is the only thing that
mutates it. Each command checks its preconditions and raises a GameError
before changing anything, so a rejected command leaves the game exactly
as it was. `dispatch` wraps the commands for callers that prefer result
dicts over exceptions.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional, Sequence

from davinci.deck import (
    COLORS, MAX_VALUE, MIN_VALUE, available_colors, card_str,
    count_color, create_rng, create_shuffled_deck, draw_color,
)
from davinci.distribution import deal_initial_hands, validate_player_count
from davinci.errors import (
    CannotGuessSelf, CardAlreadyRevealed, GameError, IllegalPhaseTransition,
    InvalidGuessValue, InvalidPenaltySelection, InvalidTarget, MustDrawFirst,
    NoCardsOfColor,
)
from davinci.game_state import Game, Phase
from davinci.player import create_players

DEFAULT_PLAYER_COUNT = 3

GUESS_PHASES = (
    Phase.AWAITING_GUESS_OR_END_TURN,
    Phase.AWAITING_GUESS_TARGET,
    Phase.AWAITING_GUESS_VALUE,
)

COMMANDS = (
    'start_game', 'reset_game', 'draw', 'choose_draw_color', 'begin_guess',
    'select_guess_target', 'submit_guess', 'cancel_guess',
    'select_penalty_card', 'confirm_penalty_and_end_turn', 'end_turn',
)


def describe_card(card) -> str:
    return f"{card.color} {card.value}"


class GameEngine:
    """Command/query API over one Da Vinci Code game."""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        self.rng = rng if rng is not None else create_rng(seed)
        self.game: Optional[Game] = None
        self.names: List[str] = []

    # ---------------------
    # STATE HELPERS
    # ---------------------

    def get_public_state(self) -> Dict[str, Any]:
        """Snapshot of the game with true card values; hiding is up to the caller."""
        if self.game is None:
            return {'started': False, 'players': [], 'phase': None, 'game_over': False,
                    'message': 'No game in progress.', 'action_history': []}
        state = self.game.to_dict()
        state['started'] = True
        state['available_actions'] = self.available_actions()
        return state

    def available_actions(self) -> List[str]:
        """Commands that are legal right now (selection arguments aside)."""
        game = self.game
        if game is None or game.game_over:
            return ['start_game', 'reset_game']
        phase = game.phase
        actions = []
        if phase == Phase.AWAITING_DRAW:
            if game.deck_empty():
                actions += ['begin_guess', 'select_guess_target', 'end_turn']
            else:
                actions.append('draw')
        elif phase == Phase.AWAITING_COLOR_CHOICE:
            actions.append('choose_draw_color')
        elif phase == Phase.AWAITING_GUESS_OR_END_TURN:
            actions += ['begin_guess', 'select_guess_target', 'end_turn']
        elif phase == Phase.AWAITING_GUESS_TARGET:
            actions += ['select_guess_target', 'cancel_guess']
        elif phase == Phase.AWAITING_GUESS_VALUE:
            actions += ['submit_guess', 'select_guess_target', 'cancel_guess']
        elif phase == Phase.AWAITING_PENALTY_CARD_CHOICE:
            actions.append('select_penalty_card')
        elif phase == Phase.AWAITING_PENALTY_CONFIRMATION:
            actions.append('confirm_penalty_and_end_turn')
        return actions + ['reset_game']

    def _log(self, msg: str):
        logging.info(f"[ENGINE] {msg}")
        self.game.action_history.append(msg)
        self.game.message = msg

    def _say(self, msg: str):
        # prompt only, not part of the game record
        logging.debug(f"[ENGINE] {msg}")
        self.game.message = msg

    def _require_game(self) -> Game:
        if self.game is None:
            raise IllegalPhaseTransition("No game in progress. Start a game first.")
        return self.game

    def _require_phase(self, action: str, *phases: Phase) -> Game:
        game = self._require_game()
        if game.game_over:
            raise IllegalPhaseTransition("The game is over. Reset to play again.")
        if game.phase not in phases:
            raise IllegalPhaseTransition(
                f"Cannot {action} while the game is {game.phase.value.replace('_', ' ')}."
            )
        return game

    def _turn_prompt(self) -> str:
        game = self.game
        name = game.current_player.name
        if game.deck_empty():
            return f"{name}'s turn. The deck is empty: guess a card or end your turn."
        return f"{name}'s turn. Draw a card."

    # ---------------------
    # GAME LIFECYCLE
    # ---------------------

    def start_game(self, player_count: int, names: Optional[Sequence[str]] = None) -> Dict[str, Any]:
        validate_player_count(player_count)

        deck = create_shuffled_deck(self.rng)
        hands = deal_initial_hands(deck, player_count, self.rng)
        self.names = list(names or [])
        self.game = Game(create_players(hands, self.names), deck)

        logging.info(f"[ENGINE] New game with {player_count} players, {len(deck)} cards in deck")
        self._log(f"Game started with {player_count} players.")
        self._say(self._turn_prompt())
        return {'ok': True, 'player_count': player_count}

    def reset_game(self, player_count: Optional[int] = None) -> Dict[str, Any]:
        """Throw the current game away and deal a fresh one."""
        if player_count is None:
            player_count = self.game.player_count if self.game else DEFAULT_PLAYER_COUNT
        validate_player_count(player_count)
        logging.info("[ENGINE] Game reset")
        return self.start_game(player_count, self.names)

    # ---------------------
    # DRAW PHASE
    # ---------------------

    def draw(self) -> Dict[str, Any]:
        game = self._require_phase('draw', Phase.AWAITING_DRAW)
        player = game.current_player
        if player.drawn_card is not None:
            raise IllegalPhaseTransition("You already drew a card this turn. Guess or end your turn.")

        if game.deck_empty():
            self._say("The deck is empty! There are no more cards to draw.")
            return {'drawn': None, 'deck_empty': True}

        colors = available_colors(game.deck)
        if len(colors) == 1:
            logging.debug(f"[ENGINE] Only {colors[0]} cards left, color is forced")
            return self._draw_color(colors[0], forced=True)

        game.phase = Phase.AWAITING_COLOR_CHOICE
        self._say(f"{player.name}, choose a color to draw.")
        return {'drawn': None, 'choose_color': True}

    def choose_draw_color(self, color: str) -> Dict[str, Any]:
        game = self._require_phase('choose a draw color', Phase.AWAITING_COLOR_CHOICE)
        color = str(color).lower()
        if color not in COLORS or count_color(game.deck, color) == 0:
            raise NoCardsOfColor(f"There are no {color} cards left in the deck.")
        return self._draw_color(color)

    def _draw_color(self, color: str, forced: bool = False) -> Dict[str, Any]:
        game = self.game
        player = game.current_player
        card = draw_color(game.deck, color, self.rng)
        player.drawn_card = card
        game.phase = Phase.AWAITING_GUESS_OR_END_TURN
        logging.debug(f"[ENGINE] {player.name} drew {card_str(card)}, {len(game.deck)} left")
        self._log(f"{player.name} drew a {color} card.")
        self._say(f"{player.name} drew a {color} card. Guess a card or end your turn.")
        return {'drawn': card.to_dict(), 'forced': forced}

    # ---------------------
    # GUESS PHASE
    # ---------------------

    def _check_may_guess(self, game: Game):
        if game.current_player.drawn_card is None and not game.deck_empty():
            raise MustDrawFirst("Draw a card before making a guess.")

    def begin_guess(self) -> Dict[str, Any]:
        game = self._require_phase('start a guess', Phase.AWAITING_GUESS_OR_END_TURN, Phase.AWAITING_DRAW)
        self._check_may_guess(game)
        game.phase = Phase.AWAITING_GUESS_TARGET
        self._say(f"{game.current_player.name}, pick an opponent's hidden card to guess.")
        return {'ok': True}

    def select_guess_target(self, player_id: int, card_index: int) -> Dict[str, Any]:
        game = self._require_game()
        player = game.current_player
        if player_id == player.id:
            raise CannotGuessSelf("You cannot guess your own cards.")
        self._require_phase('pick a card to guess', Phase.AWAITING_DRAW, *GUESS_PHASES)
        self._check_may_guess(game)

        target = game.get_player(player_id)
        if target is None:
            raise InvalidTarget(f"There is no player {player_id}.")
        if not 0 <= card_index < len(target.hand):
            raise InvalidTarget(f"{target.name} has no card #{card_index + 1}.")
        if target.hand[card_index].revealed:
            raise CardAlreadyRevealed("That card is already revealed. Pick another card to guess.")

        game.guess_player_id = player_id
        game.guess_card_index = card_index
        game.phase = Phase.AWAITING_GUESS_VALUE
        self._say(f"{player.name}: guessing card #{card_index + 1} of {target.name}. "
                  f"Enter a value from {MIN_VALUE} to {MAX_VALUE}.")
        return {'ok': True, 'player_id': player_id, 'card_index': card_index}

    def submit_guess(self, value: int) -> Dict[str, Any]:
        game = self._require_phase('submit a guess', Phase.AWAITING_GUESS_VALUE)
        if isinstance(value, bool) or not isinstance(value, int) or not MIN_VALUE <= value <= MAX_VALUE:
            raise InvalidGuessValue(f"Guess a value from {MIN_VALUE} to {MAX_VALUE}.")

        player = game.current_player
        target = game.get_player(game.guess_player_id)
        card_index = game.guess_card_index
        card = target.hand[card_index]
        game.clear_selection()

        if value == card.value:
            target.reveal(card_index)
            game.phase = Phase.AWAITING_GUESS_OR_END_TURN
            self._log(f"Correct! {player.name} revealed {target.name}'s {describe_card(card)}.")
            self._say(f"Correct! {player.name} revealed {target.name}'s {describe_card(card)}. "
                      f"Guess again or end your turn.")
            return {'correct': True, 'card': card.to_dict()}

        self._log(f"{player.name} guessed {value} for {target.name}'s card #{card_index + 1}: wrong.")

        if player.all_revealed():
            self._log(f"{player.name} has no hidden cards left to reveal.")
            self._advance_turn()
            return {'correct': False, 'penalty': False}

        game.phase = Phase.AWAITING_PENALTY_CARD_CHOICE
        self._say(f"Wrong guess! {player.name}, choose one of your hidden cards to reveal.")
        return {'correct': False, 'penalty': True}

    def cancel_guess(self) -> Dict[str, Any]:
        game = self._require_phase('cancel a guess', Phase.AWAITING_GUESS_TARGET, Phase.AWAITING_GUESS_VALUE)
        game.clear_selection()
        game.phase = Phase.AWAITING_GUESS_OR_END_TURN
        self._say(f"Guess cancelled. {game.current_player.name}, guess a card or end your turn.")
        return {'ok': True}

    # ---------------------
    # PENALTY PHASE
    # ---------------------

    def select_penalty_card(self, card_index: int) -> Dict[str, Any]:
        game = self._require_phase('reveal a penalty card', Phase.AWAITING_PENALTY_CARD_CHOICE)
        player = game.current_player
        if not 0 <= card_index < len(player.hand) or player.hand[card_index].revealed:
            raise InvalidPenaltySelection("Invalid choice. Pick one of your own hidden cards.")

        card = player.reveal(card_index)
        game.phase = Phase.AWAITING_PENALTY_CONFIRMATION
        self._log(f"{player.name} revealed their {describe_card(card)}.")
        self._say(f"{player.name} revealed their {describe_card(card)}. Confirm to end the turn.")
        return {'card': card.to_dict()}

    def confirm_penalty_and_end_turn(self) -> Dict[str, Any]:
        self._require_phase('confirm the penalty', Phase.AWAITING_PENALTY_CONFIRMATION)
        return self._advance_turn()

    # ---------------------
    # TURN CONTROL
    # ---------------------

    def end_turn(self) -> Dict[str, Any]:
        game = self._require_game()
        if game.phase == Phase.AWAITING_DRAW and not game.deck_empty():
            raise MustDrawFirst("Draw a card before ending your turn.")
        self._require_phase('end the turn', Phase.AWAITING_GUESS_OR_END_TURN, Phase.AWAITING_DRAW)
        return self._advance_turn()

    def _advance_turn(self) -> Dict[str, Any]:
        game = self.game
        player = game.current_player
        player.merge_drawn_card()
        game.clear_selection()

        game.current_player_index = (game.current_player_index + 1) % game.player_count
        game.turn_number += 1
        game.phase = Phase.AWAITING_DRAW
        logging.debug(f"[ENGINE] Turn passes from {player.name} to {game.current_player.name}")

        self._say(self._turn_prompt())
        self._evaluate_end_of_round()
        return {'next_player': game.current_player.id, 'game_over': game.game_over,
                'winner': game.winner.id if game.winner else None}

    def _evaluate_end_of_round(self):
        game = self.game
        if not game.deck_empty():
            return

        remaining = game.players_with_hidden_cards()
        if len(remaining) == 1:
            game.winner = remaining[0]
            game.phase = Phase.GAME_OVER
            self._log(f"{game.winner.name} wins! Every other player's cards are revealed.")
        elif not remaining:
            game.phase = Phase.GAME_OVER
            self._log("Every card is revealed and the deck is empty. The game is a draw!")

    # ---------------------
    # DISPATCH
    # ---------------------

    def dispatch(self, command: str, *args) -> Dict[str, Any]:
        """Run a command by name and report the outcome instead of raising.

        Returns {'ok': True, 'result': ..., 'state': ...} or
        {'ok': False, 'error': kind, 'message': ..., 'state': ...}.
        """
        if command not in COMMANDS:
            raise ValueError(f"Unknown command: {command}")

        try:
            result = getattr(self, command)(*args)
        except GameError as e:
            logging.debug(f"[ENGINE] {command}{args} rejected: {e.kind.value}: {e.message}")
            return {'ok': False, **e.to_dict(), 'state': self.get_public_state()}
        return {'ok': True, 'result': result, 'state': self.get_public_state()}
