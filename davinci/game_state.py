"""
Game aggregate for Da Vinci Code.

Holds everything the turn state machine mutates: seats, deck, phase,
the in-progress guess selection and the narration log. GameEngine is the
only writer; everything else reads `to_dict()` snapshots.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from davinci.deck import BLACK, WHITE, Card, count_color
from davinci.player import Player


class Phase(str, Enum):
    AWAITING_DRAW = 'awaiting_draw'
    AWAITING_COLOR_CHOICE = 'awaiting_color_choice'
    AWAITING_GUESS_OR_END_TURN = 'awaiting_guess_or_end_turn'
    AWAITING_GUESS_TARGET = 'awaiting_guess_target'
    AWAITING_GUESS_VALUE = 'awaiting_guess_value'
    AWAITING_PENALTY_CARD_CHOICE = 'awaiting_penalty_card_choice'
    AWAITING_PENALTY_CONFIRMATION = 'awaiting_penalty_confirmation'
    GAME_OVER = 'game_over'


class Game:
    """Mutable state of one game, from the deal to game over."""

    def __init__(self, players: List[Player], deck: List[Card]):
        self.players = players
        self.deck = deck
        self.current_player_index = 0
        self.phase = Phase.AWAITING_DRAW
        self.message = ''
        self.action_history: List[str] = []
        self.winner: Optional[Player] = None
        self.guess_player_id: Optional[int] = None
        self.guess_card_index: Optional[int] = None
        self.turn_number = 1

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def game_over(self) -> bool:
        return self.phase == Phase.GAME_OVER

    def deck_empty(self) -> bool:
        return not self.deck

    def get_player(self, player_id: int) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def players_with_hidden_cards(self) -> List[Player]:
        return [p for p in self.players if p.has_hidden_cards()]

    def clear_selection(self):
        self.guess_player_id = None
        self.guess_card_index = None

    def all_cards(self) -> List[Card]:
        """Every card in play: deck, hands and pending drawn cards."""
        cards = list(self.deck)
        for p in self.players:
            cards.extend(p.hand)
            if p.drawn_card is not None:
                cards.append(p.drawn_card)
        return cards

    def to_dict(self) -> Dict[str, Any]:
        return {
            'players': [p.to_dict() for p in self.players],
            'current_player': self.current_player.id,
            'current_player_name': self.current_player.name,
            'deck_size': len(self.deck),
            'deck_colors': {BLACK: count_color(self.deck, BLACK), WHITE: count_color(self.deck, WHITE)},
            'phase': self.phase.value,
            'message': self.message,
            'action_history': list(self.action_history),
            'winner': self.winner.id if self.winner else None,
            'winner_name': self.winner.name if self.winner else None,
            'game_over': self.game_over,
            'guess_target': (
                {'player_id': self.guess_player_id, 'card_index': self.guess_card_index}
                if self.guess_player_id is not None else None
            ),
            'turn_number': self.turn_number,
        }
