"""
Player model for Da Vinci Code.

A player owns a sorted hand and, during their own turn, at most one
pending card drawn from the deck that joins the hand when the turn ends.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from davinci.deck import Card, card_str, sort_hand


class Player:
    def __init__(self, player_id: int, name: str, hand: Optional[List[Card]] = None):
        self.id = player_id
        self.name = name
        self.hand: List[Card] = sort_hand(hand or [])
        self.drawn_card: Optional[Card] = None

    def __repr__(self):
        return f"Player({self.id}, {self.name!r}, {[card_str(c) for c in self.hand]})"

    def has_hidden_cards(self) -> bool:
        return any(not card.revealed for card in self.hand)

    def hidden_count(self) -> int:
        return sum(1 for card in self.hand if not card.revealed)

    def all_revealed(self) -> bool:
        return not self.has_hidden_cards()

    def resort(self):
        self.hand = sort_hand(self.hand)

    def reveal(self, card_index: int) -> Card:
        """Flip one of this player's cards face up and return it."""
        card = self.hand[card_index]
        card.revealed = True
        self.resort()
        return card

    def merge_drawn_card(self) -> Optional[Card]:
        """Move the pending drawn card into the hand, face down."""
        card = self.drawn_card
        if card is None:
            return None
        card.revealed = False
        self.hand.append(card)
        self.drawn_card = None
        self.resort()
        logging.debug(f"{self.name} merges {card_str(card)} into hand")
        return card

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'hand': [card.to_dict() for card in self.hand],
            'drawn_card': self.drawn_card.to_dict() if self.drawn_card else None,
            'hidden_count': self.hidden_count(),
        }


def default_name(player_id: int) -> str:
    return f"Player {player_id + 1}"


def create_players(hands: Sequence[List[Card]], names: Optional[Sequence[str]] = None) -> List[Player]:
    """Seat one player per hand; missing or blank names fall back to 'Player N'."""
    names = list(names or [])
    players = []
    for i, hand in enumerate(hands):
        name = names[i].strip() if i < len(names) and names[i].strip() else default_name(i)
        players.append(Player(i, name, hand))
    return players
