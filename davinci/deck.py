"""
Deck and card operations for Da Vinci Code.

The deck holds one card of each value 0..11 in each of the two colors.
All randomness goes through an injected random.Random so games can be
replayed from a seed.
"""

import random
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

BLACK = 'black'
WHITE = 'white'
COLORS = (BLACK, WHITE)

MIN_VALUE = 0
MAX_VALUE = 11

COLOR_NAMES = {BLACK: 'Black', WHITE: 'White'}


@dataclass
class Card:
    """A numbered card; identity is (color, value), `revealed` is table state."""

    color: str
    value: int
    revealed: bool = field(default=False, compare=False)

    def __hash__(self):
        return hash((self.color, self.value))

    @property
    def key(self):
        return (self.color, self.value)

    def to_dict(self) -> dict:
        return {'color': self.color, 'value': self.value, 'revealed': self.revealed}


def card_str(card: Card) -> str:
    """Short label such as 'B7' or 'W0'."""
    return f"{card.color[0].upper()}{card.value}"


def card_sort_key(card: Card):
    # value ascending, black before white on ties
    return (card.value, COLORS.index(card.color))


def sort_hand(cards: Iterable[Card]) -> List[Card]:
    """Return the cards in Da Vinci Code order."""
    return sorted(cards, key=card_sort_key)


def create_rng(seed: Optional[int] = None) -> random.Random:
    """Create the random source used by a game; None seeds from OS entropy."""
    return random.Random(seed)


def make_deck() -> List[Card]:
    """Create the full 24-card deck in value order."""
    return [Card(color, value) for value in range(MIN_VALUE, MAX_VALUE + 1) for color in COLORS]


def shuffle_deck(deck: List[Card], rng: random.Random) -> None:
    """Shuffle a deck in place (uniform permutation)."""
    rng.shuffle(deck)


def create_shuffled_deck(rng: random.Random) -> List[Card]:
    """Create and return a shuffled deck."""
    deck = make_deck()
    shuffle_deck(deck, rng)
    return deck


def count_color(deck: Iterable[Card], color: str) -> int:
    return sum(1 for card in deck if card.color == color)


def available_colors(deck: Iterable[Card]) -> List[str]:
    """Colors that still have at least one card in the deck, in COLORS order."""
    present = {card.color for card in deck}
    return [color for color in COLORS if color in present]


def draw_color(deck: List[Card], color: str, rng: random.Random) -> Optional[Card]:
    """Remove and return a uniformly random card of `color`, or None if there is none."""
    positions = [i for i, card in enumerate(deck) if card.color == color]
    if not positions:
        return None
    return deck.pop(rng.choice(positions))
