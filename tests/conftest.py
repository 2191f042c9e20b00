from typing import Callable, List, Optional, Sequence

import pytest

from davinci.deck import BLACK, WHITE, Card, make_deck, sort_hand
from davinci.game_engine import GameEngine
from davinci.game_state import Game, Phase
from davinci.player import create_players


def parse_cards(text: str) -> List[Card]:
    """'B3 W5*' -> [black 3, white 5 revealed]."""
    cards = []
    for token in text.split():
        revealed = token.endswith('*')
        token = token.rstrip('*')
        color = BLACK if token[0].upper() == 'B' else WHITE
        cards.append(Card(color, int(token[1:]), revealed))
    return cards


def keys(cards) -> List[tuple]:
    return [c.key for c in cards]


def assert_card_conservation(game: Game, expected: Optional[Sequence[Card]] = None):
    """Deck + hands + pending drawn cards is exactly the expected set, no duplicates."""
    expected = make_deck() if expected is None else expected
    in_play = keys(game.all_cards())
    assert len(in_play) == len(set(in_play))
    assert sorted(in_play) == sorted(keys(expected))


def assert_hands_sorted(game: Game):
    for player in game.players:
        assert keys(player.hand) == keys(sort_hand(player.hand))


@pytest.fixture
def new_engine() -> Callable[..., GameEngine]:
    """Factory for seeded engines with a game already dealt."""

    def _factory(players: int = 2, seed: int = 1234, names=None) -> GameEngine:
        engine = GameEngine(seed=seed)
        engine.start_game(players, names)
        return engine

    return _factory


@pytest.fixture
def rigged_engine() -> Callable[..., GameEngine]:
    """Factory for engines whose hands and deck are spelled out card by card."""

    def _factory(hands: Sequence[str], deck: str = '', current: int = 0,
                 phase: Phase = Phase.AWAITING_DRAW, seed: int = 7) -> GameEngine:
        engine = GameEngine(seed=seed)
        engine.game = Game(create_players([parse_cards(h) for h in hands]), parse_cards(deck))
        engine.game.current_player_index = current
        engine.game.phase = phase
        return engine

    return _factory
