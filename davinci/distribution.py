"""
Starting-hand distribution for Da Vinci Code.

Two or three players get two black and two white cards each. Four players
get three cards each, split 2/1 or 1/2 between the colors by a coin flip
per player.
"""

import logging
import random
from typing import Dict, List

from davinci.deck import BLACK, WHITE, Card, card_str, sort_hand
from davinci.errors import DistributionError

SUPPORTED_PLAYER_COUNTS = (2, 3, 4)

# per-player color quotas for 2 and 3 player games
STANDARD_QUOTA = {BLACK: 2, WHITE: 2}
# the two possible quotas in a 4 player game
FOUR_PLAYER_QUOTAS = ({BLACK: 2, WHITE: 1}, {BLACK: 1, WHITE: 2})


def validate_player_count(player_count: int) -> None:
    if player_count not in SUPPORTED_PLAYER_COUNTS:
        raise DistributionError(
            f"Da Vinci Code needs 2 to 4 players, got {player_count}"
        )


def take_from_tail(deck: List[Card], color: str, count: int) -> List[Card]:
    """Remove up to `count` cards of `color`, scanning from the end of the deck.

    Returns fewer cards than asked for when the color runs out.
    """
    taken = []
    k = len(deck) - 1
    while k >= 0 and len(taken) < count:
        if deck[k].color == color:
            taken.append(deck.pop(k))
        k -= 1
    return taken


def quota_for(player_count: int, rng: random.Random) -> Dict[str, int]:
    if player_count == 4:
        return dict(FOUR_PLAYER_QUOTAS[0] if rng.random() < 0.5 else FOUR_PLAYER_QUOTAS[1])
    return dict(STANDARD_QUOTA)


def deal_initial_hands(deck: List[Card], player_count: int, rng: random.Random) -> List[List[Card]]:
    """Deal one sorted starting hand per player, removing the cards from `deck`.

    Raises DistributionError for unsupported player counts. A color running
    short during a 4 player deal is not an error: the hand just comes out
    smaller.
    """
    validate_player_count(player_count)

    hands = []
    for seat in range(player_count):
        quota = quota_for(player_count, rng)
        hand = []
        for color in (BLACK, WHITE):
            taken = take_from_tail(deck, color, quota[color])
            if len(taken) < quota[color]:
                logging.warning(
                    f"Seat {seat}: only {len(taken)} of {quota[color]} {color} cards left to deal"
                )
            hand.extend(taken)
        for card in hand:
            card.revealed = False
        hands.append(sort_hand(hand))
        logging.debug(f"Dealt seat {seat}: {[card_str(c) for c in hands[-1]]}")

    logging.debug(f"Deal complete, {len(deck)} cards left in deck")
    return hands
