"""
Who may see which card values.

The engine always tracks true values; deciding what a viewer sees is a
presentation concern and lives here.
"""

from typing import Optional


def card_visible(card: dict, owner_id: int, viewer_id: Optional[int],
                 self_reveal: bool = False, reveal_all: bool = False) -> bool:
    """True if `viewer_id` may see the value of `card` in `owner_id`'s hand."""
    if card.get('revealed') or reveal_all:
        return True
    return self_reveal and viewer_id is not None and viewer_id == owner_id
