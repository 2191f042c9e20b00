"""
UI module for Da Vinci Code.
Provides terminal UI components for consistent presentation.
"""

from .colors import Colors
from .cards import card_lines, card_style, cards_horizontal

__all__ = ['Colors', 'card_lines', 'card_style', 'cards_horizontal']
