"""
Card rendering for the Da Vinci Code terminal UI.
Handles box-drawn card visualization and layout.
"""

from .colors import Colors

CARD_HEIGHT = 4


def card_style(color):
    """Background/foreground codes for a card of the given color."""
    if color == 'black':
        return f"{Colors.BG_BLACK}{Colors.WHITE}"
    return f"{Colors.BG_WHITE}{Colors.BLACK}"


def card_lines(card, visible=True, marker=''):
    """Format a single card as box-drawn lines.

    `card` is a snapshot dict with color, value and revealed. Hidden cards
    show their color but a '?' in place of the value; revealed cards get a
    '*' in the top corner so face-up cards stand out from peeked ones.
    """
    label = f"{card['value']:>2}" if visible else ' ?'
    corner = '*' if card.get('revealed') else ' '
    style = f"{Colors.BOLD}{card_style(card['color'])}"

    top = f"{style}╭──{corner}╮{Colors.RESET}"
    mid = f"{style}│{label} │{Colors.RESET}"
    bot = f"{style}╰───╯{Colors.RESET}"
    # caption under the card keeps the columns aligned
    caption = f"{marker:^5}"
    return [top, mid, bot, caption]


def cards_horizontal(cards, visible=None, markers=None):
    """Render multiple cards side-by-side horizontally.

    `visible` and `markers` are optional per-card lists.
    """
    if not cards:
        return ""

    visible = visible if visible is not None else [True] * len(cards)
    markers = markers if markers is not None else [''] * len(cards)
    card_rows = [card_lines(card, v, m) for card, v, m in zip(cards, visible, markers)]

    result_lines = []
    for line_idx in range(CARD_HEIGHT):
        result_lines.append(" ".join(rows[line_idx] for rows in card_rows))
    return "\n".join(result_lines)
