"""
ANSI color codes for the Da Vinci Code terminal front end.
"""


class Colors:
    """ANSI color codes for terminal formatting."""
    RED = '\033[31m'
    BLACK = '\033[30m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[97m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RESET = '\033[0m'
    BG_WHITE = '\033[107m'
    BG_BLACK = '\033[40m'
    CLEAR_SCREEN = '\033[2J\033[H'

    @classmethod
    def disable(cls):
        """Blank every code, for terminals or logs that cannot show ANSI."""
        for name in list(vars(cls)):
            if name.isupper():
                setattr(cls, name, '')
