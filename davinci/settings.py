"""
Settings for Da Vinci Code.
Loads configuration from the environment and an optional .env file.
"""

import os
from typing import Any, Dict, List, Optional

from dotenv import dotenv_values

from .version import get_version_info

DEFAULTS = {
    'DAVINCI_PLAYERS': '3',
    'DAVINCI_SEED': '',
    'DAVINCI_LOG_LEVEL': 'INFO',
    'DAVINCI_PLAYER_NAMES': '',
}


def load_env_file(filepath: str = ".env") -> Dict[str, str]:
    """Load variables from a .env file; a missing file gives an empty dict."""
    if not os.path.exists(filepath):
        return {}
    return {k: v for k, v in dotenv_values(filepath).items() if v is not None}


def _lookup(key: str, env_vars: Dict[str, str]) -> str:
    return os.getenv(key) or env_vars.get(key) or DEFAULTS[key]


def parse_seed(raw: str) -> Optional[int]:
    raw = (raw or '').strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"DAVINCI_SEED must be an integer, got {raw!r}")


def parse_names(raw: str) -> List[str]:
    return [name.strip() for name in (raw or '').split(',') if name.strip()]


def get_settings(env_file: str = ".env") -> Dict[str, Any]:
    """Get game settings: environment first, then .env file, then defaults."""
    env_vars = load_env_file(env_file)

    players_raw = _lookup('DAVINCI_PLAYERS', env_vars)
    try:
        players = int(players_raw)
    except ValueError:
        raise ValueError(f"DAVINCI_PLAYERS must be an integer, got {players_raw!r}")

    return {
        'players': players,
        'seed': parse_seed(_lookup('DAVINCI_SEED', env_vars)),
        'log_level': _lookup('DAVINCI_LOG_LEVEL', env_vars).upper(),
        'player_names': parse_names(_lookup('DAVINCI_PLAYER_NAMES', env_vars)),
        **get_version_info()
    }


def format_banner(settings: Dict[str, Any]) -> str:
    """Format the welcome banner with version information"""
    from .terminal_ui import Colors

    lines = [
        f"{Colors.BOLD}{Colors.YELLOW}🔐 Welcome to Da Vinci Code! 🔐{Colors.RESET}",
        f"🃏 24 cards, values 0-11 in black and white. Last player with hidden cards wins.",
        f"📦 Version: {Colors.DIM}{settings['version']} ({settings['build_date']}){Colors.RESET}",
    ]
    if settings.get('seed') is not None:
        lines.append(f"🎲 Seed: {Colors.CYAN}{settings['seed']}{Colors.RESET}")
    return "\n".join(lines)
