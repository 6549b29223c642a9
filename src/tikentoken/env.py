"""Read ``KEY=value`` settings from a .env file into the process environment."""

from __future__ import annotations

import os
from pathlib import Path


def parse_env_line(line: str) -> tuple[str, str] | None:
    """Return ``(key, value)`` for a setting line, or None for blanks and comments.

    Accepts an optional ``export`` prefix and one level of matching quotes.
    Empty values are treated as unset.
    """
    entry = line.strip()
    if entry.startswith("export "):
        entry = entry[len("export "):].lstrip()
    if not entry or entry.startswith("#") or "=" not in entry:
        return None
    key, _, value = entry.partition("=")
    key, value = key.strip(), value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1]
    if not key or not value:
        return None
    return key, value


def load_dotenv(path: str = ".env") -> bool:
    """Load settings from ``path``; variables already in the environment win."""
    env_path = Path(path)
    if not env_path.is_file():
        return False
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return False
    settings = [parsed for parsed in map(parse_env_line, lines) if parsed is not None]
    for key, value in settings:
        os.environ.setdefault(key, value)
    return True
