"""Shared consoles for tikentoken CLI.

Results go to stdout so they can be piped; diagnostics and logs go to stderr.
"""

from __future__ import annotations

from rich.console import Console

from tikentoken.ui.theme import THEME

_CONSOLE = Console(theme=THEME, highlight=False, soft_wrap=True)
_ERR_CONSOLE = Console(theme=THEME, highlight=False, soft_wrap=True, stderr=True)


def get_console() -> Console:
    return _CONSOLE


def get_err_console() -> Console:
    return _ERR_CONSOLE
