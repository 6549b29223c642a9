"""Status spinner for long-running CLI calls."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from tikentoken.ui.console import get_err_console


@contextmanager
def status_spinner(message: str) -> Iterator[object | None]:
    console = get_err_console()
    if not console.is_terminal:
        yield None
        return
    with console.status(message, spinner="dots", spinner_style="accent") as status:
        yield status
