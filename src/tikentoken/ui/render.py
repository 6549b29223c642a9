"""Render helpers for tikentoken CLI."""

from __future__ import annotations

from typing import Sequence

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tikentoken.ui.console import get_console, get_err_console


def render_error(text: str) -> None:
    console = get_err_console()
    console.print(text, style="error", markup=False)


def render_result(text: str) -> None:
    console = get_console()
    console.print(text, markup=False, highlight=False, emoji=False)


def render_config_table(rows: Sequence[tuple[str, str]], title: str = "Gateway") -> None:
    console = get_err_console()
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="label", no_wrap=True, justify="right")
    table.add_column(style="value")
    for key, value in rows:
        table.add_row(Text(str(key), style="label"), Text(str(value), style="value"))
    panel = Panel(
        table,
        title=Text(title, style="accent"),
        title_align="left",
        box=box.ROUNDED,
        padding=(0, 2),
        expand=False,
    )
    console.print(panel)
