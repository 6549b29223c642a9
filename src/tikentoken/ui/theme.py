"""Rich theme for tikentoken CLI."""

from __future__ import annotations

from rich.theme import Theme

THEME = Theme(
    {
        "accent": "bright_blue",
        "error": "bold red3",
        "label": "dim",
        "value": "white",
    }
)
