"""Rich Console factory and theme for mktledger output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MKT_THEME = Theme(
    {
        "mkt.ok": "bold green",
        "mkt.error": "bold red",
        "mkt.warning": "bold yellow",
        "mkt.op": "bold cyan",
        "mkt.key": "dim",
        "mkt.user": "bold blue",
        "mkt.asset.resource": "green",
        "mkt.asset.currency": "yellow",
        "mkt.amount": "magenta",
    }
)

_ASSET_STYLES: dict[str, str] = {
    "resource": "mkt.asset.resource",
    "currency": "mkt.asset.currency",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=MKT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_key(key: str) -> str:
    """Return the Rich style for a result field name."""
    for asset, style in _ASSET_STYLES.items():
        if key.startswith(asset):
            return style
    return ""
