"""Rich Console factory and theme for graphtoll output.

Consoles render to a StringIO buffer so renderers keep a plain
``render() -> str`` contract. Rich drops color codes on its own when the
output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

GT_THEME = Theme(
    {
        "gt.ok": "bold green",
        "gt.error": "bold red",
        "gt.warning": "bold yellow",
        "gt.op": "bold cyan",
        "gt.key": "dim",
        "gt.id": "bold blue",
        "gt.node": "bold",
        "gt.tokens": "magenta",
        "gt.status.pending": "yellow",
        "gt.status.approved": "green",
        "gt.status.rejected": "red",
    }
)

_STATUS_STYLES: dict[str, str] = {
    "pending": "gt.status.pending",
    "approved": "gt.status.approved",
    "rejected": "gt.status.rejected",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=GT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a request status."""
    return _STATUS_STYLES.get(status, "")
