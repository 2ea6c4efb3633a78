"""Rich Console factory and theme for guardtype output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
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
        "gt.name": "bold blue",
        "gt.path": "dim",
        "gt.trait": "magenta",
        "gt.family.string": "green",
        "gt.family.integer": "yellow",
        "gt.family.float": "cyan",
    }
)

_FAMILY_STYLES: dict[str, str] = {
    "string": "gt.family.string",
    "integer": "gt.family.integer",
    "float": "gt.family.float",
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


def style_for_family(family: str) -> str:
    """Return the Rich style name for a type family."""
    return _FAMILY_STYLES.get(family, "")
