"""Rich Console factory and theme for treeconv output.

Consoles render into a StringIO buffer so formatters keep returning plain
strings. Rich drops colour codes when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TREECONV_THEME = Theme(
    {
        "tc.ok": "bold green",
        "tc.error": "bold red",
        "tc.op": "bold cyan",
        "tc.key": "dim",
        "tc.code": "yellow",
        "tc.name": "bold blue",
        "tc.kind.scalar": "green",
        "tc.kind.aggregate": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=TREECONV_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
