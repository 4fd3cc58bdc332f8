"""Rich console used by the renderers.

Renderers draw into an in-memory console and hand back the text, so the
CLI decides where output goes (stdout or stderr). Rich drops ANSI codes
on its own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

STARGATE_THEME = Theme(
    {
        # status line
        "sg.ok": "bold green",
        "sg.error": "bold red",
        "sg.warning": "bold yellow",
        "sg.op": "bold cyan",
        # fields
        "sg.key": "dim",
        "sg.id": "bold blue",
        "sg.name": "bold",
        # duty state
        "sg.current": "green",
        "sg.closed": "dim",
        "sg.retired": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """A themed console writing to a fresh StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=STARGATE_THEME,
        width=width or DEFAULT_WIDTH,
        no_color=no_color,
        highlight=False,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()
