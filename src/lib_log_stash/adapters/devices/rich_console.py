"""Rich-powered console device for local development.

Purpose
-------
Print the same single-line JSON records as :class:`StreamDevice`, with JSON
syntax highlighting when the terminal supports colour.

Contents
--------
* :class:`RichConsoleDevice` - concrete :class:`OutputDevicePort`.

System Role
-----------
Selected with ``{"type": "console"}``. Output stays one record per line: no
indentation and no soft wrapping, so piping the output remains parseable.
"""

from __future__ import annotations

import threading

from rich.console import Console
from rich.highlighter import JSONHighlighter

from lib_log_stash.application.ports.device import OutputDevicePort


class RichConsoleDevice(OutputDevicePort):
    """Render JSON lines through a Rich :class:`~rich.console.Console`."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        """Configure the console with colour overrides."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color)
        self._highlighter = JSONHighlighter()
        self._lock = threading.Lock()

    @property
    def console(self) -> Console:
        return self._console

    def write(self, line: str) -> None:
        """Print ``line`` with JSON highlighting.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True, width=20)
        >>> device = RichConsoleDevice(console=console)
        >>> device.write('{"message":"a rather long line"}\\n')
        >>> console.export_text()
        '{"message":"a rather long line"}\\n'
        """
        text = self._highlighter(line.rstrip("\r\n"))
        with self._lock:
            self._console.print(text, soft_wrap=True, crop=False)


__all__ = ["RichConsoleDevice"]
