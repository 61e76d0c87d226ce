"""Text-stream and discard output devices.

Purpose
-------
Provide the default sink (standard output) plus a no-op sink used while no
device is configured.

Contents
--------
* :class:`StreamDevice` - locked, flushed writes to any text stream.
* :class:`NullDevice` - discards every line.
"""

from __future__ import annotations

import sys
import threading
from typing import TextIO

from lib_log_stash.application.ports.device import OutputDevicePort


class StreamDevice(OutputDevicePort):
    """Write whole lines to a text stream, one writer at a time.

    Examples
    --------
    >>> from io import StringIO
    >>> buffer = StringIO()
    >>> device = StreamDevice(buffer)
    >>> device.write('{"a":1}\\n')
    >>> buffer.getvalue()
    '{"a":1}\\n'
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        """Bind to ``stream``; ``None`` resolves to :data:`sys.stdout` now."""
        self._stream = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream

    def write(self, line: str) -> None:
        """Write ``line`` and flush so lines are never held back or reordered."""
        with self._lock:
            self._stream.write(line)
            self._stream.flush()

    def __repr__(self) -> str:
        return f"StreamDevice({getattr(self._stream, 'name', self._stream)!r})"


class NullDevice(OutputDevicePort):
    """Discard all lines."""

    def write(self, line: str) -> None:
        return None

    def __repr__(self) -> str:
        return "NullDevice()"


__all__ = ["NullDevice", "StreamDevice"]
