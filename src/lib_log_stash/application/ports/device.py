"""Port describing the sink that receives finished JSON lines."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class OutputDevicePort(Protocol):
    """Write one finished, newline-terminated JSON line to a sink.

    Implementations own line atomicity: concurrent callers must never observe
    interleaved partial lines, and lines appear in call order.
    """

    def write(self, line: str) -> None:
        """Persist ``line`` to the sink."""


__all__ = ["OutputDevicePort"]
