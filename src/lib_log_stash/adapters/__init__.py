"""Adapters implementing the application ports."""

from __future__ import annotations

from .contracts import PydanticContract
from .devices import NullDevice, RichConsoleDevice, StreamDevice, SyslogDevice, device_factory

__all__ = [
    "NullDevice",
    "PydanticContract",
    "RichConsoleDevice",
    "StreamDevice",
    "SyslogDevice",
    "device_factory",
]
