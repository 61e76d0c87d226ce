"""Concrete output devices and their factory."""

from __future__ import annotations

from .factory import device_factory
from .rich_console import RichConsoleDevice
from .stream import NullDevice, StreamDevice
from .syslog import SyslogDevice

__all__ = ["NullDevice", "RichConsoleDevice", "StreamDevice", "SyslogDevice", "device_factory"]
