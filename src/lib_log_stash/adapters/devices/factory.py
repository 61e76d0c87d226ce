"""Factory turning device configuration into live output devices.

Purpose
-------
Single place that maps the tagged ``{type: ...}`` configuration onto concrete
adapters, one constructor per device kind.

Contents
--------
* :func:`device_factory` - public entry point.
* ``_BUILDERS`` - device type to constructor table.

System Role
-----------
Called by :meth:`lib_log_stash.runtime.LogStasher.load_from_config` and the
CLI. Every naming error surfaces here as
:class:`~lib_log_stash.domain.errors.ConfigurationError`.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping
from typing import Any

from lib_log_stash.application.ports.device import OutputDevicePort
from lib_log_stash.domain.devices import (
    ConsoleDeviceConfig,
    DeviceConfig,
    DeviceType,
    StdoutDeviceConfig,
    SyslogDeviceConfig,
    parse_device_config,
)

from .rich_console import RichConsoleDevice
from .stream import StreamDevice
from .syslog import SyslogDevice

LOGGER = logging.getLogger(__name__)


def _build_stdout(config: StdoutDeviceConfig) -> OutputDevicePort:
    return StreamDevice(sys.stdout)


def _build_syslog(config: SyslogDeviceConfig) -> OutputDevicePort:
    return SyslogDevice(
        identity=config.identity,
        facility=config.facility,
        priority=config.priority,
        flags=config.flags,
    )


def _build_console(config: ConsoleDeviceConfig) -> OutputDevicePort:
    return RichConsoleDevice(force_color=config.force_color, no_color=config.no_color)


_BUILDERS: Mapping[DeviceType, Callable[[Any], OutputDevicePort]] = {
    DeviceType.STDOUT: _build_stdout,
    DeviceType.SYSLOG: _build_syslog,
    DeviceType.CONSOLE: _build_console,
}


def device_factory(config: Mapping[Any, Any] | DeviceConfig) -> OutputDevicePort:
    """Build the output device described by ``config``.

    Parameters
    ----------
    config:
        Tagged mapping such as ``{"type": "stdout"}`` or
        ``{"type": "syslog", "identity": "app", "facility": "LOG_LOCAL1",
        "priority": "LOG_INFO", "flags": ["LOG_PID"]}``, or an already parsed
        :data:`DeviceConfig`.

    Raises
    ------
    ConfigurationError
        Unknown device type or unknown syslog facility/priority/flag name.

    Examples
    --------
    >>> device_factory({"type": "stdout"}).stream is sys.stdout
    True
    >>> device_factory({"type": "syslog", "facility": "LOG_NOPE"})
    Traceback (most recent call last):
    ...
    lib_log_stash.domain.errors.ConfigurationError: Unknown syslog facility: 'LOG_NOPE'
    """

    parsed = parse_device_config(config)
    device = _BUILDERS[parsed.type](parsed)
    LOGGER.debug("built output device %r from %s configuration", device, parsed.type.value)
    return device


__all__ = ["device_factory"]
