"""Output device configuration variants.

Purpose
-------
Describe *which* sink the pipeline writes to, independently of how the sink
is built. Configuration mappings (from config files, the environment, or
``load_from_config``) are parsed into one of these frozen variants before the
device factory turns them into live adapters.

Contents
--------
* :class:`DeviceType` enumeration with a case-insensitive parser.
* :class:`StdoutDeviceConfig`, :class:`SyslogDeviceConfig`,
  :class:`ConsoleDeviceConfig` variants.
* :func:`parse_device_config` - mapping to variant.

System Role
-----------
Keeps the tagged ``{type: ...}`` contract in the domain layer so adapters only
ever see validated structures. Unknown device types fail here with
:class:`ConfigurationError`; syslog names are resolved by the factory's lookup
tables.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from .errors import ConfigurationError

DEFAULT_SYSLOG_IDENTITY = "lib_log_stash"


class DeviceType(Enum):
    """Supported output device kinds.

    Examples
    --------
    >>> DeviceType.from_name(' Syslog ') is DeviceType.SYSLOG
    True
    >>> DeviceType.from_name('kafka')
    Traceback (most recent call last):
    ...
    lib_log_stash.domain.errors.ConfigurationError: Unsupported device type: 'kafka'
    """

    STDOUT = "stdout"
    SYSLOG = "syslog"
    CONSOLE = "console"

    @classmethod
    def from_name(cls, name: Any) -> "DeviceType":
        if isinstance(name, DeviceType):
            return name
        normalized = str(name).strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ConfigurationError(f"Unsupported device type: {name!r}")


@dataclass(slots=True, frozen=True)
class StdoutDeviceConfig:
    """Write lines to the process's standard output."""

    type: DeviceType = DeviceType.STDOUT


@dataclass(slots=True, frozen=True)
class SyslogDeviceConfig:
    """Send lines to the local syslog facility.

    Attributes
    ----------
    identity:
        Program name prefixed to every syslog message.
    facility, priority:
        Symbolic names such as ``"LOG_LOCAL1"`` and ``"LOG_INFO"``.
    flags:
        Symbolic ``openlog`` options such as ``"LOG_PID"``.
    """

    identity: str = DEFAULT_SYSLOG_IDENTITY
    facility: str = "LOG_USER"
    priority: str = "LOG_INFO"
    flags: tuple[str, ...] = ()
    type: DeviceType = DeviceType.SYSLOG


@dataclass(slots=True, frozen=True)
class ConsoleDeviceConfig:
    """Highlight lines on an interactive terminal via Rich."""

    force_color: bool = False
    no_color: bool = False
    type: DeviceType = DeviceType.CONSOLE


DeviceConfig = Union[StdoutDeviceConfig, SyslogDeviceConfig, ConsoleDeviceConfig]


def _normalise_keys(raw: Mapping[Any, Any]) -> dict[str, Any]:
    return {str(getattr(key, "value", key)): value for key, value in raw.items()}


def _switch(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"console {name} must be a boolean, got {type(value).__name__}")
    return value


def _flag_names(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value)
    raise ConfigurationError(f"syslog flags must be a list of names, got {type(value).__name__}")


def parse_device_config(raw: Mapping[Any, Any] | DeviceConfig) -> DeviceConfig:
    """Parse a tagged device mapping into its configuration variant.

    Examples
    --------
    >>> parse_device_config({"type": "stdout"})
    StdoutDeviceConfig(type=<DeviceType.STDOUT: 'stdout'>)
    >>> parse_device_config({"type": "syslog", "flags": ["LOG_PID"]}).flags
    ('LOG_PID',)
    """

    if isinstance(raw, (StdoutDeviceConfig, SyslogDeviceConfig, ConsoleDeviceConfig)):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"device configuration must be a mapping, got {type(raw).__name__}")

    data = _normalise_keys(raw)
    if "type" not in data:
        raise ConfigurationError("device configuration requires a 'type' key")
    device_type = DeviceType.from_name(data["type"])

    if device_type is DeviceType.STDOUT:
        return StdoutDeviceConfig()
    if device_type is DeviceType.SYSLOG:
        return SyslogDeviceConfig(
            identity=str(data.get("identity") or DEFAULT_SYSLOG_IDENTITY),
            facility=str(data.get("facility") or "LOG_USER"),
            priority=str(data.get("priority") or "LOG_INFO"),
            flags=_flag_names(data.get("flags")),
        )
    return ConsoleDeviceConfig(
        force_color=_switch("force_color", data.get("force_color", False)),
        no_color=_switch("no_color", data.get("no_color", False)),
    )


__all__ = [
    "ConsoleDeviceConfig",
    "DEFAULT_SYSLOG_IDENTITY",
    "DeviceConfig",
    "DeviceType",
    "StdoutDeviceConfig",
    "SyslogDeviceConfig",
    "parse_device_config",
]
