"""Syslog output device and the symbolic-name lookup tables.

Purpose
-------
Forward JSON lines to the local syslog daemon with a configured identity,
facility, priority, and ``openlog`` options.

Contents
--------
* :data:`FACILITIES`, :data:`PRIORITIES`, :data:`FLAGS` - POSIX numeric codes
  keyed by their ``LOG_*`` names.
* :func:`resolve_facility`, :func:`resolve_priority`, :func:`resolve_flags`.
* :class:`SyslogDevice` - concrete :class:`OutputDevicePort`.

System Role
-----------
The tables are plain data so new facilities or options are additions, not
branches. Names are resolved, and the platform :mod:`syslog` module is
checked, when the device is built, so misconfiguration fails at startup
rather than on the first write.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from typing import Callable

from lib_log_stash.application.ports.device import OutputDevicePort
from lib_log_stash.domain.devices import DEFAULT_SYSLOG_IDENTITY
from lib_log_stash.domain.errors import ConfigurationError

Opener = Callable[[str, int, int], None]
Sender = Callable[[int, str], None]

_OPENLOG_LOCK = threading.Lock()
_active_openlog: tuple[Opener, str, int, int] | None = None

FACILITIES: Mapping[str, int] = {
    "LOG_KERN": 0 << 3,
    "LOG_USER": 1 << 3,
    "LOG_MAIL": 2 << 3,
    "LOG_DAEMON": 3 << 3,
    "LOG_AUTH": 4 << 3,
    "LOG_SYSLOG": 5 << 3,
    "LOG_LPR": 6 << 3,
    "LOG_NEWS": 7 << 3,
    "LOG_UUCP": 8 << 3,
    "LOG_CRON": 9 << 3,
    "LOG_AUTHPRIV": 10 << 3,
    "LOG_FTP": 11 << 3,
    "LOG_LOCAL0": 16 << 3,
    "LOG_LOCAL1": 17 << 3,
    "LOG_LOCAL2": 18 << 3,
    "LOG_LOCAL3": 19 << 3,
    "LOG_LOCAL4": 20 << 3,
    "LOG_LOCAL5": 21 << 3,
    "LOG_LOCAL6": 22 << 3,
    "LOG_LOCAL7": 23 << 3,
}

PRIORITIES: Mapping[str, int] = {
    "LOG_EMERG": 0,
    "LOG_ALERT": 1,
    "LOG_CRIT": 2,
    "LOG_ERR": 3,
    "LOG_WARNING": 4,
    "LOG_NOTICE": 5,
    "LOG_INFO": 6,
    "LOG_DEBUG": 7,
}

FLAGS: Mapping[str, int] = {
    "LOG_PID": 0x01,
    "LOG_CONS": 0x02,
    "LOG_ODELAY": 0x04,
    "LOG_NDELAY": 0x08,
    "LOG_NOWAIT": 0x10,
    "LOG_PERROR": 0x20,
}


def _lookup(table: Mapping[str, int], kind: str, name: str) -> int:
    normalized = name.strip().upper()
    if not normalized.startswith("LOG_"):
        normalized = f"LOG_{normalized}"
    try:
        return table[normalized]
    except KeyError:
        raise ConfigurationError(f"Unknown syslog {kind}: {name!r}") from None


def resolve_facility(name: str) -> int:
    """Return the numeric facility code for ``name``.

    Examples
    --------
    >>> resolve_facility("LOG_LOCAL1")
    136
    >>> resolve_facility("local1")
    136
    """

    return _lookup(FACILITIES, "facility", name)


def resolve_priority(name: str) -> int:
    """Return the numeric priority for ``name``."""

    return _lookup(PRIORITIES, "priority", name)


def resolve_flags(names: Iterable[str]) -> int:
    """OR together the ``openlog`` option bits named in ``names``.

    Examples
    --------
    >>> resolve_flags(["LOG_PID", "LOG_CONS"])
    3
    >>> resolve_flags([])
    0
    """

    value = 0
    for name in names:
        value |= _lookup(FLAGS, "flag", name)
    return value


def _forget_openlog_for_testing() -> None:
    """Forget which identity and options were last passed to ``openlog``."""

    global _active_openlog
    with _OPENLOG_LOCK:
        _active_openlog = None


def _require_syslog_module() -> None:
    try:
        import syslog  # noqa: F401
    except ImportError as exc:
        raise ConfigurationError("syslog is not available on this platform") from exc


def _default_opener(ident: str, logoption: int, facility: int) -> None:  # pragma: no cover - depends on platform
    """Proxy to :func:`syslog.openlog`."""
    import syslog

    syslog.openlog(ident, logoption, facility)


def _default_sender(priority: int, message: str) -> None:  # pragma: no cover - depends on platform
    """Proxy to :func:`syslog.syslog`."""
    import syslog

    syslog.syslog(priority, message)


class SyslogDevice(OutputDevicePort):
    """Send each line to syslog as one message.

    ``openlog`` settings are process-wide, so a device re-opens the log
    whenever another device (with a different identity, options or facility)
    wrote last. Writes from all devices are serialised on one lock.

    Examples
    --------
    >>> sent = []
    >>> device = SyslogDevice(
    ...     identity="app",
    ...     facility="LOG_LOCAL1",
    ...     priority="LOG_INFO",
    ...     flags=["LOG_PID"],
    ...     opener=lambda ident, option, facility: None,
    ...     sender=lambda priority, message: sent.append((priority, message)),
    ... )
    >>> device.write('{"a":1}\\n')
    >>> sent
    [(142, '{"a":1}')]
    """

    def __init__(
        self,
        *,
        identity: str = DEFAULT_SYSLOG_IDENTITY,
        facility: str = "LOG_USER",
        priority: str = "LOG_INFO",
        flags: Iterable[str] = (),
        opener: Opener | None = None,
        sender: Sender | None = None,
    ) -> None:
        """Resolve symbolic names immediately; open the log lazily.

        Raises
        ------
        ConfigurationError
            Unknown facility/priority/flag name, or no ``opener``/``sender``
            was injected and the platform has no :mod:`syslog` module.
        """
        self.identity = identity
        self.facility = resolve_facility(facility)
        self.priority = resolve_priority(priority)
        self.options = resolve_flags(flags)
        if opener is None or sender is None:
            _require_syslog_module()
        self._opener = opener or _default_opener
        self._sender = sender or _default_sender

    def write(self, line: str) -> None:
        """Send ``line`` without its record separator."""
        global _active_openlog
        message = line.rstrip("\r\n")
        settings = (self._opener, self.identity, self.options, self.facility)
        with _OPENLOG_LOCK:
            if _active_openlog != settings:
                self._opener(self.identity, self.options, self.facility)
                _active_openlog = settings
            self._sender(self.priority | self.facility, message)

    def __repr__(self) -> str:
        return f"SyslogDevice(identity={self.identity!r}, facility={self.facility}, priority={self.priority}, options={self.options})"


__all__ = [
    "FACILITIES",
    "FLAGS",
    "PRIORITIES",
    "SyslogDevice",
    "resolve_facility",
    "resolve_flags",
    "resolve_priority",
]
