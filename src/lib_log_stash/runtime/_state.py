"""Process-wide default :class:`LogStasher` and access helpers."""

from __future__ import annotations

from threading import RLock

from ._stasher import LogStasher

_STATE: LogStasher | None = None
_STATE_LOCK = RLock()


def get_default() -> LogStasher:
    """Return the process-wide instance, creating it with defaults on first use."""

    global _STATE
    with _STATE_LOCK:
        if _STATE is None:
            _STATE = LogStasher()
        return _STATE


def set_default(stasher: LogStasher) -> None:
    """Install ``stasher`` as the process-wide instance."""

    global _STATE
    with _STATE_LOCK:
        _STATE = stasher


def reset_default() -> None:
    """Drop the process-wide instance; the next access recreates defaults."""

    global _STATE
    with _STATE_LOCK:
        _STATE = None


def is_initialised() -> bool:
    """Return ``True`` when the process-wide instance exists."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = ["get_default", "is_initialised", "reset_default", "set_default"]
