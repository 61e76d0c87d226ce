"""Runtime façade over the process-wide :class:`LogStasher`.

Purpose
-------
Expose the small surface host applications and framework integrations use:
``emit``, ``load_from_config``, contract registration, the field hook, metadata and flag
accessors. Each function delegates to the default instance returned by
:func:`get_default`, which is created lazily with documented defaults.

Contents
--------
* :class:`LogStasher` / :class:`LogStasherSnapshot` re-exports.
* Default instance management: :func:`get_default`, :func:`set_default`,
  :func:`reset_default`, :func:`is_initialised`.
* Module-level helpers delegating to the default instance.

System Role
-----------
Outer shell of the package. Code that needs isolation (tests, multi-tenant
hosts) should construct its own :class:`LogStasher` instead of relying on the
default.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lib_log_stash.application.ports.contract import ValidationContract
from lib_log_stash.application.ports.device import OutputDevicePort

from ._stasher import FLAG_KEYS, AppendFieldsCallback, LogStasher, LogStasherSnapshot
from ._state import get_default, is_initialised, reset_default, set_default


def emit(payload: Any, *, as_event: bool = False) -> None:
    """Emit ``payload`` through the default instance."""

    get_default().emit(payload, as_event=as_event)


def load_from_config(config: Mapping[Any, Any]) -> None:
    """Bulk-apply ``config`` to the default instance."""

    get_default().load_from_config(config)


def set_contract(contract: ValidationContract | None) -> None:
    """Install (or clear) the validation contract on the default instance."""

    get_default().set_contract(contract)


def get_contract() -> ValidationContract | None:
    return get_default().contract


def append_fields(callback: AppendFieldsCallback | None) -> AppendFieldsCallback | None:
    """Register (or clear) the field hook on the default instance."""

    return get_default().append_fields(callback)


def get_append_fields_callback() -> AppendFieldsCallback | None:
    return get_default().append_fields_callback


def get_metadata() -> dict[str, Any]:
    return get_default().metadata


def set_metadata(metadata: Mapping[str, Any] | None) -> None:
    get_default().metadata = metadata


def get_default_device() -> OutputDevicePort:
    return get_default().default_device


def set_writer(device: OutputDevicePort) -> None:
    """Point the default instance's line writer at ``device``."""

    get_default().writer = device


def is_enabled() -> bool:
    return get_default().enabled


def set_enabled(value: bool) -> None:
    get_default().enabled = value


def include_parameters() -> bool:
    return get_default().include_parameters


def serialize_parameters() -> bool:
    return get_default().serialize_parameters


def silence_standard_logging() -> bool:
    return get_default().silence_standard_logging


def inspect_runtime() -> LogStasherSnapshot:
    """Return a read-only snapshot of the default instance."""

    return get_default().snapshot()


__all__ = [
    "AppendFieldsCallback",
    "FLAG_KEYS",
    "LogStasher",
    "LogStasherSnapshot",
    "append_fields",
    "emit",
    "get_append_fields_callback",
    "get_contract",
    "get_default",
    "get_default_device",
    "get_metadata",
    "include_parameters",
    "inspect_runtime",
    "is_enabled",
    "is_initialised",
    "load_from_config",
    "reset_default",
    "serialize_parameters",
    "set_contract",
    "set_default",
    "set_enabled",
    "set_metadata",
    "set_writer",
    "silence_standard_logging",
]
