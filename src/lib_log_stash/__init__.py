"""Structured JSON line emission for log aggregation pipelines.

``emit`` turns a mapping, an :class:`Event`, or a list into one JSON line on
the configured output device, merging process-wide metadata and optionally
validating against a pluggable contract. Import :class:`LogStasher` for an
isolated instance, or use the module-level helpers bound to the process-wide
default.
"""

from __future__ import annotations

from .adapters import NullDevice, PydanticContract, RichConsoleDevice, StreamDevice, SyslogDevice, device_factory
from .application.ports import OutputDevicePort, ValidationContract, ValidationResult
from .domain import (
    ConfigurationError,
    Event,
    InvalidContractError,
    LogStashError,
    SerializationError,
    ValidationCapabilityError,
)
from .runtime import (
    LogStasher,
    LogStasherSnapshot,
    append_fields,
    emit,
    get_append_fields_callback,
    get_contract,
    get_default,
    get_default_device,
    get_metadata,
    include_parameters,
    inspect_runtime,
    is_enabled,
    load_from_config,
    reset_default,
    serialize_parameters,
    set_contract,
    set_default,
    set_enabled,
    set_metadata,
    set_writer,
    silence_standard_logging,
)

__all__ = [
    "ConfigurationError",
    "Event",
    "InvalidContractError",
    "LogStashError",
    "LogStasher",
    "LogStasherSnapshot",
    "NullDevice",
    "OutputDevicePort",
    "PydanticContract",
    "RichConsoleDevice",
    "SerializationError",
    "StreamDevice",
    "SyslogDevice",
    "ValidationCapabilityError",
    "ValidationContract",
    "ValidationResult",
    "append_fields",
    "device_factory",
    "emit",
    "get_append_fields_callback",
    "get_contract",
    "get_default",
    "get_default_device",
    "get_metadata",
    "include_parameters",
    "inspect_runtime",
    "is_enabled",
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
