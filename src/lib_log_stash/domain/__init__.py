"""Domain entities and value objects used by the emission pipeline."""

from __future__ import annotations

from .devices import (
    ConsoleDeviceConfig,
    DeviceConfig,
    DeviceType,
    StdoutDeviceConfig,
    SyslogDeviceConfig,
    parse_device_config,
)
from .errors import (
    ConfigurationError,
    InvalidContractError,
    LogStashError,
    SerializationError,
    ValidationCapabilityError,
)
from .events import RESERVED_FIELDS, TIMESTAMP_FIELD, VERSION_FIELD, Event
from .payload import (
    EventPayload,
    MappingPayload,
    Payload,
    SequencePayload,
    detached_copy,
    normalize_payload,
    payload_value,
)

__all__ = [
    "ConfigurationError",
    "ConsoleDeviceConfig",
    "DeviceConfig",
    "DeviceType",
    "Event",
    "EventPayload",
    "InvalidContractError",
    "LogStashError",
    "MappingPayload",
    "Payload",
    "RESERVED_FIELDS",
    "SequencePayload",
    "SerializationError",
    "StdoutDeviceConfig",
    "SyslogDeviceConfig",
    "TIMESTAMP_FIELD",
    "VERSION_FIELD",
    "ValidationCapabilityError",
    "detached_copy",
    "normalize_payload",
    "parse_device_config",
    "payload_value",
]
