"""Explicit configuration/context object driving the emission pipeline.

Purpose
-------
Hold the settings one emission depends on (metadata, device, contract) plus
the flags consumed by host-framework integrations, with documented defaults
set at construction time.

Contents
--------
* :class:`LogStasherSnapshot` - read-only view returned by :meth:`LogStasher.snapshot`.
* :class:`LogStasher` - the mutable, lock-guarded configuration object.

System Role
-----------
Composition point between configuration inputs and the
:func:`~lib_log_stash.application.use_cases.emit.create_emit` use case. Tests
create isolated instances; the runtime façade keeps one process-wide default.
"""

from __future__ import annotations

import copy
import logging
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from threading import RLock
from types import MappingProxyType
from typing import Any

from lib_log_stash.adapters.devices import NullDevice, StreamDevice, device_factory
from lib_log_stash.application.ports.contract import ValidationContract
from lib_log_stash.application.ports.device import OutputDevicePort
from lib_log_stash.application.use_cases.emit import DiagnosticHook, EmissionSettings, create_emit
from lib_log_stash.domain.errors import ConfigurationError, InvalidContractError
from lib_log_stash.domain.events import Clock

LOGGER = logging.getLogger(__name__)

FLAG_KEYS: tuple[str, ...] = ("include_parameters", "serialize_parameters", "silence_standard_logging")

AppendFieldsCallback = Callable[..., Any]


@dataclass(frozen=True)
class LogStasherSnapshot:
    """Immutable view over a :class:`LogStasher` at one point in time."""

    enabled: bool
    include_parameters: bool
    serialize_parameters: bool
    silence_standard_logging: bool
    metadata: Mapping[str, Any]
    default_device: OutputDevicePort
    writer: OutputDevicePort
    contract: ValidationContract | None
    append_fields_callback: AppendFieldsCallback | None = None


def _check_contract(contract: Any) -> ValidationContract | None:
    if contract is not None and not isinstance(contract, ValidationContract):
        raise InvalidContractError(
            f"Expected a validation contract with an evaluate() method, got {type(contract).__name__}"
        )
    return contract


def _check_flag(name: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a boolean, got {type(value).__name__}")
    return value


def _check_metadata(value: Any) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"metadata must be a mapping, got {type(value).__name__}")
    return copy.deepcopy(dict(value))


def _config_key(key: Any) -> str:
    return str(getattr(key, "value", key))


class LogStasher:
    """Configuration and entry point for JSON line emission.

    Parameters
    ----------
    device:
        Output device used both as :attr:`default_device` and as the line
        :attr:`writer`; defaults to standard output.
    metadata:
        Fields attached under ``metadata`` to every mapping/event payload.
    contract:
        Optional :class:`ValidationContract`.
    enabled, include_parameters, serialize_parameters, silence_standard_logging:
        Flags read by framework integrations. Defaults: ``False``, ``True``,
        ``True``, ``False``.
    clock:
        Timestamp source for event wrapping.
    diagnostic:
        Optional ``(name, payload)`` callback for pipeline milestones.

    Examples
    --------
    >>> from io import StringIO
    >>> buffer = StringIO()
    >>> stasher = LogStasher(device=StreamDevice(buffer), metadata={"namespace": "kirby"})
    >>> stasher.emit({"yolo": "brolo"})
    >>> buffer.getvalue()
    '{"yolo":"brolo","metadata":{"namespace":"kirby"}}\\n'
    """

    def __init__(
        self,
        *,
        device: OutputDevicePort | None = None,
        metadata: Mapping[str, Any] | None = None,
        contract: ValidationContract | None = None,
        enabled: bool = False,
        include_parameters: bool = True,
        serialize_parameters: bool = True,
        silence_standard_logging: bool = False,
        clock: Clock | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._lock = RLock()
        self._default_device: OutputDevicePort = device if device is not None else StreamDevice(sys.stdout)
        self._writer: OutputDevicePort = self._default_device
        self._metadata = _check_metadata(metadata)
        self._contract = _check_contract(contract)
        self._append_fields_callback: AppendFieldsCallback | None = None
        self._enabled = enabled
        self._include_parameters = include_parameters
        self._serialize_parameters = serialize_parameters
        self._silence_standard_logging = silence_standard_logging
        self._emit = create_emit(self._emission_settings, clock=clock, diagnostic=diagnostic)

    def _emission_settings(self) -> EmissionSettings:
        with self._lock:
            return EmissionSettings(device=self._writer, metadata=self._metadata, contract=self._contract)

    def emit(self, payload: Any, *, as_event: bool = False) -> None:
        """Write ``payload`` as exactly one JSON line to :attr:`writer`.

        Raises
        ------
        SerializationError
            A value in ``payload`` cannot be represented as JSON.
        ValidationCapabilityError
            The configured contract returned an unusable result.
        """

        self._emit(payload, as_event=as_event)

    # -- validation contract -------------------------------------------------

    @property
    def contract(self) -> ValidationContract | None:
        with self._lock:
            return self._contract

    @contract.setter
    def contract(self, contract: ValidationContract | None) -> None:
        checked = _check_contract(contract)
        with self._lock:
            self._contract = checked

    def set_contract(self, contract: ValidationContract | None) -> None:
        """Install ``contract`` (or clear it with ``None``).

        Raises
        ------
        InvalidContractError
            ``contract`` is not ``None`` and lacks ``evaluate``; the previous
            contract stays installed.
        """

        self.contract = contract

    # -- field hook for framework integrations --------------------------------

    @property
    def append_fields_callback(self) -> AppendFieldsCallback | None:
        """Hook registered through :meth:`append_fields`, or ``None``."""
        with self._lock:
            return self._append_fields_callback

    def append_fields(self, callback: AppendFieldsCallback | None) -> AppendFieldsCallback | None:
        """Register the callable integrations use to add fields to their records.

        Request instrumentation calls it with its own arguments (typically the
        request and the field mapping being built) before emitting. ``emit``
        itself never calls it. A later registration replaces the earlier one;
        ``None`` clears it. The callback is returned so this method also works
        as a decorator.

        Raises
        ------
        TypeError
            ``callback`` is neither callable nor ``None``.

        Examples
        --------
        >>> stasher = LogStasher()
        >>> @stasher.append_fields
        ... def add_user(request, fields):
        ...     fields["user"] = request["user"]
        >>> stasher.append_fields_callback is add_user
        True
        """

        if callback is not None and not callable(callback):
            raise TypeError(f"append_fields expects a callable or None, got {type(callback).__name__}")
        with self._lock:
            self._append_fields_callback = callback
        return callback

    # -- metadata and devices ------------------------------------------------

    @property
    def metadata(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._metadata)

    @metadata.setter
    def metadata(self, value: Mapping[str, Any] | None) -> None:
        checked = _check_metadata(value)
        with self._lock:
            self._metadata = checked

    @property
    def default_device(self) -> OutputDevicePort:
        with self._lock:
            return self._default_device

    @default_device.setter
    def default_device(self, device: OutputDevicePort) -> None:
        with self._lock:
            self._default_device = device

    @property
    def writer(self) -> OutputDevicePort:
        """Device receiving emitted lines."""
        with self._lock:
            return self._writer

    @writer.setter
    def writer(self, device: OutputDevicePort) -> None:
        with self._lock:
            self._writer = device

    # -- flags ---------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        with self._lock:
            return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        with self._lock:
            self._enabled = value

    @property
    def include_parameters(self) -> bool:
        with self._lock:
            return self._include_parameters

    @include_parameters.setter
    def include_parameters(self, value: bool) -> None:
        with self._lock:
            self._include_parameters = value

    @property
    def serialize_parameters(self) -> bool:
        with self._lock:
            return self._serialize_parameters

    @serialize_parameters.setter
    def serialize_parameters(self, value: bool) -> None:
        with self._lock:
            self._serialize_parameters = value

    @property
    def silence_standard_logging(self) -> bool:
        with self._lock:
            return self._silence_standard_logging

    @silence_standard_logging.setter
    def silence_standard_logging(self, value: bool) -> None:
        with self._lock:
            self._silence_standard_logging = value

    # -- bulk configuration --------------------------------------------------

    def load_from_config(self, config: Mapping[Any, Any]) -> None:
        """Apply a mapping of settings in one step.

        Recognised keys are ``metadata``, ``device``, ``include_parameters``,
        ``serialize_parameters`` and ``silence_standard_logging``; other keys
        are ignored. The line writer is reset to a discarding device unless
        ``device`` is present, in which case the new device becomes both
        :attr:`default_device` and :attr:`writer`. Every value is checked
        before anything is applied, so a :class:`ConfigurationError` leaves
        the previous state untouched.

        Flag values are stored as given but must already be ``bool``: a
        string such as ``"false"`` is truthy and would silently invert the
        setting, so it raises :class:`ConfigurationError` instead. Parse
        text sources first (:func:`lib_log_stash.config.config_from_env`
        does this for environment variables).
        """

        if not isinstance(config, Mapping):
            raise ConfigurationError(f"configuration must be a mapping, got {type(config).__name__}")

        updates: dict[str, Any] = {}
        device: OutputDevicePort | None = None
        for raw_key, value in config.items():
            key = _config_key(raw_key)
            if key == "metadata":
                updates["metadata"] = _check_metadata(value)
            elif key == "device":
                device = device_factory(value)
            elif key in FLAG_KEYS:
                updates[key] = _check_flag(key, value)
            else:
                LOGGER.debug("ignoring unknown configuration key %r", key)

        with self._lock:
            self._writer = NullDevice()
            if device is not None:
                self._default_device = device
                self._writer = device
                LOGGER.debug("installed output device %r", device)
            if "metadata" in updates:
                self._metadata = updates["metadata"]
            for key in FLAG_KEYS:
                if key in updates:
                    setattr(self, f"_{key}", updates[key])

    def snapshot(self) -> LogStasherSnapshot:
        """Return a read-only snapshot of the current configuration."""

        with self._lock:
            return LogStasherSnapshot(
                enabled=self._enabled,
                include_parameters=self._include_parameters,
                serialize_parameters=self._serialize_parameters,
                silence_standard_logging=self._silence_standard_logging,
                metadata=MappingProxyType(copy.deepcopy(self._metadata)),
                default_device=self._default_device,
                writer=self._writer,
                contract=self._contract,
                append_fields_callback=self._append_fields_callback,
            )


__all__ = ["AppendFieldsCallback", "FLAG_KEYS", "LogStasher", "LogStasherSnapshot"]
