"""Use case turning a caller payload into exactly one written JSON line.

Purpose
-------
Implement the emission pipeline: normalise, merge metadata, optionally wrap
as an event, optionally validate, serialise, write.

Contents
--------
* :class:`EmissionSettings` - snapshot of the state one emission depends on.
* Stage helpers :func:`merge_metadata`, :func:`wrap_event`, :func:`render_line`.
* :func:`create_emit` factory returning the runtime callable.

System Role
-----------
Application-layer orchestrator. The runtime's :class:`LogStasher` supplies a
fresh :class:`EmissionSettings` per call so configuration changes made by
other threads take effect on the next emission (last write wins).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from lib_log_stash.application.ports.contract import ValidationContract
from lib_log_stash.application.ports.device import OutputDevicePort
from lib_log_stash.domain import json_codec
from lib_log_stash.domain.events import Clock, Event
from lib_log_stash.domain.payload import (
    EventPayload,
    MappingPayload,
    Payload,
    SequencePayload,
    detached_copy,
    normalize_payload,
    payload_value,
)

from .validate import SUCCESS_FIELD, validate_payload

METADATA_FIELD = "metadata"
RECORD_SEPARATOR = "\n"

DiagnosticHook = Optional[Callable[[str, dict[str, Any]], None]]


class EmitCallable(Protocol):
    def __call__(self, payload: Any, *, as_event: bool = False) -> None: ...


@dataclass(slots=True, frozen=True)
class EmissionSettings:
    """State read once per emission."""

    device: OutputDevicePort
    metadata: Mapping[str, Any] = field(default_factory=dict)
    contract: ValidationContract | None = None


def merge_metadata(payload: Payload, metadata: Mapping[str, Any]) -> Payload:
    """Attach ``metadata`` under :data:`METADATA_FIELD`; sequences are skipped.

    Examples
    --------
    >>> merge_metadata(MappingPayload({"yolo": "brolo"}), {"namespace": "cooldude"}).fields
    {'yolo': 'brolo', 'metadata': {'namespace': 'cooldude'}}
    >>> merge_metadata(SequencePayload([1]), {"namespace": "cooldude"}).items
    [1]
    """

    if not metadata:
        return payload
    attached = detached_copy(dict(metadata))
    if isinstance(payload, MappingPayload):
        return MappingPayload({**payload.fields, METADATA_FIELD: attached})
    if isinstance(payload, EventPayload):
        return EventPayload(payload.event.copy().append({METADATA_FIELD: attached}))
    return payload


def wrap_event(payload: Payload, clock: Clock | None = None) -> Payload:
    """Wrap mappings into an :class:`Event`; events keep their timestamp."""

    if isinstance(payload, MappingPayload):
        return EventPayload(Event(payload.fields, clock=clock))
    if isinstance(payload, EventPayload):
        return EventPayload(Event(payload.event, clock=clock))
    return payload


def render_line(payload: Payload) -> str:
    """Serialise ``payload`` to compact JSON terminated by the record separator."""

    return json_codec.dumps(payload_value(payload)) + RECORD_SEPARATOR


def _shape(payload: Payload) -> str:
    if isinstance(payload, SequencePayload):
        return "sequence"
    if isinstance(payload, EventPayload):
        return "event"
    return "mapping"


def create_emit(
    settings: Callable[[], EmissionSettings],
    *,
    clock: Clock | None = None,
    diagnostic: DiagnosticHook = None,
) -> EmitCallable:
    """Build the emission callable bound to a settings provider.

    Parameters
    ----------
    settings:
        Zero-argument callable returning the :class:`EmissionSettings` for the
        current call.
    clock:
        Optional timestamp source used when wrapping events.
    diagnostic:
        Optional callback invoked with ``("validated", {...})`` and
        ``("emitted", {...})`` milestones.

    Examples
    --------
    >>> lines = []
    >>> class Recorder:
    ...     def write(self, line):
    ...         lines.append(line)
    >>> emit = create_emit(lambda: EmissionSettings(device=Recorder()))
    >>> emit({"yolo": "brolo"})
    >>> lines
    ['{"yolo":"brolo"}\\n']
    """

    def _diagnose(name: str, payload: dict[str, Any]) -> None:
        if diagnostic is not None:
            diagnostic(name, payload)

    def emit(payload: Any, *, as_event: bool = False) -> None:
        current = settings()
        variant = normalize_payload(payload)
        variant = merge_metadata(variant, current.metadata)
        if as_event:
            variant = wrap_event(variant, clock)
        if current.contract is not None:
            variant = validate_payload(variant, current.contract)
            if isinstance(variant, MappingPayload):
                _diagnose("validated", {"success": variant.fields[SUCCESS_FIELD]})
        line = render_line(variant)
        current.device.write(line)
        _diagnose("emitted", {"shape": _shape(variant), "bytes": len(line.encode("utf-8"))})

    return emit


__all__ = [
    "DiagnosticHook",
    "EmissionSettings",
    "EmitCallable",
    "METADATA_FIELD",
    "RECORD_SEPARATOR",
    "create_emit",
    "merge_metadata",
    "render_line",
    "wrap_event",
]
