"""Tagged payload variants accepted by the emission pipeline.

Purpose
-------
Turn whatever the caller hands to ``emit`` into one of three explicit shapes
so later stages dispatch on the variant instead of probing arbitrary objects.

Contents
--------
* :class:`MappingPayload`, :class:`EventPayload`, :class:`SequencePayload`.
* :func:`detached_copy` - deep copy reporting uncopyable values as serialization errors.
* :func:`normalize_payload` - deep-copying constructor for the variants.
* :func:`payload_value` - unwrap a variant into the value to serialise.

System Role
-----------
Every variant owns an independent deep copy, so the caller's object is never
mutated by metadata merging, event wrapping, or validation.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .errors import SerializationError
from .events import Event


@dataclass(slots=True, frozen=True)
class MappingPayload:
    """Plain key/value record."""

    fields: dict[str, Any]


@dataclass(slots=True, frozen=True)
class EventPayload:
    """Pre-built or freshly wrapped :class:`Event`."""

    event: Event


@dataclass(slots=True, frozen=True)
class SequencePayload:
    """List-shaped record; opaque to metadata merging and validation."""

    items: list[Any]


Payload = Union[MappingPayload, EventPayload, SequencePayload]


def detached_copy(value: Any) -> Any:
    """Deep-copy ``value``; objects that cannot be copied raise :class:`SerializationError`.

    Examples
    --------
    >>> import threading
    >>> detached_copy({"lock": threading.Lock()})  # doctest: +ELLIPSIS
    Traceback (most recent call last):
    ...
    lib_log_stash.domain.errors.SerializationError: cannot copy payload value: ...
    """

    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error) as exc:
        raise SerializationError(f"cannot copy payload value: {exc}") from exc


def normalize_payload(payload: Any) -> Payload:
    """Deep-copy ``payload`` into its tagged variant.

    Raises
    ------
    TypeError
        When ``payload`` is neither a mapping, an :class:`Event`, nor a
        non-string sequence.
    SerializationError
        When a nested value cannot be copied (locks, open files, sockets).

    Examples
    --------
    >>> original = {"yolo": {"nested": 1}}
    >>> variant = normalize_payload(original)
    >>> variant.fields["yolo"]["nested"] = 2
    >>> original
    {'yolo': {'nested': 1}}
    >>> type(normalize_payload([1, 2])).__name__
    'SequencePayload'
    """

    if isinstance(payload, Event):
        return EventPayload(detached_copy(payload))
    if isinstance(payload, Mapping):
        return MappingPayload(detached_copy(dict(payload)))
    if isinstance(payload, Sequence) and not isinstance(payload, (str, bytes, bytearray)):
        return SequencePayload(detached_copy(list(payload)))
    raise TypeError(f"payload must be a mapping, an Event, or a sequence, got {type(payload).__name__}")


def payload_value(payload: Payload) -> Any:
    """Return the JSON-ready value carried by ``payload``."""

    if isinstance(payload, MappingPayload):
        return payload.fields
    if isinstance(payload, EventPayload):
        return payload.event.to_dict()
    if isinstance(payload, SequencePayload):
        return payload.items
    raise TypeError(f"unknown payload variant {type(payload).__name__}")


__all__ = [
    "EventPayload",
    "MappingPayload",
    "Payload",
    "SequencePayload",
    "detached_copy",
    "normalize_payload",
    "payload_value",
]
