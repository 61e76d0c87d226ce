"""Structured event carrying the reserved timestamp and version fields.

Purpose
-------
Provide the canonical "wrapped" payload shape understood by log aggregation
pipelines: every event carries ``@timestamp`` and ``@version`` next to the
caller-supplied fields.

Contents
--------
* :data:`TIMESTAMP_FIELD`, :data:`VERSION_FIELD`, :data:`RESERVED_FIELDS`.
* :class:`Event` - mapping-like event with an ``append`` operation.

System Role
-----------
Domain value used by the emission use case when callers request event
wrapping, and accepted directly as a payload. Reserved fields are set once at
construction and are never overwritten afterwards.
"""

from __future__ import annotations

import copy
from collections.abc import Callable, Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from . import json_codec

TIMESTAMP_FIELD = "@timestamp"
VERSION_FIELD = "@version"
EVENT_VERSION = "1"
RESERVED_FIELDS: tuple[str, str] = (TIMESTAMP_FIELD, VERSION_FIELD)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _from_epoch(value: int | float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def format_timestamp(value: Any) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision.

    Strings are trusted as already formatted. Naive datetimes are read as UTC,
    ints and floats as seconds since the epoch. Anything else is rendered
    with :func:`str`, so every event carries a timestamp.

    Examples
    --------
    >>> format_timestamp(datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc))
    '2025-09-30T12:00:00.000Z'
    >>> format_timestamp(datetime(2025, 9, 30, 12, 0))
    '2025-09-30T12:00:00.000Z'
    >>> format_timestamp(1700000000)
    '2023-11-14T22:13:20.000Z'
    """

    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        converted = _from_epoch(value)
        if converted is None:
            return str(value)
        value = converted
    if not isinstance(value, datetime):
        return str(value)
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


class Event(Mapping[str, Any]):
    """Mapping of caller fields plus the reserved ``@timestamp``/``@version``.

    Attributes
    ----------
    timestamp:
        ISO-8601 text captured at construction (or taken from a caller-supplied
        ``@timestamp``).
    version:
        Always :data:`EVENT_VERSION`.

    Examples
    --------
    >>> fixed = lambda: datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    >>> event = Event({"yolo": "brolo", "@version": "9"}, clock=fixed)
    >>> event.to_dict()
    {'@timestamp': '2025-09-30T12:00:00.000Z', '@version': '1', 'yolo': 'brolo'}
    >>> event.append({"@timestamp": "nope", "extra": 1})["@timestamp"]
    '2025-09-30T12:00:00.000Z'
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None, *, clock: Clock | None = None) -> None:
        fields = dict(data) if data is not None else {}
        supplied = fields.pop(TIMESTAMP_FIELD, None)
        fields.pop(VERSION_FIELD, None)
        timestamp = supplied if supplied is not None else (clock or _utc_now)()
        self._data: dict[str, Any] = {
            TIMESTAMP_FIELD: format_timestamp(timestamp),
            VERSION_FIELD: EVENT_VERSION,
        }
        self._data.update(fields)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Event({self._data!r})"

    @property
    def timestamp(self) -> str:
        return self._data[TIMESTAMP_FIELD]

    @property
    def version(self) -> str:
        return self._data[VERSION_FIELD]

    def append(self, fields: Mapping[str, Any] | None = None, **extra: Any) -> "Event":
        """Add ``fields`` in place, skipping the reserved keys; returns ``self``."""

        for source in (fields or {}, extra):
            for key, value in source.items():
                if key in RESERVED_FIELDS:
                    continue
                self._data[key] = value
        return self

    def copy(self) -> "Event":
        """Return an independent deep copy preserving the reserved fields."""

        clone = Event.__new__(Event)
        clone._data = copy.deepcopy(self._data)
        return clone

    def __deepcopy__(self, memo: dict[int, Any]) -> "Event":
        return self.copy()

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow ``dict`` of all fields, reserved ones first."""

        return dict(self._data)

    def to_json(self) -> str:
        """Serialize the event to a single line of compact JSON."""

        return json_codec.dumps(self._data)


__all__ = [
    "EVENT_VERSION",
    "Event",
    "RESERVED_FIELDS",
    "TIMESTAMP_FIELD",
    "VERSION_FIELD",
    "format_timestamp",
]
