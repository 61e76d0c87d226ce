"""Single-line JSON encoding used for emitted records and contract inputs."""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

from .errors import SerializationError


def _encode_extra(value: Any) -> Any:
    """Render mappings, enums, and dates that :mod:`json` rejects natively."""
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(value: Any) -> str:
    """Return ``value`` as compact JSON text on a single line.

    Examples
    --------
    >>> dumps({"yolo": "brolo", "n": [1, 2]})
    '{"yolo":"brolo","n":[1,2]}'
    >>> dumps({})
    '{}'
    """

    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=_encode_extra)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc


def loads(text: str) -> Any:
    """Parse JSON text produced by :func:`dumps`."""

    return json.loads(text)


__all__ = ["dumps", "loads"]
