"""Validation stage folding contract results back into the payload.

Purpose
-------
Run an opaque :class:`ValidationContract` over mapping and event payloads and
record the outcome inside the emitted record, so downstream log consumers can
filter on schema conformance.

Contents
--------
* :data:`SUCCESS_FIELD`, :data:`ERRORS_FIELD` - pipeline-owned diagnostic keys.
* :func:`deep_merge` - recursive mapping merge (override wins).
* :func:`validate_payload` - the stage itself.

System Role
-----------
Invoked by the emission use case only when a contract is configured. Errors
raised by the contract propagate untouched; a broken validator must never be
reported as a failed (or successful) validation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lib_log_stash.application.ports.contract import ValidationContract
from lib_log_stash.domain import json_codec
from lib_log_stash.domain.errors import ValidationCapabilityError
from lib_log_stash.domain.events import RESERVED_FIELDS
from lib_log_stash.domain.payload import EventPayload, MappingPayload, Payload, SequencePayload, payload_value

SUCCESS_FIELD = "dry_validation_success"
ERRORS_FIELD = "dry_validation_errors"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new mapping with ``override`` merged recursively over ``base``.

    Examples
    --------
    >>> deep_merge({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
    {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4}
    """

    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _unpack_result(result: Any) -> tuple[bool, Mapping[str, Any], Mapping[str, Any]]:
    """Read ``success``/``errors``/``to_dict()`` or fail loudly."""

    success = getattr(result, "success", None)
    errors = getattr(result, "errors", None)
    to_dict = getattr(result, "to_dict", None)
    if not isinstance(success, bool) or not isinstance(errors, Mapping) or not callable(to_dict):
        raise ValidationCapabilityError(
            f"validation contract returned {type(result).__name__}; expected an object with success, errors and to_dict()"
        )
    values = to_dict()
    if not isinstance(values, Mapping):
        raise ValidationCapabilityError(f"validation result to_dict() returned {type(values).__name__}, expected a mapping")
    return success, errors, values


def validate_payload(payload: Payload, contract: ValidationContract) -> Payload:
    """Evaluate ``payload`` with ``contract`` and fold the outcome into it.

    Sequences are returned unchanged. Mapping and event payloads are
    normalised through a JSON round-trip, evaluated, deep-merged with the
    contract's field map, and finally tagged with :data:`SUCCESS_FIELD` and
    :data:`ERRORS_FIELD`. Event reserved fields survive the merge unchanged.

    Examples
    --------
    >>> from lib_log_stash.application.ports.contract import ValidationResult
    >>> class RequireName:
    ...     def evaluate(self, data):
    ...         if isinstance(data.get("name"), str):
    ...             return ValidationResult(success=True, values={"name": data["name"].strip()})
    ...         return ValidationResult(success=False, errors={"name": ["must be a string"]})
    >>> validate_payload(MappingPayload({"name": " kirby "}), RequireName()).fields
    {'name': 'kirby', 'dry_validation_success': True, 'dry_validation_errors': '{}'}
    >>> validate_payload(MappingPayload({"name": 1}), RequireName()).fields[ERRORS_FIELD]
    '{"name":["must be a string"]}'
    """

    if isinstance(payload, SequencePayload):
        return payload
    if not isinstance(payload, (MappingPayload, EventPayload)):
        raise TypeError(f"unknown payload variant {type(payload).__name__}")

    normalized: dict[str, Any] = json_codec.loads(json_codec.dumps(payload_value(payload)))
    success, errors, values = _unpack_result(contract.evaluate(normalized))

    merged = deep_merge(normalized, values)
    if isinstance(payload, EventPayload):
        for key in RESERVED_FIELDS:
            merged[key] = normalized[key]
    merged[SUCCESS_FIELD] = success
    merged[ERRORS_FIELD] = json_codec.dumps(dict(errors))
    return MappingPayload(merged)


__all__ = ["ERRORS_FIELD", "SUCCESS_FIELD", "deep_merge", "validate_payload"]
