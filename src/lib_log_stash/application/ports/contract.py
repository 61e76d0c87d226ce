"""Validation contract port and the result it must return.

Purpose
-------
Let any schema-validation library sit behind a one-method interface so the
emission pipeline never depends on a specific rule language.

Contents
--------
* :class:`ValidationResult` - success flag, structured errors, normalized values.
* :class:`ValidationContract` - runtime-checkable protocol with ``evaluate``.

System Role
-----------
Assignments of a contract are type-checked against
:class:`ValidationContract`; the validation stage only ever reads
``success``, ``errors`` and ``to_dict()`` from the result.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(slots=True, frozen=True)
class ValidationResult:
    """Outcome of evaluating one payload.

    Attributes
    ----------
    success:
        ``True`` when the payload satisfied the contract.
    errors:
        Field name to list of messages; nested mappings for nested fields.
    values:
        Field map after coercion/defaulting by the contract. Deep-merged over
        the submitted payload, so it may be partial or empty.

    Examples
    --------
    >>> ValidationResult(success=False, errors={"yolo": ["must be a string"]}).to_dict()
    {}
    """

    success: bool
    errors: Mapping[str, Any] = field(default_factory=dict)
    values: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the normalized field map as a plain ``dict``."""

        return dict(self.values)


@runtime_checkable
class ValidationContract(Protocol):
    """Evaluate structured data against a schema."""

    def evaluate(self, data: dict[str, Any]) -> ValidationResult:
        """Return the :class:`ValidationResult` for ``data``."""


__all__ = ["ValidationContract", "ValidationResult"]
