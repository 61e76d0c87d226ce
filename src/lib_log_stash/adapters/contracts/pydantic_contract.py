"""Pydantic-backed validation contract.

Purpose
-------
Adapt a :class:`pydantic.BaseModel` subclass to the
:class:`~lib_log_stash.application.ports.contract.ValidationContract` port.

Contents
--------
* :func:`errors_to_tree` - fold pydantic error entries into ``{field: [messages]}``.
* :class:`PydanticContract` - the adapter.

System Role
-----------
A failing payload is a *result* (``success=False``), not an exception. On
failure no normalized values are returned, so the submitted values remain
visible in the emitted record. Anything pydantic raises besides
:class:`pydantic.ValidationError` propagates to the caller of ``emit``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from lib_log_stash.application.ports.contract import ValidationContract, ValidationResult

BASE_ERROR_KEY = "base"


def errors_to_tree(errors: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Return error messages nested by location.

    Examples
    --------
    >>> errors_to_tree([
    ...     {"loc": ("yolo",), "msg": "Input should be a valid string"},
    ...     {"loc": ("user", "id"), "msg": "Field required"},
    ...     {"loc": (), "msg": "Value error, bad combination"},
    ... ])
    {'yolo': ['Input should be a valid string'], 'user': {'id': ['Field required']}, 'base': ['Value error, bad combination']}
    """

    tree: dict[str, Any] = {}
    for error in errors:
        path = [str(part) for part in error.get("loc", ())] or [BASE_ERROR_KEY]
        node = tree
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {} if child is None else {BASE_ERROR_KEY: child}
                node[part] = child
            node = child
        leaf = node.setdefault(path[-1], [])
        if isinstance(leaf, dict):
            leaf = leaf.setdefault(BASE_ERROR_KEY, [])
        leaf.append(str(error.get("msg", "is invalid")))
    return tree


class PydanticContract(ValidationContract):
    """Validate payloads by instantiating ``model``.

    Examples
    --------
    >>> class Request(BaseModel):
    ...     yolo: str
    >>> contract = PydanticContract(Request)
    >>> contract.evaluate({"yolo": "brolo"}).success
    True
    >>> contract.evaluate({"yolo": 123}).errors
    {'yolo': ['Input should be a valid string']}
    """

    def __init__(self, model: type[BaseModel]) -> None:
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise TypeError(f"Expected a pydantic BaseModel subclass, got {model!r}")
        self._model = model

    @property
    def model(self) -> type[BaseModel]:
        return self._model

    def evaluate(self, data: dict[str, Any]) -> ValidationResult:
        """Validate ``data``; coerced values are returned only on success."""
        try:
            instance = self._model.model_validate(data)
        except ValidationError as exc:
            return ValidationResult(success=False, errors=errors_to_tree(exc.errors()))
        return ValidationResult(success=True, values=instance.model_dump(mode="json", by_alias=True))

    def __repr__(self) -> str:
        return f"PydanticContract({self._model.__name__})"


__all__ = ["PydanticContract", "errors_to_tree"]
