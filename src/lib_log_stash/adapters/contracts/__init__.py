"""Validation contract adapters."""

from __future__ import annotations

from .pydantic_contract import PydanticContract, errors_to_tree

__all__ = ["PydanticContract", "errors_to_tree"]
