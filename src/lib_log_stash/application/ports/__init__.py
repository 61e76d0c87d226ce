"""Protocols describing the boundaries of the emission pipeline."""

from __future__ import annotations

from .contract import ValidationContract, ValidationResult
from .device import OutputDevicePort

__all__ = ["OutputDevicePort", "ValidationContract", "ValidationResult"]
