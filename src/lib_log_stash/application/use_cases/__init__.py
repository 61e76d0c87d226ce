"""Use cases orchestrating the emission pipeline."""

from __future__ import annotations

from .emit import EmissionSettings, create_emit
from .validate import validate_payload

__all__ = ["EmissionSettings", "create_emit", "validate_payload"]
