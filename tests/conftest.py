from __future__ import annotations

import json
from datetime import datetime, timezone
from io import StringIO
from typing import Any, Callable, Iterator

import pytest
from pydantic import BaseModel
from rich.console import Console

from lib_log_stash.adapters.contracts import PydanticContract
from lib_log_stash.runtime import LogStasher, reset_default

FIXED_NOW = datetime(2025, 9, 23, 12, 0, 0, tzinfo=timezone.utc)


class RecordingDevice:
    """Output device collecting every written line."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)

    @property
    def payloads(self) -> list[Any]:
        return [json.loads(line) for line in self.lines]

    @property
    def last(self) -> Any:
        return json.loads(self.lines[-1])


class YoloRequest(BaseModel):
    yolo: str


@pytest.fixture(autouse=True)
def _reset_default_stasher() -> Iterator[None]:
    reset_default()
    yield
    reset_default()


@pytest.fixture
def recording_device() -> RecordingDevice:
    return RecordingDevice()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def stasher(recording_device: RecordingDevice, fixed_clock: Callable[[], datetime]) -> LogStasher:
    return LogStasher(device=recording_device, clock=fixed_clock)


@pytest.fixture
def yolo_contract() -> PydanticContract:
    return PydanticContract(YoloRequest)


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=40, force_terminal=False)
