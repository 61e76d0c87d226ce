from __future__ import annotations

import json
from typing import Any

import pytest

from lib_log_stash.application.ports.contract import ValidationResult
from lib_log_stash.application.use_cases.emit import (
    EmissionSettings,
    create_emit,
    merge_metadata,
    render_line,
    wrap_event,
)
from lib_log_stash.domain.errors import SerializationError
from lib_log_stash.domain.events import Event
from lib_log_stash.domain.payload import EventPayload, MappingPayload, SequencePayload

from ..conftest import FIXED_NOW, RecordingDevice


def _emit_with(device: RecordingDevice, **settings: Any):
    return create_emit(lambda: EmissionSettings(device=device, **settings), clock=lambda: FIXED_NOW)


def test_emit_writes_exactly_one_line(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device)

    emit({"yolo": "brolo"})

    assert recording_device.lines == ['{"yolo":"brolo"}\n']


def test_emit_merges_metadata_into_mappings(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device, metadata={"namespace": "cooldude"})

    emit({"yolo": "brolo", "metadata": "overwritten"})

    assert recording_device.last == {"yolo": "brolo", "metadata": {"namespace": "cooldude"}}


def test_emit_appends_metadata_to_events(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device, metadata={"namespace": "cooldude"})

    emit(Event({"yolo": "brolo"}, clock=lambda: FIXED_NOW))

    assert recording_device.last == {
        "@timestamp": "2025-09-23T12:00:00.000Z",
        "@version": "1",
        "yolo": "brolo",
        "metadata": {"namespace": "cooldude"},
    }


def test_emit_never_merges_metadata_into_sequences(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device, metadata={"namespace": "cooldude"})

    emit([{"yolo": "brolo"}])

    assert recording_device.last == [{"yolo": "brolo"}]


def test_emit_without_metadata_has_no_metadata_key(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device)

    emit({"yolo": "brolo"})
    emit(Event({"yolo": "brolo"}))
    emit({"yolo": "brolo"}, as_event=True)

    assert all("metadata" not in payload for payload in recording_device.payloads)


def test_emit_as_event_adds_reserved_fields(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device, metadata={"namespace": "cooldude"})

    emit({"yolo": "brolo"}, as_event=True)

    payload = recording_device.last
    assert payload["@timestamp"] == "2025-09-23T12:00:00.000Z"
    assert payload["@version"] == "1"
    assert payload["yolo"] == "brolo"
    assert payload["metadata"] == {"namespace": "cooldude"}


def test_emit_does_not_mutate_caller_payload(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device, metadata={"namespace": "cooldude"})
    payload = {"yolo": {"nested": 1}}
    event = Event({"yolo": "brolo"})

    emit(payload, as_event=True)
    emit(event)

    assert payload == {"yolo": {"nested": 1}}
    assert "metadata" not in event


def test_emit_reads_settings_on_every_call(recording_device: RecordingDevice) -> None:
    current = {"metadata": {}}
    emit = create_emit(lambda: EmissionSettings(device=recording_device, metadata=current["metadata"]))

    emit({"n": 1})
    current["metadata"] = {"namespace": "late"}
    emit({"n": 2})

    assert recording_device.payloads == [{"n": 1}, {"n": 2, "metadata": {"namespace": "late"}}]


def test_emit_routes_through_contract(recording_device: RecordingDevice) -> None:
    class AlwaysFails:
        def evaluate(self, data: dict[str, Any]) -> ValidationResult:
            return ValidationResult(success=False, errors={"yolo": ["is missing"]})

    emit = _emit_with(recording_device, contract=AlwaysFails())

    emit({"other": 1})

    assert recording_device.last == {
        "other": 1,
        "dry_validation_success": False,
        "dry_validation_errors": '{"yolo":["is missing"]}',
    }


def test_serialization_failure_writes_nothing(recording_device: RecordingDevice) -> None:
    emit = _emit_with(recording_device)

    with pytest.raises(SerializationError):
        emit({"bad": object()})

    assert recording_device.lines == []


def test_contract_exceptions_propagate_before_any_write(recording_device: RecordingDevice) -> None:
    class Broken:
        def evaluate(self, data: dict[str, Any]) -> ValidationResult:
            raise KeyError("schema exploded")

    emit = _emit_with(recording_device, contract=Broken())

    with pytest.raises(KeyError, match="schema exploded"):
        emit({"yolo": "brolo"})

    assert recording_device.lines == []


def test_diagnostic_hook_receives_milestones(recording_device: RecordingDevice) -> None:
    events: list[tuple[str, dict[str, Any]]] = []

    class Passes:
        def evaluate(self, data: dict[str, Any]) -> ValidationResult:
            return ValidationResult(success=True)

    emit = create_emit(
        lambda: EmissionSettings(device=recording_device, contract=Passes()),
        diagnostic=lambda name, payload: events.append((name, payload)),
    )

    emit({"yolo": "brolo"})

    assert [name for name, _ in events] == ["validated", "emitted"]
    assert events[0][1] == {"success": True}
    assert events[1][1]["shape"] == "mapping"
    assert events[1][1]["bytes"] == len(recording_device.lines[0].encode("utf-8"))


def test_wrap_event_leaves_sequences_alone() -> None:
    payload = SequencePayload([1, 2])
    assert wrap_event(payload) is payload


def test_merge_metadata_copies_metadata() -> None:
    metadata = {"tags": ["a"]}
    merged = merge_metadata(MappingPayload({}), metadata)

    assert isinstance(merged, MappingPayload)
    merged.fields["metadata"]["tags"].append("b")
    assert metadata == {"tags": ["a"]}


def test_merge_metadata_returns_new_event() -> None:
    original = EventPayload(Event({"yolo": "brolo"}))
    merged = merge_metadata(original, {"namespace": "cooldude"})

    assert "metadata" not in original.event
    assert isinstance(merged, EventPayload)
    assert merged.event["metadata"] == {"namespace": "cooldude"}


def test_render_line_round_trips_plain_payloads() -> None:
    payload = {"s": "x", "n": 1, "f": 1.5, "b": False, "none": None, "list": [1, {"a": []}]}

    line = render_line(MappingPayload(payload))

    assert line.endswith("\n")
    assert line.count("\n") == 1
    assert json.loads(line) == payload
