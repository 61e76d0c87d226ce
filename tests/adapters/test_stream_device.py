from __future__ import annotations

import sys
import threading
from io import StringIO

import pytest

from lib_log_stash.adapters.devices import NullDevice, StreamDevice


class _CountingStream(StringIO):
    def __init__(self) -> None:
        super().__init__()
        self.flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


def test_stream_device_defaults_to_stdout() -> None:
    assert StreamDevice().stream is sys.stdout


def test_stream_device_writes_and_flushes_each_line() -> None:
    stream = _CountingStream()
    device = StreamDevice(stream)

    device.write('{"n":1}\n')
    device.write('{"n":2}\n')

    assert stream.getvalue() == '{"n":1}\n{"n":2}\n'
    assert stream.flushes == 2


def test_stream_device_keeps_lines_whole_under_concurrency() -> None:
    stream = StringIO()
    device = StreamDevice(stream)
    lines = [f'{{"thread":{index},"pad":"{"x" * 200}"}}\n' for index in range(16)]

    threads = [threading.Thread(target=lambda line=line: [device.write(line) for _ in range(25)]) for line in lines]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    written = stream.getvalue().splitlines(keepends=True)
    assert len(written) == 16 * 25
    assert set(written) == set(lines)


def test_stream_device_writes_to_captured_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    StreamDevice().write('{"yolo":"brolo"}\n')

    assert capsys.readouterr().out == '{"yolo":"brolo"}\n'


def test_null_device_discards() -> None:
    assert NullDevice().write("anything\n") is None
