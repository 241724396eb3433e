from __future__ import annotations

import io

import pytest

from pcmwav.buffer import ByteBuffer
from pcmwav.errors import WavStarvationError


def test_put_flushes_whenever_the_buffer_fills() -> None:
    sink = io.BytesIO()
    buf = ByteBuffer(4)

    buf.put(b"0123456789", sink)
    assert sink.getvalue() == b"01234567"
    assert buf.pending == 2

    buf.flush(sink)
    assert sink.getvalue() == b"0123456789"
    assert buf.pending == 0


def test_put_keeps_a_full_buffer_until_more_bytes_arrive() -> None:
    sink = io.BytesIO()
    buf = ByteBuffer(4)
    buf.put(b"abcd", sink)
    assert sink.getvalue() == b""
    assert buf.pending == 4


def test_flush_on_empty_buffer_writes_nothing() -> None:
    class _Sink:
        def __init__(self) -> None:
            self.calls = 0

        def write(self, _data: bytes) -> int:
            self.calls += 1
            return 0

    sink = _Sink()
    ByteBuffer(8).flush(sink)
    assert sink.calls == 0


def test_take_spans_refills() -> None:
    source = io.BytesIO(b"abcdefg")
    buf = ByteBuffer(3)
    assert buf.take(2, source) == b"ab"
    assert buf.take(2, source) == b"cd"
    assert buf.take(3, source) == b"efg"


def test_take_raises_when_source_runs_dry() -> None:
    source = io.BytesIO(b"abc")
    buf = ByteBuffer(4)
    assert buf.take(2, source) == b"ab"
    with pytest.raises(WavStarvationError, match="Not enough data available"):
        buf.take(2, source)


def test_starvation_is_an_eof_error() -> None:
    with pytest.raises(EOFError):
        ByteBuffer(4).take(1, io.BytesIO(b""))


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        ByteBuffer(0)
