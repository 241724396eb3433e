"""Fixed-capacity byte buffer shared by a WavFile for its whole lifetime."""

from __future__ import annotations

import logging
from typing import BinaryIO

from .errors import WavStarvationError

logger = logging.getLogger(__name__)


DEFAULT_BUFFER_SIZE = 4096


class ByteBuffer:
    """A bytearray plus a cursor.

    In write mode ``pointer`` is the number of pending bytes. In read mode
    ``filled`` is the number of valid bytes and ``pointer`` the next unread one.
    """

    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE):
        if capacity <= 0:
            raise ValueError("buffer capacity must be positive")
        self.capacity = int(capacity)
        self.data = bytearray(self.capacity)
        self.pointer = 0
        self.filled = 0

    @property
    def pending(self) -> int:
        return self.pointer

    @property
    def available(self) -> int:
        return self.filled - self.pointer

    # -- write side -------------------------------------------------------

    def put(self, raw: bytes, sink: BinaryIO) -> None:
        """Append bytes, flushing to ``sink`` each time the buffer fills."""
        view = memoryview(raw)
        while view:
            if self.pointer == self.capacity:
                self.flush(sink)
            n = min(len(view), self.capacity - self.pointer)
            self.data[self.pointer : self.pointer + n] = view[:n]
            self.pointer += n
            view = view[n:]

    def flush(self, sink: BinaryIO) -> None:
        if self.pointer == 0:
            return
        logger.debug("Flushing %d buffered bytes", self.pointer)
        sink.write(bytes(self.data[: self.pointer]))
        self.pointer = 0

    # -- read side --------------------------------------------------------

    def refill(self, source: BinaryIO) -> int:
        chunk = source.read(self.capacity)
        n = len(chunk) if chunk else 0
        if n:
            self.data[:n] = chunk
        self.filled = n
        self.pointer = 0
        return n

    def take(self, size: int, source: BinaryIO) -> bytes:
        """Return exactly ``size`` bytes, refilling from ``source`` as needed."""
        if self.available >= size:
            start = self.pointer
            self.pointer += size
            return bytes(self.data[start : self.pointer])

        out = bytearray()
        while len(out) < size:
            if self.pointer == self.filled and self.refill(source) == 0:
                raise WavStarvationError("Not enough data available")
            n = min(size - len(out), self.available)
            out += self.data[self.pointer : self.pointer + n]
            self.pointer += n
        return bytes(out)
