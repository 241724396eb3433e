"""Frame-oriented reader/writer for uncompressed PCM WAV files."""

from __future__ import annotations

import enum
import logging
import os
from typing import Any, BinaryIO, Callable, Union

from .buffer import ByteBuffer
from .chunks import build_header, read_header
from .config import get_buffer_size
from .errors import WavRangeError, WavStateError
from .fmt import WavFormat, negotiate_write_format
from .samples import (
    DomainCodec,
    SampleDomain,
    codec_for,
    decode_sample,
    encode_sample,
    frames_view,
    resolve_domain,
)

logger = logging.getLogger(__name__)


Channel = Union[str, "os.PathLike[str]", int, BinaryIO]


class IOState(enum.Enum):
    READING = "reading"
    WRITING = "writing"
    CLOSED = "closed"


def _stream_length(fh: BinaryIO) -> int | None:
    """Bytes left in ``fh`` from its current position, if it can tell."""
    seekable = getattr(fh, "seekable", None)
    if seekable is None or not seekable():
        return None
    pos = fh.tell()
    end = fh.seek(0, os.SEEK_END)
    fh.seek(pos)
    return end - pos


def _open_channel(target: Channel, mode: str) -> tuple[BinaryIO, bool]:
    """Return ``(file object, owned)`` for a path, descriptor or file object."""
    if isinstance(target, int):
        return open(target, mode, closefd=False), True
    if isinstance(target, (str, os.PathLike)):
        return open(target, mode), True
    return target, False


class WavFile:
    """One open WAV file, either READING or WRITING, never both.

    Use :meth:`open` or :meth:`create` rather than calling the constructor.
    Instances are context managers; leaving the ``with`` block closes them.
    """

    def __init__(
        self,
        channel: BinaryIO,
        wav_format: WavFormat,
        num_frames: int,
        state: IOState,
        *,
        owns_channel: bool,
        word_align_adjust: bool = False,
        buffer_size: int | None = None,
    ):
        if buffer_size is None:
            buffer_size = get_buffer_size(load_env=False)
        self._channel = channel
        self._owns_channel = owns_channel
        self._format = wav_format
        self._num_frames = num_frames
        self._frame_counter = 0
        self._word_align_adjust = word_align_adjust
        self._buffer = ByteBuffer(buffer_size)
        self._state = state

    @classmethod
    def open(cls, source: Channel, *, buffer_size: int | None = None) -> "WavFile":
        """Parse the header of ``source`` and return a handle in READING state."""
        fh, owned = _open_channel(source, "rb")
        try:
            header = read_header(fh, stream_length=_stream_length(fh))
            wav_file = cls(
                fh,
                header.format,
                header.num_frames,
                IOState.READING,
                owns_channel=owned,
                buffer_size=buffer_size,
            )
        except BaseException:
            if owned:
                fh.close()
            raise
        logger.debug("Opened %r for reading: %r", source, wav_file)
        return wav_file

    @classmethod
    def create(
        cls,
        sink: Channel,
        num_channels: int,
        num_frames: int,
        valid_bits: int,
        sample_rate: int,
        *,
        buffer_size: int | None = None,
    ) -> "WavFile":
        """Write a header for ``num_frames`` frames and return a WRITING handle.

        All parameters are validated before ``sink`` is opened or written to.
        """
        wav_format = negotiate_write_format(
            num_channels=num_channels,
            num_frames=num_frames,
            valid_bits=valid_bits,
            sample_rate=sample_rate,
        )
        header, word_align_adjust = build_header(wav_format, num_frames)
        if buffer_size is None:
            buffer_size = get_buffer_size(load_env=False)

        fh, owned = _open_channel(sink, "wb")
        try:
            fh.write(header)
        except BaseException:
            if owned:
                fh.close()
            raise

        wav_file = cls(
            fh,
            wav_format,
            num_frames,
            IOState.WRITING,
            owns_channel=owned,
            word_align_adjust=word_align_adjust,
            buffer_size=buffer_size,
        )
        logger.debug("Created %r for writing: %r", sink, wav_file)
        return wav_file

    # -- accessors ----------------------------------------------------------

    @property
    def state(self) -> IOState:
        return self._state

    @property
    def format(self) -> WavFormat:
        return self._format

    @property
    def num_channels(self) -> int:
        return self._format.num_channels

    @property
    def num_frames(self) -> int:
        return self._num_frames

    @property
    def frames_remaining(self) -> int:
        return self._num_frames - self._frame_counter

    @property
    def sample_rate(self) -> int:
        return self._format.sample_rate

    @property
    def valid_bits(self) -> int:
        return self._format.valid_bits

    @property
    def bytes_per_sample(self) -> int:
        return self._format.bytes_per_sample

    @property
    def block_align(self) -> int:
        return self._format.block_align

    @property
    def duration_s(self) -> float | None:
        if self.sample_rate <= 0:
            return None
        return self._num_frames / float(self.sample_rate)

    def display_info(self) -> str:
        lines = [
            f"Channels: {self.num_channels}, Frames: {self.num_frames}",
            f"IO State: {self._state.name}",
            f"Sample Rate: {self.sample_rate}, Block Align: {self.block_align}",
            f"Valid Bits: {self.valid_bits}, Bytes per sample: {self.bytes_per_sample}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"<WavFile {self._state.name} channels={self.num_channels} "
            f"rate={self.sample_rate} bits={self.valid_bits} "
            f"frames={self._frame_counter}/{self._num_frames}>"
        )

    # -- frame I/O ------------------------------------------------------------

    def read_frames(
        self,
        dest: Any,
        count: int,
        offset: int = 0,
        *,
        domain: SampleDomain | str | None = None,
    ) -> int:
        """Read up to ``count`` frames into ``dest``; returns frames read.

        ``dest`` is either flat (interleaved samples starting at ``offset``) or
        per-channel (``dest[c][offset + f]``). Fewer than ``count`` frames are
        returned only once every frame in the file has been read.
        """
        self._require(IOState.READING)
        return self._transfer(dest, count, offset, domain, self._read_frame)

    def write_frames(
        self,
        src: Any,
        count: int,
        offset: int = 0,
        *,
        domain: SampleDomain | str | None = None,
    ) -> int:
        """Write up to ``count`` frames from ``src``; returns frames written.

        Writing stops early, without error, once the frame count declared at
        :meth:`create` time has been reached.
        """
        self._require(IOState.WRITING)
        return self._transfer(src, count, offset, domain, self._write_frame)

    def _require(self, state: IOState) -> None:
        if self._state is state:
            return
        if self._state is IOState.CLOSED:
            raise WavStateError("WavFile is closed")
        action = "read from" if state is IOState.READING else "write to"
        raise WavStateError(
            f"Cannot {action} WavFile opened for {self._state.value}"
        )

    def _transfer(
        self,
        array: Any,
        count: int,
        offset: int,
        domain: SampleDomain | str | None,
        step: Callable[[Any, int, DomainCodec], None],
    ) -> int:
        if count < 0:
            raise WavRangeError(f"Frame count must not be negative, got {count}")
        if offset < 0:
            raise WavRangeError(f"Offset must not be negative, got {offset}")

        codec = codec_for(resolve_domain(array, domain))
        view = frames_view(array, offset, self.num_channels)
        todo = min(count, self.frames_remaining)
        view.require_frames(todo)
        for frame in range(todo):
            step(view, frame, codec)
        return todo

    def _read_frame(self, view: Any, frame: int, codec: DomainCodec) -> None:
        width = self.bytes_per_sample
        raw = self._buffer.take(width * self.num_channels, self._channel)
        self._frame_counter += 1
        for channel in range(self.num_channels):
            sample = decode_sample(raw[channel * width : (channel + 1) * width])
            view.set(frame, channel, codec.decode(sample, self._format))

    def _write_frame(self, view: Any, frame: int, codec: DomainCodec) -> None:
        # Encode the whole frame first so a bad sample leaves nothing pending.
        raw = b"".join(
            encode_sample(codec.encode(view.get(frame, channel), self._format), self.bytes_per_sample)
            for channel in range(self.num_channels)
        )
        self._buffer.put(raw, self._channel)
        self._frame_counter += 1

    # -- lifecycle ------------------------------------------------------------

    def close(self) -> None:
        """Flush pending bytes, pad the data chunk if needed, release the channel.

        Calling close() more than once is harmless.
        """
        if self._state is IOState.CLOSED:
            return
        was_writing = self._state is IOState.WRITING
        self._state = IOState.CLOSED
        try:
            if was_writing:
                if self._frame_counter < self._num_frames:
                    logger.warning(
                        "Closing WAV after %d of %d declared frames; the header overstates the data",
                        self._frame_counter,
                        self._num_frames,
                    )
                self._buffer.flush(self._channel)
                if self._word_align_adjust:
                    self._channel.write(b"\x00")
                flush = getattr(self._channel, "flush", None)
                if flush is not None:
                    flush()
        finally:
            if self._owns_channel:
                self._channel.close()
            logger.debug("Closed %r", self)

    def __enter__(self) -> "WavFile":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def open_wav(source: Channel, *, buffer_size: int | None = None) -> WavFile:
    return WavFile.open(source, buffer_size=buffer_size)


def create_wav(
    sink: Channel,
    num_channels: int,
    num_frames: int,
    valid_bits: int,
    sample_rate: int,
    *,
    buffer_size: int | None = None,
) -> WavFile:
    return WavFile.create(
        sink,
        num_channels,
        num_frames,
        valid_bits,
        sample_rate,
        buffer_size=buffer_size,
    )
