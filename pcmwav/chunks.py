"""RIFF/WAVE chunk parsing and construction.

A channel is any object with ``read(n)`` (parse path) or ``write(b)``
(construct path). Only sequential access is assumed; unknown chunks are
skipped by reading and discarding their payload.
"""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass
from typing import BinaryIO

from .errors import WavFormatError
from .fmt import FMT_BODY_SIZE, PCM_COMPRESSION_CODE, WavFormat, parse_fmt_body

logger = logging.getLogger(__name__)


RIFF_CHUNK_ID = b"RIFF"
RIFF_TYPE_ID = b"WAVE"
FMT_CHUNK_ID = b"fmt "
DATA_CHUNK_ID = b"data"

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8

_RIFF_HEADER = struct.Struct("<4sI4s")
_CHUNK_HEADER = struct.Struct("<4sI")
_FMT_CHUNK = struct.Struct("<4sIHHIIHH")

_SKIP_BLOCK = 4096


@dataclass(frozen=True)
class ChunkHeader:
    chunk_id: bytes
    size: int

    @property
    def padded_size(self) -> int:
        """Payload size rounded up to the RIFF word boundary."""
        return self.size + (self.size & 1)

    @classmethod
    def unpack(cls, raw: bytes) -> "ChunkHeader":
        chunk_id, size = _CHUNK_HEADER.unpack(raw)
        return cls(chunk_id=chunk_id, size=size)


@dataclass(frozen=True)
class ParsedHeader:
    format: WavFormat
    data_size: int

    @property
    def num_frames(self) -> int:
        return self.data_size // self.format.block_align


def read_exact(channel: BinaryIO, size: int) -> bytes:
    """Read up to ``size`` bytes, looping over short reads until EOF."""
    parts: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = channel.read(remaining)
        if not chunk:
            break
        parts.append(chunk)
        remaining -= len(chunk)
    return b"".join(parts)


def skip_bytes(channel: BinaryIO, count: int) -> int:
    """Discard ``count`` bytes; returns how many were actually skipped."""
    skipped = 0
    while skipped < count:
        chunk = channel.read(min(_SKIP_BLOCK, count - skipped))
        if not chunk:
            break
        skipped += len(chunk)
    return skipped


def parse_riff_header(channel: BinaryIO, *, stream_length: int | None = None) -> int:
    """Validate the 12-byte RIFF/WAVE header and return the declared RIFF size."""
    raw = read_exact(channel, RIFF_HEADER_SIZE)
    if len(raw) != RIFF_HEADER_SIZE:
        raise WavFormatError("Not enough bytes for RIFF header")

    riff_id, riff_size, riff_type = _RIFF_HEADER.unpack(raw)
    if riff_id != RIFF_CHUNK_ID or riff_type != RIFF_TYPE_ID:
        raise WavFormatError(
            f"Bad RIFF signature: {riff_id!r}/{riff_type!r}, expected "
            f"{RIFF_CHUNK_ID!r}/{RIFF_TYPE_ID!r}"
        )

    if stream_length is not None and riff_size + 8 > stream_length:
        raise WavFormatError(
            f"Header chunk size ({riff_size}) does not match stream size ({stream_length})"
        )
    return riff_size


def read_chunk_header(channel: BinaryIO) -> ChunkHeader | None:
    """Return the next chunk header, or None at a clean end of stream."""
    raw = read_exact(channel, CHUNK_HEADER_SIZE)
    if not raw:
        return None
    if len(raw) != CHUNK_HEADER_SIZE:
        raise WavFormatError("Could not read chunk header")
    return ChunkHeader.unpack(raw)


def read_header(channel: BinaryIO, *, stream_length: int | None = None) -> ParsedHeader:
    """Parse a WAVE header up to the start of the sample data.

    On return the channel is positioned at the first byte of the ``data``
    chunk payload.
    """
    riff_size = parse_riff_header(channel, stream_length=stream_length)
    logger.debug("RIFF header ok: size=%s stream_length=%s", riff_size, stream_length)

    wav_format: WavFormat | None = None
    while True:
        header = read_chunk_header(channel)
        if header is None:
            if wav_format is None:
                raise WavFormatError(
                    "Reached end of stream without finding format chunk"
                )
            raise WavFormatError("Did not find a data chunk")

        if header.chunk_id == FMT_CHUNK_ID:
            body = read_exact(channel, min(FMT_BODY_SIZE, header.size))
            wav_format = parse_fmt_body(body)
            remaining = header.padded_size - FMT_BODY_SIZE
            if remaining > 0:
                skip_bytes(channel, remaining)
            logger.debug("Parsed fmt chunk: %s", wav_format)
        elif header.chunk_id == DATA_CHUNK_ID:
            if wav_format is None:
                raise WavFormatError("Data chunk found before format chunk")
            if header.size % wav_format.block_align != 0:
                raise WavFormatError(
                    f"Data chunk size ({header.size}) is not a multiple of "
                    f"block align ({wav_format.block_align})"
                )
            return ParsedHeader(format=wav_format, data_size=header.size)
        else:
            logger.debug(
                "Skipping chunk %r (%d bytes, %d padded)",
                header.chunk_id,
                header.size,
                header.padded_size,
            )
            skip_bytes(channel, header.padded_size)


def build_header(wav_format: WavFormat, num_frames: int) -> tuple[bytes, bool]:
    """Return the 44-byte header and whether the data chunk needs a pad byte."""
    data_size = wav_format.block_align * num_frames
    main_size = 4 + 8 + FMT_BODY_SIZE + 8 + data_size
    word_align_adjust = data_size % 2 == 1
    if word_align_adjust:
        main_size += 1

    header = b"".join(
        (
            _RIFF_HEADER.pack(RIFF_CHUNK_ID, main_size & 0xFFFFFFFF, RIFF_TYPE_ID),
            _FMT_CHUNK.pack(
                FMT_CHUNK_ID,
                FMT_BODY_SIZE,
                PCM_COMPRESSION_CODE,
                wav_format.num_channels,
                wav_format.sample_rate,
                wav_format.avg_bytes_per_second & 0xFFFFFFFF,
                wav_format.block_align & 0xFFFF,
                wav_format.valid_bits,
            ),
            _CHUNK_HEADER.pack(DATA_CHUNK_ID, data_size & 0xFFFFFFFF),
        )
    )
    return header, word_align_adjust
