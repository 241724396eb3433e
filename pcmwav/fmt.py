"""Format parameter validation and derivation.

Everything the byte stream does not state directly lives here: the sample
width, the block alignment and the scale/offset pair used to move between raw
integer samples and normalized floats.

The read and write directions intentionally differ:

- the read path caps valid bits at 64, the write path accepts up to 65535;
- the read path divides by ``2 ** (bits - 1)`` for signed data while the write
  path multiplies by the largest positive value that fits in ``bits`` bits.

Expect rounding drift at extreme bit depths when converting floats back and
forth.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .errors import WavConsistencyError, WavFormatError, WavRangeError


PCM_COMPRESSION_CODE = 1

MIN_CHANNELS = 1
MAX_CHANNELS = 65535
MIN_VALID_BITS = 2
MAX_VALID_BITS_READ = 64
MAX_VALID_BITS_WRITE = 65535
MAX_SAMPLE_RATE = 0xFFFFFFFF

INT64_MAX = (1 << 63) - 1

FMT_BODY_SIZE = 16
_FMT_BODY = struct.Struct("<HHIIHH")


@dataclass(frozen=True)
class WavFormat:
    num_channels: int
    sample_rate: int
    valid_bits: int
    bytes_per_sample: int
    block_align: int
    float_scale: float
    float_offset: float

    @property
    def signed(self) -> bool:
        return self.valid_bits > 8

    @property
    def avg_bytes_per_second(self) -> int:
        return self.sample_rate * self.block_align


def bytes_per_sample_for(valid_bits: int) -> int:
    return (valid_bits + 7) // 8


def decode_scale(valid_bits: int) -> tuple[float, float]:
    """Return ``(scale, offset)`` for turning raw samples into floats."""
    if valid_bits > 8:
        return float(1 << (valid_bits - 1)), 0.0
    return 0.5 * ((1 << valid_bits) - 1), -1.0


def encode_scale(valid_bits: int) -> tuple[float, float]:
    """Return ``(scale, offset)`` for turning floats into raw samples."""
    if valid_bits > 8:
        shift = max(64 - valid_bits, 0)
        return float(INT64_MAX >> shift), 0.0
    return 0.5 * ((1 << valid_bits) - 1), 1.0


def parse_fmt_body(body: bytes) -> WavFormat:
    """Validate the first 16 bytes of a ``fmt `` chunk and derive a read format."""
    if len(body) < FMT_BODY_SIZE:
        raise WavFormatError(
            f"Format chunk too short: {len(body)} bytes, need {FMT_BODY_SIZE}"
        )

    (
        compression_code,
        num_channels,
        sample_rate,
        _avg_bytes_per_second,
        block_align,
        valid_bits,
    ) = _FMT_BODY.unpack_from(body)

    if compression_code != PCM_COMPRESSION_CODE:
        raise WavFormatError(f"Compression code {compression_code} not supported")
    if num_channels == 0:
        raise WavRangeError("Number of channels specified in header is equal to zero")
    if block_align == 0:
        raise WavRangeError("Block align specified in header is equal to zero")
    if valid_bits < MIN_VALID_BITS:
        raise WavRangeError(
            f"Valid bits specified in header is less than {MIN_VALID_BITS}"
        )
    if valid_bits > MAX_VALID_BITS_READ:
        raise WavRangeError(
            f"Valid bits specified in header is greater than {MAX_VALID_BITS_READ}"
        )

    bytes_per_sample = bytes_per_sample_for(valid_bits)
    if bytes_per_sample * num_channels != block_align:
        raise WavConsistencyError(
            "Block align mismatch: header says "
            f"{block_align}, {valid_bits} bits x {num_channels} channels "
            f"needs {bytes_per_sample * num_channels}"
        )

    scale, offset = decode_scale(valid_bits)
    return WavFormat(
        num_channels=num_channels,
        sample_rate=sample_rate,
        valid_bits=valid_bits,
        bytes_per_sample=bytes_per_sample,
        block_align=block_align,
        float_scale=scale,
        float_offset=offset,
    )


def negotiate_write_format(
    *,
    num_channels: int,
    num_frames: int,
    valid_bits: int,
    sample_rate: int,
) -> WavFormat:
    """Validate caller-supplied parameters and derive a write format."""
    if not MIN_CHANNELS <= num_channels <= MAX_CHANNELS:
        raise WavRangeError(
            f"Illegal number of channels {num_channels}, "
            f"valid range {MIN_CHANNELS} to {MAX_CHANNELS}"
        )
    if num_frames < 0:
        raise WavRangeError("Number of frames must be positive")
    if not MIN_VALID_BITS <= valid_bits <= MAX_VALID_BITS_WRITE:
        raise WavRangeError(
            f"Illegal number of valid bits {valid_bits}, "
            f"valid range {MIN_VALID_BITS} to {MAX_VALID_BITS_WRITE}"
        )
    if not 0 <= sample_rate <= MAX_SAMPLE_RATE:
        raise WavRangeError(
            f"Sample rate must be between 0 and {MAX_SAMPLE_RATE}, got {sample_rate}"
        )

    bytes_per_sample = bytes_per_sample_for(valid_bits)
    scale, offset = encode_scale(valid_bits)
    return WavFormat(
        num_channels=num_channels,
        sample_rate=sample_rate,
        valid_bits=valid_bits,
        bytes_per_sample=bytes_per_sample,
        block_align=bytes_per_sample * num_channels,
        float_scale=scale,
        float_offset=offset,
    )
