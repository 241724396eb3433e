"""Sample codec, sample domains and array-shape accessors.

A raw sample is ``bytes_per_sample`` little-endian bytes. Multi-byte samples
are two's complement (the top byte is sign-extended); single-byte samples are
unsigned.

Frame operations combine one :class:`SampleDomain` (how a raw integer maps to
a caller value) with one shape accessor (where that value lives in the
caller's array).
"""

from __future__ import annotations

import enum
import numbers
from dataclasses import dataclass
from typing import Any, Callable

from .errors import WavRangeError
from .fmt import WavFormat


def decode_sample(raw: bytes) -> int:
    return int.from_bytes(raw, "little", signed=len(raw) > 1)


def encode_sample(value: int, bytes_per_sample: int) -> bytes:
    """Low ``bytes_per_sample`` bytes of ``value``, low byte first."""
    mask = (1 << (8 * bytes_per_sample)) - 1
    return (int(value) & mask).to_bytes(bytes_per_sample, "little")


def wrap_signed(value: int, bits: int) -> int:
    """Reduce ``value`` to a signed integer of ``bits`` bits (two's complement)."""
    value &= (1 << bits) - 1
    if value >> (bits - 1):
        value -= 1 << bits
    return value


class SampleDomain(enum.Enum):
    INT = "int"
    LONG = "long"
    FLOAT = "float"


@dataclass(frozen=True)
class DomainCodec:
    decode: Callable[[int, WavFormat], Any]
    encode: Callable[[Any, WavFormat], int]


def _integral(value: Any) -> int:
    """Return ``value`` as an int, refusing anything with a fractional part."""
    if isinstance(value, numbers.Integral):
        return int(value)
    try:
        as_int = int(value)
    except (TypeError, ValueError, OverflowError):
        raise WavRangeError(f"Sample {value!r} is not an integer") from None
    if as_int != value:
        raise WavRangeError(
            f"Sample {value!r} is not an integer; pass domain=\"float\" for normalized samples"
        )
    return as_int


def _float_decode(raw: int, fmt: WavFormat) -> float:
    return fmt.float_offset + raw / fmt.float_scale


def _float_encode(value: Any, fmt: WavFormat) -> int:
    return int(round(fmt.float_scale * (fmt.float_offset + float(value))))


_CODECS: dict[SampleDomain, DomainCodec] = {
    SampleDomain.INT: DomainCodec(
        decode=lambda raw, _fmt: wrap_signed(raw, 32),
        encode=lambda value, _fmt: wrap_signed(_integral(value), 32),
    ),
    SampleDomain.LONG: DomainCodec(
        decode=lambda raw, _fmt: wrap_signed(raw, 64),
        encode=lambda value, _fmt: wrap_signed(_integral(value), 64),
    ),
    SampleDomain.FLOAT: DomainCodec(decode=_float_decode, encode=_float_encode),
}


def codec_for(domain: SampleDomain) -> DomainCodec:
    return _CODECS[domain]


def _dtype_domain(dtype: Any) -> SampleDomain | None:
    kind = getattr(dtype, "kind", None)
    if kind == "f":
        return SampleDomain.FLOAT
    if kind in ("i", "u"):
        return SampleDomain.INT if dtype.itemsize <= 4 else SampleDomain.LONG
    return None


def _is_fractional(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, numbers.Integral)


def resolve_domain(array: Any, domain: SampleDomain | str | None) -> SampleDomain:
    """Pick the sample domain for ``array``.

    An explicit ``domain`` always wins. Otherwise numpy dtypes decide. For plain
    sequences any non-integral real (``0.5``, ``np.float32(0.5)``) selects
    FLOAT, else LONG.
    """
    if domain is not None:
        return SampleDomain(domain)

    rows = list(array) if is_per_channel(array) else [array]
    for row in rows:
        found = _dtype_domain(getattr(row, "dtype", None))
        if found is not None:
            return found

    for row in rows:
        try:
            values = iter(row)
        except TypeError:
            continue
        if any(_is_fractional(value) for value in values):
            return SampleDomain.FLOAT
    return SampleDomain.LONG


def is_per_channel(array: Any) -> bool:
    ndim = getattr(array, "ndim", None)
    if ndim is not None:
        return ndim == 2
    try:
        first = array[0]
    except (IndexError, TypeError, KeyError):
        return False
    return hasattr(first, "__len__") and not isinstance(first, (str, bytes))


class FlatFrames:
    """Interleaved layout: frame ``f`` channel ``c`` at ``offset + f * channels + c``."""

    def __init__(self, array: Any, offset: int, num_channels: int):
        self.array = array
        self.offset = offset
        self.num_channels = num_channels

    def require_frames(self, count: int) -> None:
        needed = self.offset + count * self.num_channels
        if len(self.array) < needed:
            raise WavRangeError(
                f"array holds {len(self.array)} samples, {count} frames "
                f"from offset {self.offset} need {needed}"
            )

    def get(self, frame: int, channel: int) -> Any:
        return self.array[self.offset + frame * self.num_channels + channel]

    def set(self, frame: int, channel: int, value: Any) -> None:
        self.array[self.offset + frame * self.num_channels + channel] = value


class ChannelFrames:
    """Per-channel layout: frame ``f`` channel ``c`` at ``array[c][offset + f]``."""

    def __init__(self, array: Any, offset: int, num_channels: int):
        if len(array) < num_channels:
            raise WavRangeError(
                f"per-channel array has {len(array)} rows, need {num_channels}"
            )
        self.array = array
        self.offset = offset
        self.num_channels = num_channels

    def require_frames(self, count: int) -> None:
        needed = self.offset + count
        for channel in range(self.num_channels):
            have = len(self.array[channel])
            if have < needed:
                raise WavRangeError(
                    f"channel {channel} holds {have} samples, {count} frames "
                    f"from offset {self.offset} need {needed}"
                )

    def get(self, frame: int, channel: int) -> Any:
        return self.array[channel][self.offset + frame]

    def set(self, frame: int, channel: int, value: Any) -> None:
        self.array[channel][self.offset + frame] = value


def frames_view(array: Any, offset: int, num_channels: int) -> FlatFrames | ChannelFrames:
    if is_per_channel(array):
        return ChannelFrames(array, offset, num_channels)
    return FlatFrames(array, offset, num_channels)
