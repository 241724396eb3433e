"""Whole-file helpers built on :class:`pcmwav.wavfile.WavFile`."""

from __future__ import annotations

import os
from typing import Union

import numpy as np

from .errors import WavFileError
from .fmt import WavFormat
from .samples import SampleDomain
from .wavfile import WavFile

PathLike = Union[str, "os.PathLike[str]"]

_DOMAIN_DTYPES = {
    SampleDomain.INT: np.int32,
    SampleDomain.LONG: np.int64,
    SampleDomain.FLOAT: np.float64,
}


def read_wav_duration_s(path: PathLike) -> float | None:
    """Return duration in seconds for a WAV file, or None if unreadable."""
    try:
        with WavFile.open(path) as wf:
            return wf.duration_s
    except (OSError, WavFileError):
        return None


def read_wav_array(
    path: PathLike,
    *,
    domain: SampleDomain | str = SampleDomain.FLOAT,
) -> tuple[np.ndarray, WavFormat]:
    """Read every frame of ``path`` into a ``(frames, channels)`` array."""
    resolved = SampleDomain(domain)
    with WavFile.open(path) as wf:
        per_channel = np.zeros((wf.num_channels, wf.num_frames), dtype=_DOMAIN_DTYPES[resolved])
        wf.read_frames(per_channel, wf.num_frames, domain=resolved)
        return np.ascontiguousarray(per_channel.T), wf.format


def write_wav_array(
    path: PathLike,
    samples: np.ndarray,
    *,
    sample_rate: int,
    valid_bits: int = 16,
) -> int:
    """Write a ``(frames,)`` or ``(frames, channels)`` array; returns frames written.

    Float arrays are treated as normalized samples, integer arrays as raw ones.
    """
    data = np.asarray(samples)
    if data.ndim == 1:
        data = data.reshape(-1, 1)
    if data.ndim != 2:
        raise ValueError(f"expected a 1-D or 2-D array, got shape {data.shape}")

    num_frames, num_channels = data.shape
    with WavFile.create(path, num_channels, num_frames, valid_bits, sample_rate) as wf:
        return wf.write_frames(data.T, num_frames)
