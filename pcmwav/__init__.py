"""pcmwav - read and write uncompressed PCM audio in RIFF/WAVE files."""

from .errors import (
    WavConsistencyError,
    WavFileError,
    WavFormatError,
    WavRangeError,
    WavStarvationError,
    WavStateError,
)
from .fmt import WavFormat
from .samples import SampleDomain
from .wavfile import IOState, WavFile, create_wav, open_wav

__version__ = "0.1.0"

__all__ = [
    "IOState",
    "SampleDomain",
    "WavConsistencyError",
    "WavFile",
    "WavFileError",
    "WavFormat",
    "WavFormatError",
    "WavRangeError",
    "WavStarvationError",
    "WavStateError",
    "create_wav",
    "open_wav",
]
