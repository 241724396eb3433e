"""Exception types raised by pcmwav."""

from __future__ import annotations


class WavFileError(Exception):
    """Base class for every error raised while opening, reading or writing a WAV."""


class WavFormatError(WavFileError):
    """The container structure is malformed or uses an unsupported feature."""


class WavConsistencyError(WavFormatError):
    """Header fields disagree with the values derived from them."""


class WavRangeError(WavFileError, ValueError):
    """A numeric parameter is outside its allowed bounds."""


class WavStateError(WavFileError):
    """An operation was called in the wrong direction or after close()."""


class WavStarvationError(WavFileError, EOFError):
    """The channel ran out of bytes before the declared frame count was reached."""
