from __future__ import annotations

import logging

import click
import numpy as np

from pcmwav.errors import WavFileError
from pcmwav.wavfile import WavFile

logger = logging.getLogger(__name__)

_BLOCK_FRAMES = 100


@click.command("tone")
@click.argument("out", type=click.Path(dir_okay=False, writable=True))
@click.option("--seconds", type=click.FloatRange(min=0), default=1.0, show_default=True)
@click.option("--rate", "sample_rate", type=int, default=44100, show_default=True)
@click.option("--bits", "valid_bits", type=int, default=16, show_default=True)
@click.option("--channels", "num_channels", type=int, default=None, help="Defaults to one channel per --freq.")
@click.option(
    "--freq",
    "freqs",
    type=float,
    multiple=True,
    help="Tone frequency in Hz; repeat for one tone per channel (default 440).",
)
@click.option("--amplitude", type=click.FloatRange(0.0, 1.0), default=1.0, show_default=True)
def tone(
    out: str,
    seconds: float,
    sample_rate: int,
    valid_bits: int,
    num_channels: int | None,
    freqs: tuple[float, ...],
    amplitude: float,
) -> None:
    """Write sine tones to a new WAV file.

    Channel c plays the c-th --freq (cycling when there are more channels).

    \b
    Examples:
      pcmwav tone a440.wav
      pcmwav tone stereo.wav --seconds 5 --freq 400 --freq 500
    """
    freqs = freqs or (440.0,)
    if num_channels is None:
        num_channels = len(freqs)
    num_frames = int(seconds * sample_rate)

    try:
        wf = WavFile.create(out, num_channels, num_frames, valid_bits, sample_rate)
    except WavFileError as e:
        raise click.ClickException(str(e)) from e

    per_channel = np.asarray([freqs[c % len(freqs)] for c in range(num_channels)])
    block = np.zeros((num_channels, _BLOCK_FRAMES), dtype=np.float64)
    with wf:
        written = 0
        while wf.frames_remaining > 0:
            n = min(_BLOCK_FRAMES, wf.frames_remaining)
            t = (written + np.arange(n)) / float(sample_rate)
            block[:, :n] = amplitude * np.sin(2.0 * np.pi * per_channel[:, None] * t[None, :])
            written += wf.write_frames(block, n)
    logger.info("Wrote %d frames to %s", written, out)
    click.echo(f"Wrote {written} frames ({num_channels} ch, {valid_bits} bit, {sample_rate} Hz) to {out}")
