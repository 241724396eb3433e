from __future__ import annotations

import click

from pcmwav.errors import WavFileError
from pcmwav.samples import SampleDomain
from pcmwav.wavfile import WavFile


@click.command("dump")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-n", "--frames", "max_frames", type=click.IntRange(min=0), default=10, show_default=True)
@click.option("--float", "as_float", is_flag=True, help="Print normalized floats instead of raw integers.")
def dump(path: str, max_frames: int, as_float: bool) -> None:
    """Print the first frames of a WAV file, one frame per line."""
    domain = SampleDomain.FLOAT if as_float else SampleDomain.LONG
    try:
        with WavFile.open(path) as wf:
            frame = [0.0 if as_float else 0] * wf.num_channels
            for index in range(max_frames):
                if wf.read_frames(frame, 1, domain=domain) == 0:
                    break
                if as_float:
                    values = " ".join(f"{v:+.6f}" for v in frame)
                else:
                    values = " ".join(str(v) for v in frame)
                click.echo(f"{index}\t{values}")
    except WavFileError as e:
        raise click.ClickException(f"{path}: {e}") from e
