from __future__ import annotations

import json

import click

from pcmwav.errors import WavFileError
from pcmwav.wavfile import WavFile


@click.command("info")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("-j", "--json", "json_", is_flag=True, help="Output structured JSON.")
def info(path: str, json_: bool) -> None:
    """Show the header parameters of a WAV file.

    \b
    Examples:
      pcmwav info speech.wav
      pcmwav info --json speech.wav
    """
    try:
        with WavFile.open(path) as wf:
            payload = {
                "path": path,
                "channels": wf.num_channels,
                "frames": wf.num_frames,
                "sample_rate": wf.sample_rate,
                "valid_bits": wf.valid_bits,
                "block_align": wf.block_align,
                "duration_s": wf.duration_s,
            }
            text = wf.display_info()
    except WavFileError as e:
        raise click.ClickException(f"{path}: {e}") from e

    if json_:
        click.echo(json.dumps(payload))
        return

    click.echo(text)
    if payload["duration_s"] is not None:
        click.echo(f"Duration: {payload['duration_s']:.3f}s")
