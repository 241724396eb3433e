"""Command-line interface for pcmwav."""

from __future__ import annotations

import logging

import click

from pcmwav.commands import register
from pcmwav.config import load_environment
from pcmwav.logging_utils import configure_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, debug: bool) -> None:
    """pcmwav - inspect and generate uncompressed PCM WAV files."""
    load_environment()
    configure_logging(debug=debug, default_level=logging.WARNING)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


register(main)


if __name__ == "__main__":
    main()
