"""Click commands for the pcmwav CLI."""

from __future__ import annotations

import click

from .dump import dump
from .info import info
from .tone import tone


def register(main: click.Group) -> None:
    main.add_command(info)
    main.add_command(dump)
    main.add_command(tone)
