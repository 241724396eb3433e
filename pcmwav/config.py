"""Configuration and environment loading for pcmwav.

Settings come from environment variables. The CLI also loads the canonical
config file:
  ~/.config/pcmwav/pcmwav.env

The library itself only reads the process environment; it never loads dotenv
files on its own.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .buffer import DEFAULT_BUFFER_SIZE


APP_NAME = "pcmwav"

BUFFER_SIZE_ENV = "PCMWAV_BUFFER_SIZE"
LOG_LEVEL_ENV = "PCMWAV_LOG_LEVEL"

_ENV_LOADED = False


class PcmwavConfigError(RuntimeError):
    pass


def config_home() -> Path:
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return Path(xdg_config_home)
    return Path.home() / ".config"


def config_dir() -> Path:
    return config_home() / APP_NAME


def env_file_path() -> Path:
    return config_dir() / f"{APP_NAME}.env"


def load_environment(*, load_cwd_dotenv: bool = True) -> None:
    """Load pcmwav configuration into environment variables.

    Precedence:
    - Existing process env always wins.
    - Then `~/.config/pcmwav/pcmwav.env` (if present).
    - Then a local `.env` (optional) for developer convenience.
    """

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True

    env_path = env_file_path()
    if env_path.exists():
        load_dotenv(dotenv_path=env_path, override=False)

    if load_cwd_dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)


def get_buffer_size(*, default: int = DEFAULT_BUFFER_SIZE, load_env: bool = True) -> int:
    """Return the sample buffer capacity in bytes."""
    if load_env:
        load_environment()

    raw = (os.environ.get(BUFFER_SIZE_ENV) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise PcmwavConfigError(
            f"{BUFFER_SIZE_ENV} must be a positive integer, got {raw!r}"
        ) from None
    if value <= 0:
        raise PcmwavConfigError(
            f"{BUFFER_SIZE_ENV} must be a positive integer, got {raw!r}"
        )
    return value


def get_log_level(*, load_env: bool = True) -> Optional[str]:
    if load_env:
        load_environment()
    return os.environ.get(LOG_LEVEL_ENV)
