from __future__ import annotations

import logging
from pathlib import Path

import pytest


@pytest.fixture()
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate $HOME + XDG dirs + cwd so tests never read real user config."""
    home = tmp_path / "home"
    home.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))

    # Ensure we don't accidentally rely on per-shell config location.
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)

    # Avoid leaking developer/user config into tests.
    monkeypatch.delenv("PCMWAV_BUFFER_SIZE", raising=False)
    monkeypatch.delenv("PCMWAV_LOG_LEVEL", raising=False)

    # A stray `.env` in the checkout must not be picked up.
    workdir = tmp_path / "work"
    workdir.mkdir(parents=True, exist_ok=True)
    monkeypatch.chdir(workdir)
    return home


@pytest.fixture()
def restore_root_logger():
    """Undo level changes made by configure_logging()."""
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    handler_levels = [h.level for h in handlers]
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    for handler, handler_level in zip(handlers, handler_levels):
        handler.setLevel(handler_level)
    root.setLevel(level)
