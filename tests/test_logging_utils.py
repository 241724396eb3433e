from __future__ import annotations

import logging

import pytest

import pcmwav.config as config
from pcmwav.logging_utils import _parse_log_level, configure_logging


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch, isolated_home):
    monkeypatch.setattr(config, "_ENV_LOADED", True)


def test_parse_log_level_accepts_names_and_numbers() -> None:
    assert _parse_log_level("debug", default=logging.WARNING) == logging.DEBUG
    assert _parse_log_level(" Error ", default=logging.WARNING) == logging.ERROR
    assert _parse_log_level("15", default=logging.WARNING) == 15
    assert _parse_log_level("chatty", default=logging.WARNING) == logging.WARNING
    assert _parse_log_level(None, default=logging.INFO) == logging.INFO


def test_configure_logging_debug_flag_wins(monkeypatch, restore_root_logger) -> None:
    monkeypatch.setenv("PCMWAV_LOG_LEVEL", "ERROR")
    configure_logging(debug=True)
    assert restore_root_logger.level == logging.DEBUG


def test_configure_logging_uses_env_level(monkeypatch, restore_root_logger) -> None:
    monkeypatch.setenv("PCMWAV_LOG_LEVEL", "ERROR")
    configure_logging()
    assert restore_root_logger.level == logging.ERROR


def test_configure_logging_falls_back_to_default(restore_root_logger) -> None:
    configure_logging(default_level=logging.INFO)
    assert restore_root_logger.level == logging.INFO


def test_configure_logging_updates_existing_handlers(restore_root_logger) -> None:
    handler = logging.NullHandler()
    restore_root_logger.addHandler(handler)
    try:
        configure_logging(debug=True)
        assert handler.level == logging.DEBUG
    finally:
        restore_root_logger.removeHandler(handler)
