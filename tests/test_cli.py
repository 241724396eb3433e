from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

import pcmwav.config as config
from pcmwav.cli import main
from pcmwav.wavfile import WavFile


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, isolated_home, restore_root_logger):
    monkeypatch.setattr(config, "_ENV_LOADED", False)


def _make_wav(path: Path, samples: list[int], *, channels: int = 1, bits: int = 16, rate: int = 8000) -> None:
    frames = len(samples) // channels
    with WavFile.create(path, channels, frames, bits, rate) as wf:
        wf.write_frames(samples, frames)


def test_info_prints_header_parameters(tmp_path: Path) -> None:
    path = tmp_path / "a.wav"
    _make_wav(path, [0, 1, 2, 3] * 2000, channels=2)

    result = CliRunner().invoke(main, ["info", str(path)])
    assert result.exit_code == 0, result.output
    assert "Channels: 2, Frames: 4000" in result.output
    assert "Sample Rate: 8000" in result.output
    assert "Duration: 0.500s" in result.output


def test_info_json(tmp_path: Path) -> None:
    path = tmp_path / "a.wav"
    _make_wav(path, [0] * 10, bits=24)

    result = CliRunner().invoke(main, ["info", "--json", str(path)])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["channels"] == 1
    assert payload["frames"] == 10
    assert payload["valid_bits"] == 24
    assert payload["block_align"] == 3


def test_info_reports_format_errors(tmp_path: Path) -> None:
    path = tmp_path / "bad.wav"
    path.write_bytes(b"RIFF\x04\x00\x00\x00AVI ")

    result = CliRunner().invoke(main, ["info", str(path)])
    assert result.exit_code != 0
    assert "Bad RIFF signature" in result.output


def test_tone_writes_one_tone_per_channel(tmp_path: Path) -> None:
    out = tmp_path / "tones.wav"
    result = CliRunner().invoke(
        main,
        ["tone", str(out), "--seconds", "0.25", "--rate", "8000", "--freq", "400", "--freq", "500"],
    )
    assert result.exit_code == 0, result.output
    assert "Wrote 2000 frames" in result.output

    with WavFile.open(out) as wf:
        assert wf.num_channels == 2
        assert wf.num_frames == 2000
        assert wf.valid_bits == 16
        block = [[0.0] * 2000, [0.0] * 2000]
        assert wf.read_frames(block, 2000) == 2000
    assert block[0][0] == 0.0
    assert max(block[0]) > 0.99
    assert min(block[1]) < -0.99


def test_tone_rejects_invalid_bit_depth(tmp_path: Path) -> None:
    out = tmp_path / "never.wav"
    result = CliRunner().invoke(main, ["tone", str(out), "--bits", "1"])
    assert result.exit_code != 0
    assert "Illegal number of valid bits" in result.output
    assert not out.exists()


def test_dump_prints_frames(tmp_path: Path) -> None:
    path = tmp_path / "d.wav"
    _make_wav(path, [1, -1, 2, -2, 3, -3], channels=2)

    result = CliRunner().invoke(main, ["dump", str(path), "--frames", "2"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["0\t1 -1", "1\t2 -2"]


def test_dump_stops_at_end_of_file(tmp_path: Path) -> None:
    path = tmp_path / "d.wav"
    _make_wav(path, [5, 6], bits=8)

    result = CliRunner().invoke(main, ["dump", str(path), "--frames", "10", "--float"])
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("0\t-0.96")


def test_debug_flag_enables_debug_logging(tmp_path: Path, restore_root_logger) -> None:
    import logging

    path = tmp_path / "a.wav"
    _make_wav(path, [0, 0])
    result = CliRunner().invoke(main, ["--debug", "info", str(path)])
    assert result.exit_code == 0, result.output
    assert restore_root_logger.level == logging.DEBUG
