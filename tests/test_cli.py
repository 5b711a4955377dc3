"""Tests for the command-line interface."""

import sys
from pathlib import Path

import pytest

from worldgen.cli import main


class TestCli:
    """Tests for worldgen.cli.main."""

    def test_chunk_command(self, tmp_path: Path, monkeypatch, capsys) -> None:
        """The chunk command prints biome stats and saves the chunk."""
        argv = [
            "worldgen",
            "--seed", "ANNA-7742",
            "--chunk-size", "16",
            "chunk", "0", "-1",
            "-o", str(tmp_path),
        ]
        monkeypatch.setattr(sys, "argv", argv)
        main()
        out = capsys.readouterr().out
        assert "Chunk (0, -1)" in out
        assert (tmp_path / "chunk_0_-1.bin").exists()
        assert (tmp_path / "chunk_0_-1.bin").stat().st_size == 16 * 16 * 7

    def test_seed_required(self, monkeypatch) -> None:
        """Without a seed the CLI exits with a usage error."""
        monkeypatch.setattr(sys, "argv", ["worldgen", "chunk", "0", "0"])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 2

    def test_unknown_config(self, monkeypatch) -> None:
        monkeypatch.setattr(sys, "argv", ["worldgen", "--config", "missing", "chunk", "0", "0"])
        with pytest.raises(SystemExit):
            main()
