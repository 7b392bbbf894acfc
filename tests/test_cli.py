"""
Tests for the command line interface.

Run with: pytest tests/test_cli.py -v
"""

import json
import os

import pytest

from fretboard.app.cli import create_argument_parser, format_voicing, main
from fretboard.config import CONFIG_ENV_VAR, DATA_DIR, get_config
from fretboard.data.schema import Voicing


class TestArgumentParser:
    """Argument parsing."""

    def test_scale_options(self):
        """Test the scale subcommand's options."""
        args = create_argument_parser().parse_args(["-vv", "scale", "D dorian", "--position", "2"])
        assert args.command == "scale"
        assert args.descriptor == "D dorian"
        assert args.position == 2
        assert args.root is None
        assert args.verbose == 2

    def test_no_command_prints_help(self, capsys):
        """Test that a bare call shows usage."""
        assert main([]) == 2
        assert "usage:" in capsys.readouterr().out


class TestChordCommand:
    """fretboard chord"""

    def test_chord_diagram(self, capsys):
        """Test the plain-text chord output."""
        assert main(["chord", "C"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("C: C E G")
        assert "Open" in out
        assert "x  3  2  0  1  0" in out

    def test_substitute_is_marked(self, capsys):
        """Test that a fallback is called out."""
        main(["chord", "C13"])
        assert "(similar substitute from C_major)" in capsys.readouterr().out

    def test_chord_json(self, capsys):
        """Test JSON output for several chords."""
        assert main(["--json", "chord", "Dm7", "C#dim7"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [d["quality"] for d in data] == ["min7", "dim7"]
        assert data[1]["root"] == "Db"
        assert data[0]["voicings"][0]["frets"] == ["x", "x", 0, 2, 1, 1]

    def test_format_voicing_barre(self):
        """Test that barre voicings show their position."""
        text = format_voicing(Voicing(frets=[1, 3, 3, 2, 1, 1], first_fret=8, label="Barre 8th"))
        assert text.splitlines()[0] == "Barre 8th (first fret 8)"


class TestScaleCommand:
    """fretboard scale"""

    def test_scale_grid(self, capsys):
        """Test the tab-style grid and note list."""
        assert main(["scale", "D dorian"]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "D Dorian - position 1 of 7"
        assert lines[1] == "e | 12 13 15"
        assert lines[6] == "E | 10 12 13"
        assert lines[7] == "Notes: D E F G A B C"

    def test_scale_json(self, capsys):
        """Test JSON output for a scale."""
        assert main(["--json", "scale", "dorian", "--root", "E"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["root"] == "E"
        assert data["scale_key"] == "dorian"
        assert data["fingering"][0] == [0, 2, 3]
        assert data["generated"] is False


class TestValidateCommand:
    """fretboard validate"""

    def test_validate_packaged_tables(self, capsys):
        """Test that the shipped tables pass."""
        assert main(["validate", "--no-progress"]) == 0
        out = capsys.readouterr().out
        assert "Voicings: VALID" in out
        assert "Scales: VALID" in out

    def test_validate_reports_errors(self, tmp_path, capsys, fresh_config):
        """Test exit code 1 when a table row is wrong."""
        chords = tmp_path / "chords.yaml"
        chords.write_text("C:\n  major:\n    - {frets: [8, 10, 10, 9, 8, 8], first_fret: 8}\n")
        config = tmp_path / "fretboard.yaml"
        config.write_text(
            f"data_dir: '{tmp_path}'\n"
            "chord_table: chords.yaml\n"
            f"generic_table: '{DATA_DIR / 'generic_shapes.yaml'}'\n"
            f"scale_table: '{DATA_DIR / 'scale_patterns.yaml'}'\n"
            "show_progress: false\n"
        )
        assert main(["--json", "--config", str(config), "validate"]) == 1
        data = json.loads(capsys.readouterr().out)
        assert not data["voicings"]["is_valid"]
        assert data["scales"]["is_valid"]


class TestConfigOption:
    """fretboard --config"""

    def test_config_applies_to_command(self, tmp_path, capsys, fresh_config):
        """Test that --config settings reach the command."""
        config = tmp_path / "fretboard.yaml"
        config.write_text("fret_ceiling: 18\nshow_progress: false\n")
        args = ["--json", "--config", str(config), "scale", "dorian", "--root", "C", "--position", "6"]
        assert main(args) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["semitones"] == -9
        assert max(max(s) for s in data["fingering"]) <= 18

    def test_config_not_left_behind(self, tmp_path, capsys, fresh_config):
        """Test that --config touches neither the environment nor later calls."""
        config = tmp_path / "fretboard.yaml"
        config.write_text("fret_ceiling: 18\n")
        assert main(["--config", str(config), "scale", "dorian"]) == 0
        assert CONFIG_ENV_VAR not in os.environ
        assert get_config()["fret_ceiling"] == 24


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
