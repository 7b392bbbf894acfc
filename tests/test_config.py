"""
Tests for configuration loading and logging setup.

Run with: pytest tests/test_config.py -v
"""

import io
import logging
import os

import pytest

import fretboard
from fretboard.config import CONFIG_ENV_VAR, RESOLVER_CONFIG, get_config, load_config
from fretboard.logger import LOGGER_NAME, is_debug, setup_logging, verbosity_to_level
from fretboard.rules.scale_library import resolve_scale


class TestConfig:
    """Defaults and YAML overrides."""

    def test_defaults(self, fresh_config):
        """Test the built-in defaults."""
        config = load_config()
        assert config["fret_ceiling"] == 24
        assert config["suspicious_relative_fret"] == 12
        assert config == RESOLVER_CONFIG
        assert config is not RESOLVER_CONFIG

    def test_override_file(self, tmp_path, fresh_config):
        """Test that a YAML file overrides individual keys."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("fret_ceiling: 22\nshow_progress: false\n")
        config = load_config(path)
        assert config["fret_ceiling"] == 22
        assert config["show_progress"] is False
        assert config["chord_table"] == RESOLVER_CONFIG["chord_table"]

    def test_env_var(self, tmp_path, fresh_config):
        """Test that $FRETBOARD_CONFIG is read by get_config."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("fret_ceiling: 15\n")
        fresh_config.setenv(CONFIG_ENV_VAR, str(path))
        assert get_config()["fret_ceiling"] == 15

    def test_unknown_key_rejected(self, tmp_path, fresh_config):
        """Test that a misspelled key is an error, not silently ignored."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("fret_cieling: 22\n")
        with pytest.raises(ValueError, match="fret_cieling"):
            load_config(path)

    def test_non_mapping_rejected(self, tmp_path, fresh_config):
        """Test that a list is not a config."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("- 22\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_ceiling_reaches_transposer(self, tmp_path, fresh_config):
        """Test that a lower fret ceiling changes scale resolution."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("fret_ceiling: 18\n")
        fresh_config.setenv(CONFIG_ENV_VAR, str(path))
        # The top dorian box spans 15-20 at A; up 3 to C it would reach 23
        resolution = resolve_scale("dorian", root="C", position=6)
        assert resolution.semitones == -9
        assert resolution.fingering[0] == [6, 8, 10]
        assert max(max(s) for s in resolution.fingering) <= 18

    def test_config_file_block(self, tmp_path, fresh_config):
        """Test that a config file applies inside the block only."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("fret_ceiling: 18\n")
        with fretboard.config_file(path) as config:
            assert config["fret_ceiling"] == 18
            assert get_config()["fret_ceiling"] == 18
        assert get_config()["fret_ceiling"] == 24
        assert CONFIG_ENV_VAR not in os.environ

    def test_config_file_restored_on_error(self, tmp_path, fresh_config):
        """Test that a bad file does not stick after the block fails."""
        path = tmp_path / "fretboard.yaml"
        path.write_text("bogus_key: 1\n")
        with pytest.raises(ValueError):
            with fretboard.config_file(path):
                pass
        assert get_config() == RESOLVER_CONFIG


class TestLogging:
    """Logger setup."""

    @pytest.mark.parametrize("verbosity,level", [
        (0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG),
    ])
    def test_verbosity_to_level(self, verbosity, level):
        """Test the -v count mapping."""
        assert verbosity_to_level(verbosity) == level

    def test_single_handler(self):
        """Test that repeated setup does not duplicate output."""
        logger = setup_logging(1)
        setup_logging(2)
        handlers = [h for h in logger.handlers if getattr(h, "_fretboard_handler", False)]
        assert len(handlers) == 1
        assert is_debug()

    def test_format(self):
        """Test the compact line format."""
        stream = io.StringIO()
        setup_logging(1, stream=stream)
        logging.getLogger("fretboard.rules.fallback").info("hello")
        line = stream.getvalue().strip()
        assert line.startswith(f"I {LOGGER_NAME} ")
        assert line.endswith("] hello")
        assert "test_config.py:" in line

    def test_named_level(self):
        """Test a level given by name, as in the config file."""
        logger = setup_logging(level="error")
        assert logger.level == logging.ERROR
        with pytest.raises(ValueError):
            setup_logging(level="loud")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
