"""
Test Suite - Basic Sanity Tests

These tests verify that the package structure is correct, that basic
imports work, and that the packaged tables load.

Run with: pytest tests/test_sanity.py -v
"""

import pytest


class TestPackageStructure:
    """Test that all packages can be imported."""

    def test_import_fretboard(self):
        """Test that main package can be imported."""
        import fretboard
        assert hasattr(fretboard, "__version__")
        assert fretboard.__version__ == "0.1.0"

    def test_import_data_package(self):
        """Test that data subpackage exposes the schema models."""
        import fretboard.data
        assert hasattr(fretboard.data, "Voicing")

    def test_import_rules_package(self):
        """Test that rules subpackage can be imported."""
        import fretboard.rules

    def test_import_app_package(self):
        """Test that app subpackage can be imported."""
        import fretboard.app
        import fretboard.app.cli

    def test_public_api(self):
        """Test that the top-level API is exported."""
        import fretboard
        for name in [
            "resolve_chord_voicings", "resolve_scale_fingering", "resolve_scale_notes",
            "normalize_root", "normalize_chord_quality", "normalize_scale_descriptor",
            "resolve_chord", "resolve_scale", "chord_notes",
            "validate_store", "validate_scale_library", "config_file", "clear_caches",
        ]:
            assert callable(getattr(fretboard, name)), name


class TestProjectPaths:
    """Test that the packaged tables are where the config says."""

    def test_tables_exist(self):
        """Test that every configured table file exists."""
        from fretboard.config import RESOLVER_CONFIG, table_path
        for key in ["chord_table", "generic_table", "scale_table"]:
            assert table_path(RESOLVER_CONFIG, key).is_file(), key

    def test_stores_load(self):
        """Test that the stores build from the packaged tables."""
        from fretboard.rules.scale_library import get_scale_store
        from fretboard.rules.voicing_store import get_voicing_store
        assert len(get_voicing_store()) > 100
        assert "major" in get_scale_store()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
