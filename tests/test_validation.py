"""
Tests for the table validation pass.

Run with: pytest tests/test_validation.py -v
"""

import logging

import pytest

from fretboard.data.schema import ScalePattern, Voicing
from fretboard.rules.scale_library import ScaleStore
from fretboard.rules.validation import (
    ValidationResult, non_chord_tones, validate_scale_library, validate_store,
    validate_voicing_format,
)
from fretboard.rules.voicing_store import VoicingStore


def _scale(key, intervals, *positions):
    return ScalePattern(key=key, intervals=intervals, positions=positions)


MAJOR = _scale("major", [0, 2, 4, 5, 7, 9, 11],
               [[0, 1, 3], [0, 2, 3], [0, 2, 3], [0, 2], [0, 1, 3], [0, 1, 3]])


class TestVoicingFormat:
    """The relative-fret encoding check."""

    def test_relative_barre_passes(self):
        """Test a correctly written barre voicing."""
        voicing = Voicing(frets=[1, 3, 3, 2, 1, 1], first_fret=8)
        assert validate_voicing_format(voicing, "C_major", 12) == ([], [])

    def test_absolute_frets_flagged(self):
        """Test a barre voicing written with absolute frets."""
        voicing = Voicing(frets=[8, 10, 10, 9, 8, 8], first_fret=8, label="Barre 8th")
        errors, _ = validate_voicing_format(voicing, "C_major", 12)
        assert len(errors) == 1
        assert "look absolute" in errors[0]

    @pytest.mark.parametrize("frets,first_fret", [
        (["x", "x", 2, 3, 2, 3], 8),
        ([2, "x", 3, 3, 2, "x"], 7),
    ])
    def test_small_offset_without_one_flagged(self, frets, first_fret):
        """Test that a barre voicing whose smallest fret is not 1 is an error."""
        voicing = Voicing(frets=frets, first_fret=first_fret)
        errors, _ = validate_voicing_format(voicing, "C_dim7", 12)
        assert len(errors) == 1
        assert "relative frets start at 1" in errors[0]

    def test_open_string_in_barre_flagged(self):
        """Test that fret 0 in a barre voicing is an error."""
        voicing = Voicing(frets=[0, 1, 3, 3, 2, 1], first_fret=5)
        errors, _ = validate_voicing_format(voicing, "A_minor", 12)
        assert len(errors) == 1
        assert "open string" in errors[0]

    def test_wide_relative_fret_warns(self):
        """Test the suspicious-stretch warning."""
        voicing = Voicing(frets=[1, 13, "x", "x", "x", "x"], first_fret=5)
        errors, warnings = validate_voicing_format(voicing, "A_5", 12)
        assert errors == []
        assert "above 12" in warnings[0]

    def test_open_voicings_skipped(self):
        """Test that absolute voicings are not checked."""
        voicing = Voicing(frets=["x", 3, 2, 0, 1, 0])
        assert validate_voicing_format(voicing, "C_major", 12) == ([], [])

    def test_first_fret_one_is_absolute(self):
        """Test that first_fret 1 keeps absolute frets, open strings included."""
        voicing = Voicing(frets=[1, "x", 1, 2, 0, 1], first_fret=1)
        assert validate_voicing_format(voicing, "F_7#11", 12) == ([], [])


class TestChordTones:
    """Every sounding string must play a chord tone."""

    def test_non_chord_tones_named(self):
        """Test that offending strings are listed from the low E string."""
        voicing = Voicing(frets=["x", 3, 2, 0, 1, 0])
        assert non_chord_tones(voicing, "C", "major") == []
        assert non_chord_tones(voicing, "A", "minor") == ["String 4: G"]

    def test_barre_frets_read_relative(self):
        """Test that a barre voicing is checked at its absolute pitches."""
        voicing = Voicing(frets=[1, 3, 3, 2, 1, 1], first_fret=8)
        assert non_chord_tones(voicing, "C", "major") == []
        assert non_chord_tones(voicing, "C", "minor") == ["String 4: E"]


class TestValidateStore:
    """Whole-store validation."""

    def test_packaged_table_is_valid(self):
        """Test that the shipped voicing table has no errors."""
        result = validate_store(show_progress=False)
        assert result.is_valid, str(result)
        assert result.checked > 200

    def test_bad_row_reported(self, caplog):
        """Test that errors are collected and logged."""
        store = VoicingStore([
            ("C", "major", [Voicing(frets=[1, 3, 3, 2, 1, 1], first_fret=9)]),
        ])
        with caplog.at_level(logging.ERROR, logger="fretboard"):
            result = validate_store(store, show_progress=False)
        assert not result.is_valid
        assert len(result.errors) == 1
        assert "not chord tones" in caplog.text

    def test_absolute_row_reported(self):
        """Test that an absolute-fret barre row is an error."""
        store = VoicingStore([
            ("G", "major", [Voicing(frets=[3, 5, 5, 4, 3, 3], first_fret=3)]),
        ])
        result = validate_store(store, show_progress=False)
        assert not result.is_valid
        assert any("look absolute" in e for e in result.errors)

    def test_single_wrong_string_is_error(self):
        """Test that one non-chord tone is enough to fail a row."""
        store = VoicingStore([
            ("C", "7#9", [Voicing(frets=["x", 3, 2, 3, 3, "x"], label="Ninth by mistake")]),
        ])
        result = validate_store(store, show_progress=False)
        assert not result.is_valid
        assert result.errors == ["C_7#9 'Ninth by mistake': not chord tones (String 5: D)"]

    def test_mistyped_row_is_error(self):
        """Test that a voicing of mostly wrong notes fails."""
        store = VoicingStore([
            ("D", "major", [Voicing(frets=["x", 3, 2, 0, 1, 0], label="Typo")]),
        ])
        result = validate_store(store, show_progress=False)
        assert not result.is_valid
        assert "D_major 'Typo'" in result.errors[0]


class TestValidateScales:
    """Whole-library scale validation."""

    def test_packaged_library_is_valid(self):
        """Test that the shipped scale table has no errors."""
        result = validate_scale_library(show_progress=False)
        assert result.is_valid, str(result)
        assert result.checked > 100

    def test_bad_interval_is_error(self):
        """Test that an interval outside the octave is an error."""
        store = ScaleStore({"major": MAJOR, "odd": _scale("odd", [0, 12], *MAJOR.positions)})
        result = validate_scale_library(store, show_progress=False)
        assert not result.is_valid
        assert "odd" in result.errors[0]

    def test_off_neck_frets_warn(self):
        """Test that frets past the ceiling warn."""
        high = [[25], [0], [0], [0], [0], [0]]
        store = ScaleStore({"major": _scale("major", [0, 2, 4, 5, 7, 9, 11], high)})
        result = validate_scale_library(store, show_progress=False)
        assert result.is_valid
        assert any("outside 0-24" in w for w in result.warnings)

    def test_out_of_scale_notes_error(self, caplog):
        """Test that a box with notes outside the scale is an error."""
        chromatic = [[0, 1, 2, 3, 4, 5]] * 6
        store = ScaleStore({"major": _scale("major", [0, 2, 4, 5, 7, 9, 11], chromatic)})
        with caplog.at_level(logging.ERROR, logger="fretboard"):
            result = validate_scale_library(store, show_progress=False)
        assert not result.is_valid
        assert "major position 1: notes outside the scale at its reference root E" in result.errors[0]
        assert "outside the scale" in caplog.text

    def test_box_checked_at_reference_root(self):
        """Test that a box is checked at the root resolution reads it at."""
        # C major at the 8th fret with one Eb on the high e string
        box = [[8, 10, 12], [8, 10, 12], [9, 10, 12], [9, 10, 12], [10, 12, 13], [8, 10, 11]]
        store = ScaleStore({"major": MAJOR, "typo": _scale("typo", [0, 2, 4, 5, 7, 9, 11], box)})
        result = validate_scale_library(store, show_progress=False)
        assert not result.is_valid
        assert result.errors == [
            "typo position 1: notes outside the scale at its reference root C (String 6, fret 11: D#)"
        ]

    def test_windows_checked(self):
        """Test that scales without boxes have their windows checked."""
        store = ScaleStore({"major": MAJOR, "whole tone": _scale("whole tone", [0, 2, 4, 6, 8, 10])})
        result = validate_scale_library(store, show_progress=False)
        assert result.is_valid, str(result)
        assert result.checked == 1 + 7


class TestValidationResult:
    """Result container."""

    def test_str(self):
        """Test the printable summary."""
        result = ValidationResult(checked=2)
        result.add_error("bad row")
        result.warnings.append("odd row")
        text = str(result)
        assert text.startswith("INVALID (2 checked)")
        assert "- bad row" in text and "- odd row" in text

    def test_merge(self):
        """Test combining two results."""
        merged = ValidationResult(checked=1).merge(ValidationResult(is_valid=False, errors=["x"], checked=2))
        assert not merged.is_valid
        assert merged.errors == ["x"]
        assert merged.checked == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
