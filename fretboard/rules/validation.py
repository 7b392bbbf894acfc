"""
Table Validation - Developer Checks for the Pattern Tables

Resolution trusts the tables. This module checks them, so that a bad row is
caught by a developer running `fretboard validate` instead of by a user
looking at a wrong diagram.

Checks performed:
    1. Voicings: the relative-fret encoding matches first_fret, no
       implausibly wide stretches, and every sounding string plays a
       chord tone
    2. Scales: intervals within an octave, frets on the neck, and every
       fret sounding a note of the scale at the box's reference root.
       Scales fingered with generated windows have those windows checked.

Errors make the table invalid; warnings are worth a look but do not.

Author: Rohan Rajendra Dhanawade
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tqdm import tqdm

from fretboard.config import get_config
from fretboard.data.schema import ScalePattern, Voicing
from fretboard.rules.scale_library import (
    WINDOW_START_FRETS, FingeringCheck, ScaleStore, detect_reference_root,
    generate_window_fingering, get_scale_store, uses_window, validate_fingering_notes,
)
from fretboard.rules.slash_bass import sounding_pitch_classes
from fretboard.rules.theory import chord_tones, display_note, note_to_value
from fretboard.rules.voicing_store import VoicingStore, get_voicing_store

logger = logging.getLogger(__name__)

# Root the generated windows are checked at
WINDOW_CHECK_ROOT = "C"


# =============================================================================
# RESULT TYPE
# =============================================================================

@dataclass
class ValidationResult:
    """
    Outcome of a validation pass.

    Attributes:
        is_valid: True if no errors were found
        errors: Problems that make a table row wrong
        warnings: Suspicious rows that may still be intended
        checked: Number of rows looked at
    """
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    checked: int = 0

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
            checked=self.checked + other.checked,
        )

    def __str__(self) -> str:
        status = "VALID" if self.is_valid else "INVALID"
        lines = [f"{status} ({self.checked} checked)"]

        if self.errors:
            lines.append("  Errors:")
            for err in self.errors:
                lines.append(f"    - {err}")

        if self.warnings:
            lines.append("  Warnings:")
            for warn in self.warnings:
                lines.append(f"    - {warn}")

        return "\n".join(lines)


def _show_progress(show_progress: Optional[bool]) -> bool:
    if show_progress is None:
        return bool(get_config()["show_progress"])
    return show_progress


# =============================================================================
# VOICINGS
# =============================================================================

def validate_voicing_format(voicing: Voicing, key: str,
                            suspicious_fret: Optional[int] = None) -> Tuple[List[str], List[str]]:
    """
    Check one voicing against the relative-fret encoding.

    With first_fret above 1, frets are relative to the barre: 1 is the barre
    fret, so the smallest numeric fret must be 1 and 0 cannot appear. A
    smallest value that reaches first_fret - 1 means the row was written
    with absolute frets.

    Returns:
        (errors, warnings)
    """
    if suspicious_fret is None:
        suspicious_fret = get_config()["suspicious_relative_fret"]

    errors, warnings = [], []
    if not voicing.is_barre:
        return errors, warnings

    numeric = voicing.numeric_frets()
    if not numeric:
        return errors, warnings

    where = f"{key} '{voicing.label}': frets {list(voicing.frets)}"
    lowest, highest = min(numeric), max(numeric)
    if lowest == 0:
        errors.append(f"{where} hold an open string, which first_fret {voicing.first_fret} cannot express")
    elif lowest != 1 and lowest >= voicing.first_fret - 1:
        errors.append(f"{where} look absolute for first_fret {voicing.first_fret}")
    elif lowest != 1:
        errors.append(f"{where} start at {lowest}; relative frets start at 1")

    if highest > suspicious_fret:
        warnings.append(
            f"{key} '{voicing.label}': relative fret {highest} is above {suspicious_fret}"
        )
    return errors, warnings


def non_chord_tones(voicing: Voicing, root: str, quality: str) -> List[str]:
    """Strings sounding a note outside the chord, as "String N: X" from the low E string."""
    tones = set(chord_tones(note_to_value(root), quality))
    return [
        f"String {string_index + 1}: {display_note(pitch)}"
        for string_index, pitch in enumerate(sounding_pitch_classes(voicing))
        if pitch is not None and pitch not in tones
    ]


def validate_store(store: Optional[VoicingStore] = None,
                   show_progress: Optional[bool] = None) -> ValidationResult:
    """Run the voicing checks over every entry of a voicing store."""
    if store is None:
        store = get_voicing_store()

    result = ValidationResult()
    entries = tqdm(store, total=len(store), desc="Voicings", unit="chord",
                   disable=not _show_progress(show_progress))

    for entry in entries:
        for voicing in entry.voicings:
            result.checked += 1
            errors, warnings = validate_voicing_format(voicing, entry.key)
            for message in errors:
                result.add_error(message)
            result.warnings.extend(warnings)

            outside = non_chord_tones(voicing, entry.root, entry.quality)
            if outside:
                result.add_error(
                    f"{entry.key} '{voicing.label}': not chord tones ({', '.join(outside)})"
                )

    for message in result.errors:
        logger.error(message)
    for message in result.warnings:
        logger.warning(message)
    logger.info(f"Checked {result.checked} voicings: {len(result.errors)} errors, "
                f"{len(result.warnings)} warnings")
    return result


# =============================================================================
# SCALES
# =============================================================================

def _describe_invalid(check: FingeringCheck) -> str:
    shown = ", ".join(check.invalid_notes[:5])
    more = "..." if len(check.invalid_notes) > 5 else ""
    return f"{shown}{more}"


def _validate_windows(pattern: ScalePattern, ceiling: int, result: ValidationResult,
                      store: ScaleStore) -> None:
    """Check the generated windows of a scale that has no boxes, built at C."""
    root_value = note_to_value(WINDOW_CHECK_ROOT)
    for index in range(len(WINDOW_START_FRETS)):
        result.checked += 1
        label = f"{pattern.key} window {index + 1}"
        fingering = generate_window_fingering(pattern.intervals, root_value, index, ceiling)

        empty = [s + 1 for s, frets in enumerate(fingering) if not frets]
        if empty:
            result.add_error(f"{label}: no scale notes on strings {empty}")

        check = validate_fingering_notes(fingering, WINDOW_CHECK_ROOT, pattern.key, ceiling, store)
        if not check.is_valid:
            result.add_error(f"{label}: notes outside the scale at {WINDOW_CHECK_ROOT} "
                             f"({_describe_invalid(check)})")


def validate_scale_library(store: Optional[ScaleStore] = None,
                           show_progress: Optional[bool] = None) -> ValidationResult:
    """
    Run the scale checks over every pattern and position.

    Each box is checked at the root resolution reads it as drawn at, so a
    box that would transpose to wrong notes is an error.
    """
    if store is None:
        store = get_scale_store()
    ceiling = get_config()["fret_ceiling"]

    result = ValidationResult()
    patterns = tqdm(store, total=len(store), desc="Scales", unit="scale",
                    disable=not _show_progress(show_progress))

    for pattern in patterns:
        bad_intervals = [i for i in pattern.intervals if not 0 <= i <= 11]
        if bad_intervals:
            result.add_error(f"{pattern.key}: intervals outside 0-11: {bad_intervals}")
            continue

        if uses_window(pattern):
            _validate_windows(pattern, ceiling, result, store)
            continue

        for index, fingering in enumerate(pattern.positions):
            result.checked += 1
            label = f"{pattern.key} position {index + 1}"

            off_neck = [f for frets in fingering for f in frets if not 0 <= f <= ceiling]
            if off_neck:
                result.warnings.append(f"{label}: frets outside 0-{ceiling}: {off_neck}")

            root = display_note(detect_reference_root(fingering, pattern.intervals))
            check = validate_fingering_notes(fingering, root, pattern.key, ceiling, store)
            if not check.is_valid:
                result.add_error(
                    f"{label}: notes outside the scale at its reference root {root} "
                    f"({_describe_invalid(check)})"
                )

    for message in result.errors:
        logger.error(message)
    for message in result.warnings:
        logger.warning(message)
    logger.info(f"Checked {result.checked} scale positions: {len(result.errors)} errors, "
                f"{len(result.warnings)} warnings")
    return result
