"""
Theory Module - Pitch Classes, Tuning and Chord Formulas

This module holds the music theory building blocks every other rule module
leans on:
    1. The sharp and flat chromatic alphabets and note <-> pitch-class maps
    2. Standard tuning of the six strings
    3. Key-aware display spelling of pitch classes
    4. Interval formulas for every chord quality the engine knows

Pitch classes are integers 0-11 with C = 0.

Author: Rohan Rajendra Dhanawade
"""

from typing import Dict, List, Optional, Tuple


# =============================================================================
# CONSTANTS: Alphabets and Tuning
# =============================================================================

CHROMATIC_SCALE = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

FLAT_SCALE = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# How notes are usually spelled in C: sharps for the raised 4th and 1st, flats otherwise
C_SPELLING = ["C", "C#", "D", "Eb", "E", "F", "F#", "G", "Ab", "A", "Bb", "B"]

# Keys whose scales are written with flats
FLAT_KEYS = {"F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb"}

NATURAL_VALUES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

# Accidental characters, ASCII and Unicode
ACCIDENTALS = {"#": 1, "♯": 1, "b": -1, "♭": -1}

ACCIDENTAL_ASCII = {"#": "#", "♯": "#", "b": "b", "♭": "b"}

# Open-string pitch classes, low E (string 6) first
STANDARD_TUNING = (4, 9, 2, 7, 11, 4)

# Same strings as MIDI note numbers (E2 A2 D3 G3 B3 E4)
OPEN_STRING_PITCHES = (40, 45, 50, 55, 59, 64)

STRING_NAMES = ("E", "A", "D", "G", "B", "e")


# =============================================================================
# CONSTANTS: Chord Formulas
# =============================================================================

# Semitones above the root for each canonical chord quality
CHORD_FORMULAS: Dict[str, List[int]] = {
    "major": [0, 4, 7],
    "minor": [0, 3, 7],
    "dim": [0, 3, 6],
    "aug": [0, 4, 8],
    "sus2": [0, 2, 7],
    "sus4": [0, 5, 7],
    "5": [0, 7],
    "7": [0, 4, 7, 10],
    "maj7": [0, 4, 7, 11],
    "min7": [0, 3, 7, 10],
    "dim7": [0, 3, 6, 9],
    "min7b5": [0, 3, 6, 10],
    "min/maj7": [0, 3, 7, 11],
    "9": [0, 4, 7, 10, 2],
    "maj9": [0, 4, 7, 11, 2],
    "min9": [0, 3, 7, 10, 2],
    "9#11": [0, 4, 7, 10, 2, 6],
    "11": [0, 4, 7, 10, 2, 5],
    "maj11": [0, 4, 7, 11, 2, 5],
    "min11": [0, 3, 7, 10, 2, 5],
    "13": [0, 4, 7, 10, 2, 9],
    "maj13": [0, 4, 7, 11, 2, 9],
    "min13": [0, 3, 7, 10, 2, 9],
    "6": [0, 4, 7, 9],
    "min6": [0, 3, 7, 9],
    "6/9": [0, 4, 7, 9, 2],
    "add9": [0, 4, 7, 2],
    "add11": [0, 4, 7, 5],
    "madd9": [0, 3, 7, 2],
    "7b9": [0, 4, 7, 10, 1],
    "7#9": [0, 4, 7, 10, 3],
    "7b5": [0, 4, 6, 10],
    "7#5": [0, 4, 8, 10],
    "7alt": [0, 4, 10, 1, 3, 6, 8],
    "7b13": [0, 4, 7, 10, 8],
    "7#11": [0, 4, 7, 10, 6],
    "7b9b13": [0, 4, 7, 10, 1, 8],
    "7#9b13": [0, 4, 7, 10, 3, 8],
    "7sus4": [0, 5, 7, 10],
    "9sus4": [0, 5, 7, 10, 2],
    "maj7#11": [0, 4, 7, 11, 6],
    "maj7b13": [0, 4, 7, 11, 8],
    "maj7#9": [0, 4, 7, 11, 3],
    "quartal": [0, 5, 10, 3],
}


# =============================================================================
# NOTE CONVERSION
# =============================================================================

def split_note(text: str) -> Tuple[Optional[str], str]:
    """
    Read one note name off the front of a string.

    Reads a letter A-G (any case) and at most one accidental, and returns the
    note in standard spelling together with the unread remainder.

    Examples:
        split_note("f#m7")   → ("F#", "m7")
        split_note("B♭7")    → ("Bb", "7")
        split_note("xyz")    → (None, "xyz")
    """
    if not text or text[0].upper() not in NATURAL_VALUES:
        return None, text

    note = text[0].upper()
    position = 1
    if position < len(text) and text[position] in ACCIDENTALS:
        note += ACCIDENTAL_ASCII[text[position]]
        position += 1
    return note, text[position:]


def is_note(text: str) -> bool:
    """True if the whole string is exactly one note name."""
    note, rest = split_note(text.strip())
    return note is not None and rest == ""


def note_to_value(note: str) -> int:
    """Get the pitch class (0-11) of a note name."""
    parsed, rest = split_note(note.strip())
    if parsed is None or rest:
        raise ValueError(f"Unknown note: '{note}'")

    value = NATURAL_VALUES[parsed[0]]
    if len(parsed) == 2:
        value += ACCIDENTALS[parsed[1]]
    return value % 12


def value_to_note(value: int, prefer_flats: bool = False) -> str:
    """Spell a pitch class with sharps (default) or flats."""
    alphabet = FLAT_SCALE if prefer_flats else CHROMATIC_SCALE
    return alphabet[value % 12]


def display_note(value: int, key: Optional[str] = None) -> str:
    """
    Spell a pitch class the way it would be written in the given key.

    Flat keys use flats, C uses its conventional mixed spelling, and every
    other key (or no key) uses sharps.
    """
    if key == "C":
        return C_SPELLING[value % 12]
    return value_to_note(value, prefer_flats=key in FLAT_KEYS)


# =============================================================================
# DISTANCES
# =============================================================================

def semitone_distance(from_value: int, to_value: int) -> int:
    """Upward distance from one pitch class to another (0-11)."""
    return (to_value - from_value) % 12


def circular_distance(a: int, b: int) -> int:
    """Shortest distance between two pitch classes either way round (0-6)."""
    diff = abs(a - b) % 12
    return min(diff, 12 - diff)


def shortest_delta(from_value: int, to_value: int) -> int:
    """Signed shift from one pitch class to another, in the range -5..+6."""
    delta = semitone_distance(from_value, to_value)
    if delta > 6:
        delta -= 12
    return delta


def transpose_note(note: str, semitones: int, prefer_flats: bool = False) -> str:
    """Transpose a note name by a number of semitones."""
    return value_to_note(note_to_value(note) + semitones, prefer_flats)


# =============================================================================
# STRINGS AND CHORDS
# =============================================================================

def string_pitch(string_index: int, absolute_fret: int) -> int:
    """Pitch class sounded by a string at an absolute fret."""
    return (STANDARD_TUNING[string_index] + absolute_fret) % 12


def chord_tones(root_value: int, quality: str) -> List[int]:
    """Pitch classes of a chord, root first. Unknown qualities give a major triad."""
    formula = CHORD_FORMULAS.get(quality, CHORD_FORMULAS["major"])
    return [(root_value + interval) % 12 for interval in formula]


def spelling_key(root: str, intervals: List[int]) -> str:
    """
    Key whose accidentals should be used to spell notes built on `root`.

    Minor-third sets without a major third borrow their relative major
    (D minor is spelled like F, so Bb rather than A#). Everything else is
    spelled in the root's own key.
    """
    if 3 in intervals and 4 not in intervals:
        return FLAT_SCALE[(note_to_value(root) + 3) % 12]
    return root
