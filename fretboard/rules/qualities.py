"""
Chord Quality Normalizer

Maps the open vocabulary of chord-suffix spellings ("m7", "-7", "min7",
"ø", "7(b9)", "Δ7", ...) onto the closed set of canonical qualities the
voicing store is keyed by. Unrecognized suffixes become "major".

Author: Rohan Rajendra Dhanawade
"""

import logging
from typing import Dict, List, Tuple

from fretboard.rules.theory import CHORD_FORMULAS

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CANONICAL_QUALITIES = tuple(CHORD_FORMULAS)

DEFAULT_QUALITY = "major"

# Checked before lowercasing: capital M means major
CASE_SENSITIVE_SYNONYMS = {
    "M": "major",
    "M7": "maj7",
    "M9": "maj9",
    "M11": "maj11",
    "M13": "maj13",
}

# Keys are lowercase with whitespace and parentheses removed
QUALITY_SYNONYMS = {
    "": "major",
    "maj": "major",
    "major": "major",
    "m": "minor",
    "mi": "minor",
    "min": "minor",
    "minor": "minor",
    "-": "minor",
    "m7b5": "min7b5",
    "-7b5": "min7b5",
    "ø": "min7b5",
    "ø7": "min7b5",
    "half-dim": "min7b5",
    "halfdim": "min7b5",
    "halfdiminished": "min7b5",
    "m9": "min9",
    "-9": "min9",
    "ø9": "min9",
    "m11": "min11",
    "-11": "min11",
    "ø11": "min11",
    "m13": "min13",
    "-13": "min13",
    "mmaj7": "min/maj7",
    "m/maj7": "min/maj7",
    "minmaj7": "min/maj7",
    "min/maj7": "min/maj7",
    "min7/maj7": "min/maj7",
    "-maj7": "min/maj7",
    "m7+": "min/maj7",
    "mmaj9": "min9",
    "δ": "maj7",
    "δ7": "maj7",
    "δ9": "maj9",
    "δ11": "maj11",
    "δ13": "maj13",
    "major7": "maj7",
    "dom7": "7",
    "dominant7": "7",
    "m7": "min7",
    "mi7": "min7",
    "minor7": "min7",
    "-7": "min7",
    "m6": "min6",
    "-6": "min6",
    "o": "dim",
    "°": "dim",
    "diminished": "dim",
    "o7": "dim7",
    "°7": "dim7",
    "+": "aug",
    "augmented": "aug",
    "sus": "sus4",
    "7sus": "7sus4",
    "sus9": "9sus4",
    "madd9": "madd9",
    "minadd9": "madd9",
    "-add9": "madd9",
    "69": "6/9",
    "power": "5",
    "5th": "5",
}

# Prefix / fragments / suffix rules for altered and extended chords,
# tried in order. A rule matches when the suffix starts with one of the
# prefixes, ends with one of the endings and contains the fragments in between.
ALTERATION_RULES: List[Tuple[Tuple[str, ...], Tuple[str, ...], Tuple[str, ...], str]] = [
    (("maj7", "δ7"), (), ("#11",), "maj7#11"),
    (("maj7", "δ7"), (), ("b13",), "maj7b13"),
    (("maj7", "δ7"), (), ("#9",), "maj7#9"),
    (("7",), ("b9",), ("b13",), "7b9b13"),
    (("7",), ("#9",), ("b13",), "7#9b13"),
    (("7",), (), ("b9",), "7b9"),
    (("7",), (), ("#9",), "7#9"),
    (("7",), (), ("#11",), "7#11"),
    (("7",), (), ("b13",), "7b13"),
    (("7",), (), ("b5",), "7b5"),
    (("7",), (), ("#5", "+5", "+"), "7#5"),
    (("7",), (), ("alt",), "7alt"),
    (("7",), (), ("sus4",), "7sus4"),
    (("9",), (), ("#11",), "9#11"),
    (("9",), (), ("sus4",), "9sus4"),
]

# Short names shown in chord symbols
DISPLAY_SUFFIXES: Dict[str, str] = {
    "major": "",
    "minor": "m",
    "min7": "m7",
    "min7b5": "m7b5",
    "min/maj7": "m(maj7)",
    "min6": "m6",
    "min9": "m9",
    "min11": "m11",
    "min13": "m13",
}


# =============================================================================
# NORMALIZATION
# =============================================================================

def sanitize_quality(raw: str) -> str:
    """Lowercase and drop whitespace and parentheses."""
    return "".join(c for c in raw if not c.isspace() and c not in "()").lower()


def _matches_rule(text: str, prefixes, fragments, endings) -> bool:
    for prefix in prefixes:
        if not text.startswith(prefix):
            continue
        rest = text[len(prefix):]
        for ending in endings:
            if not rest.endswith(ending):
                continue
            middle = rest[:len(rest) - len(ending)]
            position = 0
            for fragment in fragments:
                found = middle.find(fragment, position)
                if found == -1:
                    break
                position = found + len(fragment)
            else:
                return True
    return False


def resolve_chord_quality(raw: str) -> Tuple[str, bool]:
    """
    Normalize a chord suffix and report whether it was recognized.

    Returns:
        (canonical quality, recognized). Unrecognized input gives
        ("major", False).
    """
    stripped = raw.strip()
    if stripped in CASE_SENSITIVE_SYNONYMS:
        return CASE_SENSITIVE_SYNONYMS[stripped], True

    text = sanitize_quality(raw)

    if text in CANONICAL_QUALITIES:
        return text, True

    if text in QUALITY_SYNONYMS:
        return QUALITY_SYNONYMS[text], True

    for prefixes, fragments, endings, quality in ALTERATION_RULES:
        if _matches_rule(text, prefixes, fragments, endings):
            return quality, True

    return DEFAULT_QUALITY, False


def normalize_chord_quality(raw: str) -> str:
    """Canonical quality for a suffix string; unknown suffixes give "major"."""
    quality, recognized = resolve_chord_quality(raw)
    if not recognized:
        logger.warning(f"Unrecognized chord quality '{raw}' - using '{DEFAULT_QUALITY}'")
    return quality


def is_supported_quality(raw: str) -> bool:
    return resolve_chord_quality(raw)[1]


def quality_suffix(quality: str) -> str:
    """Suffix used when printing a chord symbol ("min7" → "m7")."""
    return DISPLAY_SUFFIXES.get(quality, quality)
