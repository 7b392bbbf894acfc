"""
Scale Mode Descriptors

Alias table for scale and mode names. Maps whatever a user or generator
writes ("Ionian", "Minor Pentatonic", "super-locrian") onto the keys of the
scale pattern table.

Author: Rohan Rajendra Dhanawade
"""

from typing import Dict, Optional


# =============================================================================
# CONSTANTS
# =============================================================================

# (display name, library key, aliases)
SCALE_DESCRIPTIONS = [
    ("Major", "major", ["Ionian"]),
    ("Minor", "minor", ["Aeolian", "Natural Minor"]),
    ("Dorian", "dorian", []),
    ("Phrygian", "phrygian", []),
    ("Lydian", "lydian", []),
    ("Mixolydian", "mixolydian", []),
    ("Locrian", "locrian", []),
    ("Major Pentatonic", "pentatonic major", ["Pentatonic Major"]),
    ("Minor Pentatonic", "pentatonic minor", ["Pentatonic Minor"]),
    ("Blues", "blues", ["Minor Blues"]),
    ("Whole Tone", "whole tone", []),
    ("Diminished", "diminished", ["Octatonic"]),
    ("Altered", "altered", []),
    ("Super Locrian", "super locrian", []),
    ("Lydian Dominant", "lydian dominant", []),
    ("Phrygian Dominant", "phrygian dominant", []),
    ("Hungarian Minor", "hungarian minor", []),
    ("Gypsy", "gypsy", []),
    ("Bebop Dominant", "bebop dominant", []),
    ("Bebop Major", "bebop major", []),
]

# Collapsed spellings that map straight onto a library key
FALLBACK_SCALE_KEYS = {
    "harmonicminor": "harmonic minor",
    "melodicminor": "melodic minor",
}

FILLER_WORDS = {"scale", "mode"}


# =============================================================================
# LOOKUP
# =============================================================================

def sanitize_descriptor(descriptor: str) -> str:
    """Lowercase and drop spaces and hyphens: "Super-Locrian" → "superlocrian"."""
    return "".join(c for c in descriptor if not c.isspace() and c != "-").lower()


def _build_lookup() -> Dict[str, str]:
    lookup = {}
    for canonical, key, aliases in SCALE_DESCRIPTIONS:
        lookup[sanitize_descriptor(canonical)] = key
        for alias in aliases:
            lookup[sanitize_descriptor(alias)] = key
    return lookup


DESCRIPTOR_LOOKUP = _build_lookup()

DISPLAY_NAMES = {key: canonical for canonical, key, _ in SCALE_DESCRIPTIONS}


def lookup_scale_alias(descriptor: str) -> Optional[str]:
    """Library key for a known scale name or alias, else None."""
    return DESCRIPTOR_LOOKUP.get(sanitize_descriptor(descriptor))


def lookup_fallback_key(descriptor: str) -> Optional[str]:
    return FALLBACK_SCALE_KEYS.get(sanitize_descriptor(descriptor))


def strip_filler_words(descriptor: str) -> str:
    """Drop the words "scale" and "mode" and collapse whitespace."""
    words = [w for w in descriptor.split() if w.lower() not in FILLER_WORDS]
    return " ".join(words)


def scale_display_name(key: str) -> str:
    return DISPLAY_NAMES.get(key, key.title())
