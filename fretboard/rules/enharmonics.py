"""
Enharmonic Root Normalizer

Chooses the spelling a root is displayed and looked up under:
    1. Pitch classes with one industry-standard spelling always use it
       (C# → Db, A# → Bb, B# → C, Fb → E, ...)
    2. The remaining pitch class (F#/Gb) is stored under both spellings, so
       the written spelling wins when the store has entries for it, then the
       other spelling, then the sharp form
    3. Anything that is not a note becomes C
"""

import logging
from typing import Optional, Tuple

from fretboard.rules.theory import (
    CHROMATIC_SCALE, FLAT_SCALE, NATURAL_VALUES, note_to_value, split_note,
)
from fretboard.rules.voicing_store import VoicingStore, get_voicing_store

logger = logging.getLogger(__name__)

DEFAULT_ROOT = "C"

# Pitch class -> the only spelling the tables use for it
FIXED_SPELLINGS = {
    1: "Db",
    3: "Eb",
    8: "Ab",
    10: "Bb",
}

NATURAL_NAMES = {value: name for name, value in NATURAL_VALUES.items()}


def resolve_root(raw: str, store: Optional[VoicingStore] = None) -> Tuple[str, bool]:
    """
    Normalize a root token and report whether it was a note at all.

    Returns:
        (display spelling, recognized)
    """
    note, rest = split_note(raw.strip())
    if note is None or rest:
        return DEFAULT_ROOT, False

    value = note_to_value(note)
    if value in FIXED_SPELLINGS:
        return FIXED_SPELLINGS[value], True
    if value in NATURAL_NAMES:
        return NATURAL_NAMES[value], True

    if store is None:
        store = get_voicing_store()

    sharp, flat = CHROMATIC_SCALE[value], FLAT_SCALE[value]
    candidates = (note, flat if note == sharp else sharp)
    for candidate in candidates:
        if store.has_root(candidate):
            return candidate, True
    return sharp, True


def normalize_root(raw: str, store: Optional[VoicingStore] = None) -> str:
    """Display spelling of a root; unknown input gives "C"."""
    root, recognized = resolve_root(raw, store)
    if not recognized:
        logger.warning(f"Unknown root note '{raw}' - defaulting to {DEFAULT_ROOT}")
    return root
