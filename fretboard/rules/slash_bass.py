"""
Slash-Bass Adjuster

Makes a voicing's lowest sounding note match the bass of a slash chord by
muting strings below the first one that already plays the bass.
Voicings with no string sounding the bass are left as they are. An
adjustment that leaves fewer than three strings sounding is logged.
"""

import logging
from typing import List, Optional

from fretboard.data.schema import MUTED, Voicing
from fretboard.rules.theory import note_to_value, string_pitch

logger = logging.getLogger(__name__)

ADJUSTED_LABEL = "Adjusted"

# Fewer sounding strings than this after muting is worth a note in the log
MIN_SOUNDING_STRINGS = 3


def sounding_pitch_classes(voicing: Voicing) -> List[Optional[int]]:
    """Pitch class per string, low string first; None for muted strings."""
    return [
        None if fret is None else string_pitch(string_index, fret)
        for string_index, fret in enumerate(voicing.absolute_frets())
    ]


def lowest_sounding_string(voicing: Voicing) -> Optional[int]:
    for string_index, fret in enumerate(voicing.frets):
        if fret != MUTED:
            return string_index
    return None


def adjust_for_slash_bass(voicing: Voicing, bass_value: int, bass_name: str) -> Voicing:
    """
    Mute the strings below the first one sounding `bass_value`.

    Returns the voicing unchanged if its lowest note is already the bass or
    if no string sounds the bass.
    """
    pitches = sounding_pitch_classes(voicing)
    lowest = lowest_sounding_string(voicing)
    if lowest is None or pitches[lowest] == bass_value:
        return voicing

    for string_index in range(lowest + 1, len(pitches)):
        if pitches[string_index] == bass_value:
            frets = tuple(
                MUTED if i < string_index else fret
                for i, fret in enumerate(voicing.frets)
            )
            label = f"{voicing.label or ADJUSTED_LABEL} (/{bass_name})"
            sounding = sum(1 for fret in frets if fret != MUTED)
            if sounding < MIN_SOUNDING_STRINGS:
                logger.info(f"Bass {bass_name} leaves only {sounding} strings sounding in {list(frets)}")
            return voicing.model_copy(update={"frets": frets, "label": label})

    logger.debug(f"No string sounds {bass_name} in {list(voicing.frets)} - left unchanged")
    return voicing


def adjust_voicings_for_slash_bass(voicings: List[Voicing], bass: str) -> List[Voicing]:
    """Apply the bass adjustment to every voicing, keeping their order."""
    bass_value = note_to_value(bass)
    return [adjust_for_slash_bass(v, bass_value, bass) for v in voicings]
