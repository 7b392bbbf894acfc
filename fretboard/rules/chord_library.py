"""
Chord Library - Chord Name to Playable Voicings

The chord side of the resolver. A chord name goes through:
    1. Descriptor parsing (root, quality, optional slash bass)
    2. Exact lookup in the voicing store
    3. The similarity fallback chain on a miss
    4. The slash-bass adjustment, whichever tier produced the voicings

Resolution never raises on user input. Every substitution is logged and
recorded in the result's warnings.

Author: Rohan Rajendra Dhanawade
"""

import logging
from typing import Dict, List, Optional

from fretboard.data.schema import MUTED, ChordResolution, Voicing
from fretboard.rules.descriptor_parser import parse_chord_name
from fretboard.rules.fallback import find_closest_voicings
from fretboard.rules.slash_bass import adjust_voicings_for_slash_bass, sounding_pitch_classes
from fretboard.rules.theory import CHORD_FORMULAS, chord_tones, display_note, note_to_value, spelling_key
from fretboard.rules.voicing_store import VoicingStore, get_voicing_store

logger = logging.getLogger(__name__)


def resolve_chord(name: str, store: Optional[VoicingStore] = None,
                  shapes: Optional[Dict[str, Voicing]] = None) -> ChordResolution:
    """
    Resolve a chord name into voicings plus a record of how they were found.

    Args:
        name: Chord name such as "Cmaj7", "F#m7b5" or "Am/G"
        store: Voicing store (defaults to the packaged table)
        shapes: Generic shape table for the last fallback tiers

    Returns:
        ChordResolution with at least one voicing
    """
    if store is None:
        store = get_voicing_store()

    parsed = parse_chord_name(name, store)
    warnings = list(parsed.warnings)

    voicings = store.resolve_exact(parsed.root, parsed.quality)
    if voicings is not None:
        source, matched_key = "exact", parsed.key
    else:
        match = find_closest_voicings(parsed.root, parsed.quality, store, shapes)
        voicings, source, matched_key = match.voicings, match.source, match.matched_key
        warnings.append(f"No voicings stored for {parsed.key} - using {match.describe()}")

    if parsed.bass is not None:
        voicings = adjust_voicings_for_slash_bass(voicings, parsed.bass)

    return ChordResolution(
        name=name,
        root=parsed.root,
        quality=parsed.quality,
        bass=parsed.bass,
        voicings=voicings,
        source=source,
        matched_key=matched_key,
        warnings=warnings,
    )


def resolve_chord_voicings(name: str) -> List[Voicing]:
    """
    Playable voicings for a chord name, best first.

    Always returns at least one voicing with six fret entries.
    """
    return resolve_chord(name).voicings


# =============================================================================
# CHORD TONES
# =============================================================================

def chord_notes(name: str) -> List[str]:
    """
    Note names of a chord, root first.

    Example:
        chord_notes("Dm7")  → ["D", "F", "A", "C"]
    """
    parsed = parse_chord_name(name)
    return chord_tone_names(parsed.root, parsed.quality)


def chord_tone_names(root: str, quality: str) -> List[str]:
    key = spelling_key(root, CHORD_FORMULAS[quality])
    return [display_note(value, key) for value in chord_tones(note_to_value(root), quality)]


def voicing_pitch_classes(voicing: Voicing) -> List[Optional[int]]:
    return sounding_pitch_classes(voicing)


def is_muted_voicing(voicing: Voicing) -> bool:
    """True for the all-muted voicing returned when nothing could be placed."""
    return all(fret == MUTED for fret in voicing.frets)


def chord_tone_ratio(voicing: Voicing, root: str, quality: str) -> float:
    """Share of sounding strings that play a tone of the chord (0.0 if none sound)."""
    tones = set(chord_tones(note_to_value(root), quality))
    sounding = [p for p in sounding_pitch_classes(voicing) if p is not None]
    if not sounding:
        return 0.0
    return sum(1 for p in sounding if p in tones) / len(sounding)


def voicing_chord_tone_ratio(voicing: Voicing, name: str) -> float:
    parsed = parse_chord_name(name)
    return chord_tone_ratio(voicing, parsed.root, parsed.quality)
