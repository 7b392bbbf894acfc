"""
Scale Library - Scale Pattern Store and Transposer

Resolves a scale descriptor and root into a concrete fingering:
    1. Resolve the descriptor to a library key (alias, direct key, fallback
       keys, fuzzy substring match, then "major")
    2. Pick the requested position box, counted from the lowest box on the
       neck and clamped into range
    3. Detect the root the box was drawn at and transpose it to the
       requested root by the shorter way round
    4. Keep every fret between 0 and the fret ceiling, an octave at a time,
       clamping only as a last resort

Seven-note scales get seven three-notes-per-string boxes built from their
intervals when the table lists none. Scales with neither stored nor built
boxes get a fret window generated at the requested root.

Usage:
    from fretboard.rules.scale_library import resolve_scale_fingering

    fingering = resolve_scale_fingering("D dorian", "D", 0)
    # [[10, 12, 13], [10, 12, 14], ...]

Author: Rohan Rajendra Dhanawade
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from fretboard.config import get_config, table_path
from fretboard.data.loader import load_scale_patterns
from fretboard.data.schema import STRING_COUNT, ScalePattern, ScaleResolution
from fretboard.rules.descriptor_parser import parse_scale_descriptor
from fretboard.rules.enharmonics import DEFAULT_ROOT
from fretboard.rules.scale_modes import lookup_fallback_key, lookup_scale_alias
from fretboard.rules.theory import (
    OPEN_STRING_PITCHES, STANDARD_TUNING, display_note, note_to_value,
    shortest_delta, spelling_key, split_note, string_pitch,
)

logger = logging.getLogger(__name__)

DEFAULT_SCALE = "major"

# Root the generated boxes are drawn at (fret 5 on the low E string)
GENERATED_ROOT = "A"

NOTES_PER_STRING = 3

# Scales of this size get three-notes-per-string boxes
THREE_NPS_SCALE_SIZE = 7

# Lowest fret of each generated window, one window per position
WINDOW_START_FRETS = (0, 3, 5, 7, 10, 12, 15)
WINDOW_SPAN = 5

Fingering = List[List[int]]


# =============================================================================
# FINGERING GENERATION
# =============================================================================

def generate_3nps_positions(intervals: Sequence[int], root_value: int) -> List[Fingering]:
    """
    Three-notes-per-string boxes, one starting on each scale degree.

    Box k puts degrees k, k+1, k+2 on the low E string and carries on three
    degrees per string up to the high e. Notes are laid out as absolute
    pitches first, so every box stays inside the scale and the boxes come
    out ordered up the neck.

    Args:
        intervals: Ascending semitone offsets from the root
        root_value: Pitch class of the root (C = 0)

    Returns:
        One fingering per interval, low string first
    """
    steps = np.asarray(intervals, dtype=int)
    size = len(steps)
    base = OPEN_STRING_PITCHES[0] + (root_value - STANDARD_TUNING[0]) % 12

    # Degree offset of every note in a box, one row per string
    layout = np.arange(STRING_COUNT)[:, None] * NOTES_PER_STRING + np.arange(NOTES_PER_STRING)
    open_pitches = np.asarray(OPEN_STRING_PITCHES)[:, None]

    positions = []
    for degree in range(size):
        notes = layout + degree
        frets = base + 12 * (notes // size) + steps[notes % size] - open_pitches
        if frets.min() < 0:
            frets += 12
        positions.append(frets.tolist())
    return positions


def generate_window_fingering(intervals: Sequence[int], root_value: int, position: int,
                              ceiling: Optional[int] = None) -> Fingering:
    """
    Scale notes inside a small fret window, at most three per string.

    Used for scales that have no boxes of their own. The window for
    `position` starts at WINDOW_START_FRETS[position] and is pulled back
    so it ends at or below the ceiling.
    """
    if ceiling is None:
        ceiling = get_config()["fret_ceiling"]

    start = min(WINDOW_START_FRETS[position], max(0, ceiling - WINDOW_SPAN))
    end = min(ceiling, start + WINDOW_SPAN)
    expected = {(root_value + i) % 12 for i in intervals}

    fingering = []
    for string_index in range(STRING_COUNT):
        frets = [f for f in range(start, end + 1) if string_pitch(string_index, f) in expected]
        fingering.append(frets[:NOTES_PER_STRING])
    return fingering


def _complete_pattern(pattern: ScalePattern) -> ScalePattern:
    """Fill in three-notes-per-string boxes for a seven-note scale listed without any."""
    if pattern.positions or len(pattern.intervals) != THREE_NPS_SCALE_SIZE:
        return pattern
    boxes = generate_3nps_positions(pattern.intervals, note_to_value(GENERATED_ROOT))
    positions = tuple(tuple(tuple(frets) for frets in box) for box in boxes)
    return pattern.model_copy(update={"positions": positions})


def uses_window(pattern: ScalePattern) -> bool:
    """True when a scale has no boxes and is fingered with generated windows."""
    return not pattern.positions


def position_count(pattern: ScalePattern) -> int:
    if uses_window(pattern):
        return len(WINDOW_START_FRETS)
    return pattern.position_count


# =============================================================================
# SCALE STORE
# =============================================================================

class ScaleStore:
    """
    Read-only, ordered scale table.

    Key order matters: it breaks ties in the fuzzy descriptor match.
    Seven-note scales listed without positions get generated boxes here.
    """

    def __init__(self, patterns: Dict[str, ScalePattern]):
        if DEFAULT_SCALE not in patterns:
            raise ValueError(f"Scale table must contain a '{DEFAULT_SCALE}' entry")
        completed = {key: _complete_pattern(pattern) for key, pattern in patterns.items()}
        self._patterns = MappingProxyType(completed)
        self._keys = tuple(patterns)

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[ScalePattern]:
        return iter(self._patterns.values())

    def __contains__(self, key) -> bool:
        return key in self._patterns

    def __repr__(self) -> str:
        return f"ScaleStore({len(self)} scales)"

    def keys(self) -> Tuple[str, ...]:
        return self._keys

    def get(self, key: str) -> Optional[ScalePattern]:
        return self._patterns.get(key)


@lru_cache(maxsize=1)
def get_scale_store() -> ScaleStore:
    path = table_path(get_config(), "scale_table")
    store = ScaleStore(load_scale_patterns(path))
    logger.debug(f"Scale store ready: {len(store)} scales")
    return store


# =============================================================================
# DESCRIPTOR RESOLUTION
# =============================================================================

def resolve_scale_key(raw: str, store: Optional[ScaleStore] = None) -> Tuple[str, str]:
    """
    Library key for a descriptor and how it was found.

    The fuzzy step prefers the longest key found inside the descriptor, so
    "mixolydian b6" is mixolydian and not lydian. Failing that it takes the
    shortest key that contains the descriptor. Ties keep table order.

    Returns:
        (key, match) where match is one of "alias", "direct", "fallback",
        "fuzzy", "default" or "empty"
    """
    if store is None:
        store = get_scale_store()

    descriptor = parse_scale_descriptor(raw).descriptor
    lowered = " ".join(descriptor.lower().split())
    if not lowered:
        return DEFAULT_SCALE, "empty"

    alias = lookup_scale_alias(descriptor)
    if alias is not None and alias in store:
        return alias, "alias"

    if lowered in store:
        return lowered, "direct"

    fallback = lookup_fallback_key(descriptor)
    if fallback is not None and fallback in store:
        return fallback, "fallback"

    contained = [key for key in store.keys() if key in lowered]
    if contained:
        return max(contained, key=len), "fuzzy"

    containing = [key for key in store.keys() if lowered in key]
    if containing:
        return min(containing, key=len), "fuzzy"

    return DEFAULT_SCALE, "default"


def normalize_scale_descriptor(raw: str, store: Optional[ScaleStore] = None) -> str:
    """Library key for a scale descriptor; unknown names give "major"."""
    key, match = resolve_scale_key(raw, store)
    if match == "default":
        logger.warning(f"Unknown scale '{raw}' - defaulting to {DEFAULT_SCALE}")
    elif match == "fuzzy":
        logger.info(f"Scale '{raw}' matched loosely to '{key}'")
    return key


def scale_intervals(descriptor: str, store: Optional[ScaleStore] = None) -> List[int]:
    if store is None:
        store = get_scale_store()
    key = normalize_scale_descriptor(descriptor, store)
    return list(store.get(key).intervals)


# =============================================================================
# TRANSPOSITION
# =============================================================================

class Transposition(NamedTuple):
    fingering: Fingering
    semitones: int
    lossy: bool


def detect_reference_root(fingering: Sequence[Sequence[int]],
                          intervals: Optional[Sequence[int]] = None) -> int:
    """
    Pitch class a fingering was drawn at.

    Without intervals this is the note of the lowest fret on the low E
    string. With intervals, that note is read as each scale degree in turn
    and the first root whose scale holds every note of the box wins, so a
    box that starts on the third still reports the root. If no root fits,
    the low-string note is returned.
    """
    lowest = string_pitch(0, min(fingering[0]))
    if intervals is None:
        return lowest

    degrees = {i % 12 for i in intervals}
    pitches = {string_pitch(s, fret) for s, frets in enumerate(fingering) for fret in frets}
    for interval in intervals:
        root = (lowest - interval) % 12
        if all((pitch - root) % 12 in degrees for pitch in pitches):
            return root
    return lowest


def transpose_fingering(fingering: Sequence[Sequence[int]], semitones: int,
                        ceiling: Optional[int] = None) -> Transposition:
    """
    Shift every fret by `semitones`, keeping the result on the neck.

    If a fret lands below 0 or above `ceiling`, the whole pattern moves one
    octave back toward the neck. If that still does not fit, the offending
    frets are clamped and the result is marked lossy.
    """
    if ceiling is None:
        ceiling = get_config()["fret_ceiling"]

    strings = [np.asarray(frets, dtype=int) for frets in fingering]
    flat = np.concatenate(strings)

    total = semitones
    shifted = flat + total
    if shifted.min() < 0:
        total += 12
    elif shifted.max() > ceiling:
        total -= 12
    if total != semitones:
        logger.info(f"Shift of {semitones} leaves the neck - moving an octave ({total})")
    shifted = flat + total

    lossy = bool(shifted.min() < 0 or shifted.max() > ceiling)
    if lossy:
        logger.warning(
            f"Pattern spans frets {flat.min()}-{flat.max()} and cannot be shifted by "
            f"{semitones} within 0-{ceiling} - clamping"
        )

    result = [np.clip(frets + total, 0, ceiling).tolist() for frets in strings]
    return Transposition(result, total, lossy)


# =============================================================================
# RESOLUTION
# =============================================================================

def _resolve_scale_root(requested: Optional[str], parsed_root: Optional[str],
                        warnings: List[str]) -> str:
    raw = requested if requested else parsed_root
    if not raw:
        return DEFAULT_ROOT

    note, rest = split_note(raw.strip())
    if note is None or rest.strip():
        message = f"Unknown scale root '{raw}' - using {DEFAULT_ROOT}"
        logger.warning(message)
        warnings.append(message)
        return DEFAULT_ROOT
    return note


def resolve_scale(descriptor: str, root: Optional[str] = None, position: int = 0,
                  store: Optional[ScaleStore] = None) -> ScaleResolution:
    """
    Resolve a scale descriptor into a transposed fingering.

    Args:
        descriptor: Scale name, optionally led by a root ("D dorian")
        root: Root to transpose to; overrides a root in the descriptor
        position: Position box counted from the lowest on the neck,
            clamped into range

    Returns:
        ScaleResolution with the fingering and everything done to get it
    """
    if store is None:
        store = get_scale_store()
    ceiling = get_config()["fret_ceiling"]

    parsed = parse_scale_descriptor(descriptor)
    warnings = list(parsed.warnings)
    scale_root = _resolve_scale_root(root, parsed.root, warnings)

    key, match = resolve_scale_key(descriptor, store)
    if match == "default":
        message = f"Unknown scale '{descriptor}' - using {DEFAULT_SCALE}"
        logger.warning(message)
        warnings.append(message)
    elif match == "fuzzy":
        logger.info(f"Scale '{descriptor}' matched loosely to '{key}'")

    pattern = store.get(key)
    count = position_count(pattern)
    index = max(0, min(position, count - 1))
    if index != position:
        message = f"Position {position} out of range for {key} - using {index}"
        logger.info(message)
        warnings.append(message)

    if uses_window(pattern):
        fingering = generate_window_fingering(pattern.intervals, note_to_value(scale_root),
                                              index, ceiling)
        logger.info(f"No stored boxes for {key} - built window {index} at {scale_root}")
        return ScaleResolution(
            descriptor=descriptor,
            root=scale_root,
            scale_key=key,
            position=index,
            position_count=count,
            fingering=fingering,
            semitones=0,
            generated=True,
            warnings=warnings,
        )

    stored = _position_order(pattern)[index]
    fingering = pattern.positions[stored]
    reference = detect_reference_root(fingering, pattern.intervals)
    delta = shortest_delta(reference, note_to_value(scale_root))
    logger.info(f"Transposing {key} position {index} from {display_note(reference)} "
                f"to {scale_root} ({delta:+d})")
    transposed = transpose_fingering(fingering, delta, ceiling)
    if transposed.lossy:
        warnings.append(f"Frets clamped to 0-{ceiling}")

    return ScaleResolution(
        descriptor=descriptor,
        root=scale_root,
        scale_key=key,
        position=index,
        position_count=count,
        fingering=transposed.fingering,
        semitones=transposed.semitones,
        lossy=transposed.lossy,
        warnings=warnings,
    )


def resolve_scale_fingering(descriptor: str, root: Optional[str] = None,
                            position: int = 0) -> Fingering:
    """Six per-string fret lists for a scale at a root. Never raises on bad input."""
    return resolve_scale(descriptor, root, position).fingering


def resolve_scale_notes(root: str, descriptor: str,
                        store: Optional[ScaleStore] = None) -> List[str]:
    """
    Note names of a scale, starting at the root.

    Example:
        resolve_scale_notes("D", "dorian")  → ["D", "E", "F", "G", "A", "B", "C"]
    """
    scale_root = _resolve_scale_root(root, None, [])
    intervals = scale_intervals(descriptor, store)
    key = spelling_key(scale_root, intervals)
    root_value = note_to_value(scale_root)
    return [display_note(root_value + interval, key) for interval in intervals]


# =============================================================================
# POSITION AND NOTE HELPERS
# =============================================================================

def _position_order(pattern: ScalePattern) -> List[int]:
    if uses_window(pattern):
        return list(range(len(WINDOW_START_FRETS)))
    lowest = [min(min(frets) for frets in fingering) for fingering in pattern.positions]
    return sorted(range(len(lowest)), key=lambda i: lowest[i])


def sorted_positions(descriptor: str, store: Optional[ScaleStore] = None) -> List[int]:
    """
    Stored position indices ordered from the lowest box on the neck upward.

    `resolve_scale` counts its `position` argument in this order. Windows
    are already in neck order.
    """
    if store is None:
        store = get_scale_store()
    return _position_order(store.get(normalize_scale_descriptor(descriptor, store)))


class FingeringCheck(NamedTuple):
    is_valid: bool
    invalid_notes: List[str]
    coverage: float


def validate_fingering_notes(fingering: Sequence[Sequence[int]], root: str,
                             descriptor: str, ceiling: Optional[int] = None,
                             store: Optional[ScaleStore] = None) -> FingeringCheck:
    """
    Check that every fret in a fingering sounds a note of the scale.

    Offenders are reported as "String N, fret F: X" with N counted from the
    low E string as 1. `coverage` is the share of frets that are in the scale.
    """
    if ceiling is None:
        ceiling = get_config()["fret_ceiling"]

    intervals = scale_intervals(descriptor, store)
    root_value = note_to_value(root)
    expected = {(root_value + i) % 12 for i in intervals}

    invalid = []
    total = 0
    for string_index, frets in enumerate(fingering):
        for fret in frets:
            if not 0 <= fret <= ceiling:
                continue
            total += 1
            pitch = string_pitch(string_index, fret)
            if pitch not in expected:
                invalid.append(f"String {string_index + 1}, fret {fret}: {display_note(pitch)}")

    coverage = (total - len(invalid)) / total if total else 0.0
    return FingeringCheck(not invalid, invalid, coverage)
