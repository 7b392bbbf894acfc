"""
Fretboard Resolver

Turns chord and scale names into playable guitar fingerings for standard
tuning.

Subpackages:
    - fretboard.data: Table schemas, YAML tables and loaders
    - fretboard.rules: Normalization, lookup, fallback and transposition
    - fretboard.app: Command line interface

Example usage:
    from fretboard import resolve_chord_voicings, resolve_scale_fingering

    voicings = resolve_chord_voicings("F#m7b5")
    print(voicings[0].frets)      # (2, 'x', 2, 2, 1, 'x')

    fingering = resolve_scale_fingering("D dorian", "D")
    print(fingering[0])           # [10, 12, 13]
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Union

from fretboard.config import get_config, set_config_path
from fretboard.data.schema import ChordResolution, ScaleResolution, Voicing
from fretboard.rules.chord_library import (
    chord_notes, is_muted_voicing, resolve_chord, resolve_chord_voicings,
    voicing_chord_tone_ratio, voicing_pitch_classes,
)
from fretboard.rules.enharmonics import normalize_root
from fretboard.rules.fallback import get_generic_shapes
from fretboard.rules.qualities import normalize_chord_quality
from fretboard.rules.scale_library import (
    get_scale_store, normalize_scale_descriptor, resolve_scale,
    resolve_scale_fingering, resolve_scale_notes, scale_intervals,
    sorted_positions, validate_fingering_notes,
)
from fretboard.rules.validation import ValidationResult, validate_scale_library, validate_store
from fretboard.rules.voicing_store import get_voicing_store

__version__ = "0.1.0"
__author__ = "Rohan Rajendra Dhanawade"


def clear_caches() -> None:
    """Forget the loaded config and tables so the next call reloads them."""
    get_config.cache_clear()
    get_voicing_store.cache_clear()
    get_generic_shapes.cache_clear()
    get_scale_store.cache_clear()


@contextmanager
def config_file(path: Union[str, Path]) -> Iterator[Dict[str, Any]]:
    """
    Use `path` as the override file inside the block.

    The previous file and empty caches are restored on exit, so nothing
    leaks into the rest of the process or its environment.

    Example:
        with config_file("fretboard.yaml") as config:
            print(config["fret_ceiling"])
    """
    previous = set_config_path(path)
    clear_caches()
    try:
        yield get_config()
    finally:
        set_config_path(previous)
        clear_caches()
