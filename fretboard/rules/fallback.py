"""
Similarity Fallback - Substitute Voicings for Missing Chords

When the voicing table has no entry for a chord, this module finds the
closest thing it does have. Three tiers are tried in order:

    1. SIMILAR:   the best-scoring stored entry, judged by root and quality
    2. GENERIC:   a movable barre shape for the quality, placed at the root
    3. TEMPLATE:  the generic major shape at the root when the quality has
                  no shape of its own

An all-muted SENTINEL voicing is returned only when the root cannot be
placed on the low string at all.

Scoring (per stored entry):
    Same root:      50 + 40 (same quality) / 20 (related quality) / 5 (other)
    Different root: max(5, 25 - 2 * circular distance)

Only entries scoring above 10 are candidates. Ties keep table order.

Author: Rohan Rajendra Dhanawade
"""

import logging
from functools import lru_cache
from typing import Dict, List, NamedTuple, Optional, Tuple

import numpy as np

from fretboard.config import get_config, table_path
from fretboard.data.loader import load_generic_shapes
from fretboard.data.schema import MUTED, Voicing
from fretboard.rules.theory import note_to_value
from fretboard.rules.voicing_store import StoreEntry, VoicingStore, get_voicing_store

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS: Scoring
# =============================================================================

SAME_ROOT_BASE = 50
EXACT_QUALITY_BONUS = 40
RELATED_QUALITY_BONUS = 20
OTHER_QUALITY_BONUS = 5

DISTANCE_BASE = 25
DISTANCE_PENALTY = 2
MIN_DISTANCE_SCORE = 5

# Candidates must score strictly above this
SCORE_THRESHOLD = 10

# Qualities that make an acceptable stand-in for the key quality
RELATED_QUALITIES: Dict[str, List[str]] = {
    "major": ["6", "add9", "7"],
    "minor": ["min7", "6"],
    "dim": ["dim7", "min7b5"],
    "aug": ["7#5"],
    "7": ["9", "maj7"],
    "maj7": ["9", "maj9"],
    "min7": ["min9", "min11"],
}


# =============================================================================
# CONSTANTS: Shape Placement
# =============================================================================

# Fret of each root on the low E string
ROOT_TO_FRET_FROM_E = {
    "E": 0, "F": 1, "F#": 2, "Gb": 2, "G": 3, "G#": 4, "Ab": 4,
    "A": 5, "A#": 6, "Bb": 6, "B": 7, "C": 8, "C#": 9, "Db": 9,
    "D": 10, "D#": 11, "Eb": 11,
}

# A barre can't sit on the nut, so open-string roots move up an octave
OPEN_ROOT_FRET = 12

TEMPLATE_QUALITY = "major"

# Used if the generic table itself has no major shape
MAJOR_BARRE_FRETS = (1, 3, 3, 2, 1, 1)

SENTINEL_LABEL = "Unknown"


# =============================================================================
# RESULT TYPE
# =============================================================================

class FallbackMatch(NamedTuple):
    """
    What the fallback chain settled on.

    Attributes:
        voicings: Substitute voicings, never empty
        source: "similar", "generic", "template" or "sentinel"
        matched_key: Store key of the substitute (similar tier only)
        score: Similarity score of the substitute (similar tier only)
    """
    voicings: List[Voicing]
    source: str
    matched_key: Optional[str] = None
    score: Optional[int] = None

    def describe(self) -> str:
        if self.source == "similar":
            return f"similar chord {self.matched_key} (score {self.score})"
        return f"{self.source} shape"


@lru_cache(maxsize=1)
def get_generic_shapes() -> Dict[str, Voicing]:
    return load_generic_shapes(table_path(get_config(), "generic_table"))


def sentinel_voicing() -> Voicing:
    """All six strings muted. Marks "nothing playable was found"."""
    return Voicing(frets=(MUTED,) * 6, label=SENTINEL_LABEL)


# =============================================================================
# TIER 1: SIMILARITY
# =============================================================================

def quality_bonus(candidate: str, quality: str) -> int:
    if candidate == quality:
        return EXACT_QUALITY_BONUS
    if candidate in RELATED_QUALITIES.get(quality, []):
        return RELATED_QUALITY_BONUS
    return OTHER_QUALITY_BONUS


def score_candidates(store: VoicingStore, root_value: int, quality: str) -> np.ndarray:
    """
    Similarity score of every store entry, in table order.

    Roots are compared by pitch class, so "F#" and "Gb" entries count as the
    same root.
    """
    if len(store) == 0:
        return np.zeros(0, dtype=int)

    roots = np.array(store.root_values())
    diff = np.abs(roots - root_value)
    distance = np.minimum(diff, 12 - diff)

    distance_scores = np.maximum(MIN_DISTANCE_SCORE, DISTANCE_BASE - DISTANCE_PENALTY * distance)
    bonuses = np.array([quality_bonus(entry.quality, quality) for entry in store])

    return np.where(distance == 0, SAME_ROOT_BASE + bonuses, distance_scores)


def rank_candidates(store: VoicingStore, root_value: int,
                    quality: str) -> List[Tuple[StoreEntry, int]]:
    """
    Entries above the threshold, best first.

    The sort is stable, so equal scores keep the order the table was
    written in.
    """
    scores = score_candidates(store, root_value, quality)
    candidates = np.flatnonzero(scores > SCORE_THRESHOLD)
    if candidates.size == 0:
        return []

    order = candidates[np.argsort(-scores[candidates], kind="stable")]
    return [(store.entries[i], int(scores[i])) for i in order]


# =============================================================================
# TIERS 2-4: SHAPES
# =============================================================================

def root_barre_fret(root: str) -> Optional[int]:
    """Fret a barre shape for `root` starts at, or None if unknown."""
    fret = ROOT_TO_FRET_FROM_E.get(root)
    if fret is None:
        return None
    return OPEN_ROOT_FRET if fret == 0 else fret


def generic_voicing(root: str, quality: str,
                    shapes: Optional[Dict[str, Voicing]] = None) -> FallbackMatch:
    """Place the generic shape for `quality` at the root's barre fret."""
    fret = root_barre_fret(root)
    if fret is None:
        logger.warning(f"No fret position for root '{root}' - returning muted voicing")
        return FallbackMatch([sentinel_voicing()], "sentinel")

    if shapes is None:
        shapes = get_generic_shapes()

    shape = shapes.get(quality)
    if shape is not None:
        voicing = Voicing(
            frets=shape.frets,
            first_fret=fret,
            label=f"{root} {quality} (theoretical)",
        )
        return FallbackMatch([voicing], "generic")

    template = shapes.get(TEMPLATE_QUALITY)
    frets = template.frets if template is not None else MAJOR_BARRE_FRETS
    voicing = Voicing(frets=frets, first_fret=fret, label=f"{root} (adapted)")
    return FallbackMatch([voicing], "template")


# =============================================================================
# FALLBACK CHAIN
# =============================================================================

def find_closest_voicings(root: str, quality: str,
                          store: Optional[VoicingStore] = None,
                          shapes: Optional[Dict[str, Voicing]] = None) -> FallbackMatch:
    """
    Best available substitute for a chord the store does not hold.

    Never raises for a missing chord; the worst case is the sentinel.

    Args:
        root: Normalized root spelling
        quality: Canonical quality
        store: Voicing store to search (defaults to the packaged table)
        shapes: Generic shape table (defaults to the packaged table)
    """
    if store is None:
        store = get_voicing_store()

    try:
        root_value = note_to_value(root)
    except ValueError:
        root_value = None

    if root_value is not None:
        ranked = rank_candidates(store, root_value, quality)
        if ranked:
            entry, score = ranked[0]
            logger.info(f"No voicings for {root}_{quality} - using {entry.key} (score {score})")
            return FallbackMatch(list(entry.voicings), "similar", entry.key, score)

    match = generic_voicing(root, quality, shapes)
    logger.info(f"No similar chord for {root}_{quality} - using {match.source} shape")
    return match
