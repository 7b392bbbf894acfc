"""
Data Loader - Reading the Pattern Tables

Reads the YAML tables shipped in fretboard/data/ and turns every row into a
validated Pydantic model. Structural problems (wrong string count, a row that
is not a mapping, an empty voicing list) raise here, at load time, so they
never reach resolution.

Usage:
    from fretboard.data.loader import load_chord_entries

    entries = load_chord_entries("fretboard/data/chord_voicings.yaml")
    root, quality, voicings = entries[0]

Author: Rohan Rajendra Dhanawade
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from fretboard.data.schema import ScalePattern, Voicing

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

ChordEntry = Tuple[str, str, List[Voicing]]


# =============================================================================
# RAW YAML
# =============================================================================

def read_table(path: PathLike) -> Dict[str, Any]:
    """
    Load a YAML table and check that it is a mapping.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        table = yaml.safe_load(f)

    if table is None:
        return {}
    if not isinstance(table, dict):
        raise ValueError(f"{path.name}: expected a mapping at the top level, got {type(table).__name__}")
    return table


# =============================================================================
# CHORD TABLES
# =============================================================================

def parse_chord_table(table: Dict[Any, Any]) -> List[ChordEntry]:
    """
    Turn a root -> quality -> [voicing rows] mapping into ordered entries.

    Keys are coerced to str so that unquoted YAML keys like 7 or 9 still work.
    """
    entries = []
    for root, qualities in table.items():
        if not isinstance(qualities, dict):
            raise ValueError(f"Root '{root}': expected a mapping of qualities")
        for quality, rows in qualities.items():
            if not isinstance(rows, list):
                raise ValueError(f"'{root}_{quality}': expected a list of voicings")
            voicings = [Voicing(**row) for row in rows]
            entries.append((str(root), str(quality), voicings))
    return entries


def load_chord_entries(path: PathLike) -> List[ChordEntry]:
    entries = parse_chord_table(read_table(path))
    logger.debug(f"Loaded {len(entries)} chord entries from {Path(path).name}")
    return entries


def parse_generic_shapes(table: Dict[Any, Any]) -> Dict[str, Voicing]:
    """One movable shape per quality."""
    return {str(quality): Voicing(**row) for quality, row in table.items()}


def load_generic_shapes(path: PathLike) -> Dict[str, Voicing]:
    shapes = parse_generic_shapes(read_table(path))
    logger.debug(f"Loaded {len(shapes)} generic shapes from {Path(path).name}")
    return shapes


# =============================================================================
# SCALE TABLES
# =============================================================================

def parse_scale_table(table: Dict[Any, Any]) -> Dict[str, ScalePattern]:
    """Scale key -> ScalePattern, keeping table order."""
    patterns = {}
    for key, row in table.items():
        if not isinstance(row, dict):
            raise ValueError(f"Scale '{key}': expected a mapping with intervals and positions")
        patterns[str(key)] = ScalePattern(key=str(key), **row)
    return patterns


def load_scale_patterns(path: PathLike) -> Dict[str, ScalePattern]:
    patterns = parse_scale_table(read_table(path))
    logger.debug(f"Loaded {len(patterns)} scale patterns from {Path(path).name}")
    return patterns
