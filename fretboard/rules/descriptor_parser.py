"""
Descriptor Parser - Chord and Scale Names to Structured Parts

This module splits raw descriptor strings into their parts with a small
explicit tokenizer instead of regular expressions:

    "Cmaj7/E"        → root C, quality maj7, bass E
    "F#m7b5"         → root F#, quality min7b5
    "D dorian scale" → root D, descriptor "dorian"

Parsing never fails: a missing or unreadable root becomes C and an unknown
quality becomes major. Every repair is recorded in the result's warnings.

Author: Rohan Rajendra Dhanawade
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from fretboard.rules.enharmonics import DEFAULT_ROOT, resolve_root
from fretboard.rules.qualities import (
    DEFAULT_QUALITY, quality_suffix, resolve_chord_quality,
)
from fretboard.rules.scale_modes import strip_filler_words
from fretboard.rules.theory import is_note, split_note
from fretboard.rules.voicing_store import VoicingStore

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class ParsedChord:
    """
    Structured view of a chord name.

    Attributes:
        name: The original string
        root: Display spelling of the root ("Db", "F#", ...)
        quality: Canonical quality ("min7", "dim7", ...)
        bass: Display spelling of the slash bass, if one was given
        quality_text: The suffix exactly as written
        warnings: Repairs made while parsing
    """
    name: str
    root: str = DEFAULT_ROOT
    quality: str = DEFAULT_QUALITY
    bass: Optional[str] = None
    quality_text: str = ""
    warnings: List[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return f"{self.root}_{self.quality}"

    @property
    def symbol(self) -> str:
        """Chord symbol rebuilt from the canonical parts, e.g. "Dbm7b5/E"."""
        symbol = self.root + quality_suffix(self.quality)
        if self.bass:
            symbol += f"/{self.bass}"
        return symbol

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "root": self.root,
            "quality": self.quality,
            "bass": self.bass,
            "warnings": list(self.warnings),
        }

    def __str__(self) -> str:
        parts = [f"root={self.root}", f"quality={self.quality}"]
        if self.bass:
            parts.append(f"bass={self.bass}")
        return f"ParsedChord({', '.join(parts)})"


@dataclass
class ParsedScale:
    """
    Structured view of a scale descriptor.

    `root` is None when the text does not start with a note; the caller
    decides the default. `descriptor` has filler words removed.
    """
    text: str
    root: Optional[str] = None
    descriptor: str = ""
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "text": self.text,
            "root": self.root,
            "descriptor": self.descriptor,
            "warnings": list(self.warnings),
        }

    def __str__(self) -> str:
        return f"ParsedScale(root={self.root}, descriptor='{self.descriptor}')"


# =============================================================================
# TOKENIZERS
# =============================================================================

def tokenize_chord(name: str) -> Tuple[Optional[str], str, Optional[str]]:
    """
    Split a chord name into (root token, suffix, bass token).

    The text after the last '/' counts as a bass note only when it is exactly
    one note name, so "C6/9" and "Cm/maj7" keep the slash in their suffix.

    Examples:
        tokenize_chord("Cmaj7/E")  → ("C", "maj7", "E")
        tokenize_chord("C6/9")     → ("C", "6/9", None)
        tokenize_chord("xyz")      → (None, "xyz", None)
    """
    root, rest = split_note(name.strip())

    bass = None
    slash = rest.rfind("/")
    if slash != -1 and is_note(rest[slash + 1:]):
        bass = rest[slash + 1:].strip()
        rest = rest[:slash]

    return root, rest.strip(), bass


def tokenize_scale(text: str) -> Tuple[Optional[str], str]:
    """
    Split a scale descriptor into (root token, remaining words).

    The first word is taken as the root only when it is exactly a note name.
    """
    words = text.split()
    if words and is_note(words[0]):
        return words[0], " ".join(words[1:])
    return None, " ".join(words)


# =============================================================================
# PARSERS
# =============================================================================

def parse_chord_name(name: str, store: Optional[VoicingStore] = None) -> ParsedChord:
    """Parse a chord name into canonical root, quality and optional bass."""
    parsed = ParsedChord(name=name)
    root_token, suffix, bass_token = tokenize_chord(name)
    parsed.quality_text = suffix

    if root_token is None:
        message = f"No root note in '{name}' - using {DEFAULT_ROOT} {DEFAULT_QUALITY}"
        logger.warning(message)
        parsed.warnings.append(message)
        return parsed

    parsed.root, _ = resolve_root(root_token, store)

    quality, recognized = resolve_chord_quality(suffix)
    parsed.quality = quality
    if not recognized:
        message = f"Unrecognized chord quality '{suffix}' in '{name}' - using {DEFAULT_QUALITY}"
        logger.warning(message)
        parsed.warnings.append(message)

    if bass_token is not None:
        parsed.bass, _ = resolve_root(bass_token, store)

    return parsed


def parse_scale_descriptor(text: str) -> ParsedScale:
    """Split off a leading root note and strip the words "scale"/"mode"."""
    parsed = ParsedScale(text=text)
    root_token, remainder = tokenize_scale(text)

    if root_token is not None:
        note, _ = split_note(root_token)
        parsed.root = note

    parsed.descriptor = strip_filler_words(remainder)
    return parsed
