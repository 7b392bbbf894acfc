"""
Chord Voicing Store

An immutable ordered map from (root, quality) to a list of voicings.

Entry order is part of the contract: it is the order the table was written
in, and the similarity fallback uses it to break ties between candidates
with equal scores.
"""

import logging
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple

from fretboard.config import get_config, table_path
from fretboard.data.loader import load_chord_entries
from fretboard.data.schema import Voicing
from fretboard.rules.qualities import CANONICAL_QUALITIES
from fretboard.rules.theory import is_note, note_to_value

logger = logging.getLogger(__name__)


class StoreEntry(NamedTuple):
    root: str
    quality: str
    voicings: Tuple[Voicing, ...]

    @property
    def key(self) -> str:
        return f"{self.root}_{self.quality}"

    @property
    def root_value(self) -> int:
        return note_to_value(self.root)


class VoicingStore:
    """
    Read-only chord table with O(1) exact lookup.

    Raises ValueError while being built if an entry has no voicings, uses a
    root that is not a note, uses a quality outside the canonical set, or
    repeats a key.
    """

    def __init__(self, entries: Iterable[Tuple[str, str, Sequence[Voicing]]]):
        built = []
        index = {}
        for root, quality, voicings in entries:
            if not is_note(root):
                raise ValueError(f"Invalid root '{root}' in voicing table")
            if quality not in CANONICAL_QUALITIES:
                raise ValueError(f"Unknown quality '{quality}' for root '{root}' in voicing table")
            if not voicings:
                raise ValueError(f"Entry '{root}_{quality}' has no voicings")
            if (root, quality) in index:
                raise ValueError(f"Duplicate entry '{root}_{quality}' in voicing table")

            index[(root, quality)] = len(built)
            built.append(StoreEntry(root, quality, tuple(voicings)))

        self._entries = tuple(built)
        self._index = MappingProxyType(index)
        self._roots = frozenset(entry.root for entry in built)

    # ---------------------------
    # Container protocol
    # ---------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[StoreEntry]:
        return iter(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._index

    def __repr__(self) -> str:
        return f"VoicingStore({len(self)} entries)"

    @property
    def entries(self) -> Tuple[StoreEntry, ...]:
        return self._entries

    # ---------------------------
    # Lookup
    # ---------------------------

    def resolve_exact(self, root: str, quality: str) -> Optional[List[Voicing]]:
        """Stored voicings for (root, quality) in table order, or None on a miss."""
        position = self._index.get((root, quality))
        if position is None:
            return None
        return list(self._entries[position].voicings)

    def position_of(self, root: str, quality: str) -> Optional[int]:
        return self._index.get((root, quality))

    def has_root(self, root: str) -> bool:
        """True if at least one entry uses this exact root spelling."""
        return root in self._roots

    def qualities_for(self, root: str) -> List[str]:
        return [entry.quality for entry in self._entries if entry.root == root]

    def root_values(self) -> List[int]:
        """Pitch class of every entry's root, in table order."""
        return [entry.root_value for entry in self._entries]


@lru_cache(maxsize=1)
def get_voicing_store() -> VoicingStore:
    """The process-wide store built from the packaged chord table."""
    path = table_path(get_config(), "chord_table")
    store = VoicingStore(load_chord_entries(path))
    logger.debug(f"Voicing store ready: {len(store)} entries")
    return store
