"""
Schema definitions for the fretboard resolver.

This module defines the Pydantic models for everything the engine reads from
its tables and everything it hands back to callers. Table rows are validated
once at load time; resolution results are plain frozen records.

Author: Rohan Rajendra Dhanawade
"""

from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# VALID OPTIONS
# =============================================================================

STRING_COUNT = 6

MUTED = "x"

# Values accepted in a frets list besides integers
MUTED_SPELLINGS = ["x", "X"]


FretSpec = Union[int, Literal["x"]]


# =============================================================================
# CHORD VOICINGS
# =============================================================================

class Voicing(BaseModel):
    """
    One concrete way to finger a chord on all six strings.

    Attributes:
        frets: Six entries, low string first. "x" marks a muted string.
        first_fret: Barre position. When above 1, numeric frets are
            relative (1 = at the barre); otherwise they are absolute.
        label: Human-readable position name ("Open", "Barre 8th", ...)

    Example:
        >>> Voicing(frets=["x", 3, 2, 0, 1, 0], label="Open")
        >>> Voicing(frets=[1, 3, 3, 2, 1, 1], first_fret=8, label="Barre 8th")
    """

    model_config = ConfigDict(frozen=True)

    frets: Tuple[FretSpec, ...] = Field(
        ...,
        description="Fret per string from the low string up, 'x' for muted",
        examples=[["x", 3, 2, 0, 1, 0]]
    )

    first_fret: Optional[int] = Field(
        default=None,
        ge=0,
        description="Barre position; frets are relative when this is above 1",
        examples=[8, None]
    )

    label: str = Field(
        default="",
        description="Position name shown with the diagram",
        examples=["Open", "Barre 3rd"]
    )

    @field_validator("frets", mode="before")
    @classmethod
    def normalize_muted(cls, v):
        """Accept 'X' for muted strings and store it as 'x'."""
        if isinstance(v, (list, tuple)):
            return tuple(MUTED if f in MUTED_SPELLINGS else f for f in v)
        return v

    @field_validator("frets")
    @classmethod
    def validate_frets(cls, v: Tuple[FretSpec, ...]) -> Tuple[FretSpec, ...]:
        """Ensure exactly one non-negative entry per string."""
        if len(v) != STRING_COUNT:
            raise ValueError(
                f"A voicing needs exactly {STRING_COUNT} frets, got {len(v)}: {list(v)}"
            )
        negative = [f for f in v if f != MUTED and f < 0]
        if negative:
            raise ValueError(f"Fret numbers cannot be negative: {list(v)}")
        return v

    @property
    def is_barre(self) -> bool:
        return self.first_fret is not None and self.first_fret > 1

    def absolute_frets(self) -> List[Optional[int]]:
        """Absolute fret per string, None for muted strings."""
        offset = self.first_fret - 1 if self.is_barre else 0
        return [None if f == MUTED else f + offset for f in self.frets]

    def numeric_frets(self) -> List[int]:
        return [f for f in self.frets if f != MUTED]


# =============================================================================
# SCALE PATTERNS
# =============================================================================

class ScalePattern(BaseModel):
    """
    Interval set plus canonical per-position fingerings for one scale.

    Each fingering holds six ordered fret lists, low string first. Frets are
    absolute and authored at whatever root the position was drawn in.
    A table row may leave positions out; the scale store then generates them.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Library key, e.g. 'dorian'")

    intervals: Tuple[int, ...] = Field(
        ...,
        min_length=1,
        description="Semitone offsets from the scale root",
        examples=[[0, 2, 3, 5, 7, 9, 10]]
    )

    positions: Tuple[Tuple[Tuple[int, ...], ...], ...] = Field(
        default=(),
        description="Fingerings, one per position box; empty to generate them"
    )

    @field_validator("positions")
    @classmethod
    def validate_positions(cls, v):
        """Ensure every position has six non-empty string lists."""
        for index, fingering in enumerate(v):
            if len(fingering) != STRING_COUNT:
                raise ValueError(
                    f"Position {index + 1} needs {STRING_COUNT} strings, got {len(fingering)}"
                )
            empty = [s for s, frets in enumerate(fingering) if not frets]
            if empty:
                raise ValueError(f"Position {index + 1} has empty strings: {empty}")
        return v

    @property
    def position_count(self) -> int:
        return len(self.positions)


# =============================================================================
# RESOLUTION RESULTS
# =============================================================================

class ChordResolution(BaseModel):
    """
    Full result of resolving a chord name.

    `voicings` is never empty. `source` says which tier produced them and
    `warnings` collects every repair made on the way.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The chord name as requested")
    root: str = Field(..., description="Display spelling of the root")
    quality: str = Field(..., description="Canonical chord quality")
    bass: Optional[str] = Field(default=None, description="Slash bass, if any")
    voicings: List[Voicing] = Field(..., min_length=1)
    source: Literal["exact", "similar", "generic", "template", "sentinel"] = "exact"
    matched_key: Optional[str] = Field(
        default=None,
        description="Store key the voicings were taken from"
    )
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_substitute(self) -> bool:
        return self.source != "exact"


class ScaleResolution(BaseModel):
    """Full result of resolving a scale fingering."""

    model_config = ConfigDict(frozen=True)

    descriptor: str
    root: str
    scale_key: str
    position: int = Field(..., ge=0, description="Position index actually used")
    position_count: int = Field(..., ge=1)
    fingering: List[List[int]]
    semitones: int = Field(..., description="Total shift applied, octave correction included")
    lossy: bool = False
    generated: bool = Field(default=False, description="Built from the intervals, not a stored box")
    warnings: List[str] = Field(default_factory=list)
