"""Models — immutable records exchanged with the planner.

The upstream segmentation layer produces :class:`Note` and
:class:`PatternSegment` values; the planner returns a
:class:`FingeringSolution`. Everything here is frozen so results can be
shared freely between hands, windows and callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


# ── Domain constants ──────────────────────────────────────────
FINGERS: tuple[int, ...] = (1, 2, 3, 4, 5)
DEFAULT_FINGER: int = 3


class Hand(str, Enum):
    """Which hand plays a note."""

    RH = "RH"
    LH = "LH"


class PatternType(str, Enum):
    """Region classification supplied by the upstream layer."""

    SCALE = "SCALE"
    ARPEGGIO = "ARPEGGIO"
    CHORDAL = "CHORDAL"
    POLYPHONIC = "POLYPHONIC"
    ORNAMENTED = "ORNAMENTED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | PatternType) -> PatternType:
        """Map a raw tag onto a member, falling back to ``UNKNOWN``."""
        if isinstance(value, PatternType):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Note:
    """A single note in performance order."""

    pitch: int
    hand: Hand
    measure_number: int = 0


@dataclass(frozen=True)
class PatternSegment:
    """A classified region, bounded by measure numbers or note indices."""

    start_index: int
    end_index: int
    pattern_type: PatternType = PatternType.UNKNOWN

    def contains(self, value: int) -> bool:
        return self.start_index <= value <= self.end_index


@dataclass(frozen=True)
class HandPosition:
    """Derived placement of the hand for one note."""

    anchor_pitch: int
    in_position: bool
    is_scale: bool


@dataclass(frozen=True)
class CostResult:
    """A cost delta together with the labels that produced it."""

    cost: float
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class FingeringState:
    """One step of the decision trail recovered by backtracking."""

    note_index: int
    finger: int
    hand: Hand
    pitch: int
    anchor_pitch: int
    cost: float
    reasons: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "note_index": self.note_index,
            "finger": self.finger,
            "hand": self.hand.value,
            "pitch": self.pitch,
            "anchor_pitch": self.anchor_pitch,
            "cost": self.cost,
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True)
class FingeringSolution:
    """Planner output aligned 1:1 with the input notes."""

    fingering: tuple[int, ...] = ()
    total_cost: float = 0.0
    path: tuple[FingeringState, ...] = ()
    explanations: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> FingeringSolution:
        return cls()
