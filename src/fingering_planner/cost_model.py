"""Cost Model — initial and transition costs for piano fingering.

Weights are fixed constants tuned offline against annotated repertoire;
only the difficulty profile changes at run time. Every method is pure and
returns a :class:`CostResult` (cost delta plus human-readable reasons).
Negative costs are rewards.

Methods:
    initial_cost            – first note of a hand's sequence
    transition_cost         – note-to-note cost in position mode
    scale_transition_cost   – note-to-note cost in scale mode
    natural_span            – comfortable semitone span for a finger pair
    transition_bonus        – reward from empirical finger-pair frequencies
    apply_difficulty        – scale a transition cost by player level
"""

from __future__ import annotations

import numpy as np

from .config import Difficulty
from .hand_position import expected_finger
from .models import CostResult, Hand, HandPosition, Note, PatternType


# ── Lookup tables (indexed [finger_a - 1, finger_b - 1]) ───────
def _symmetric(pairs: dict[tuple[int, int], int]) -> np.ndarray:
    table = np.zeros((5, 5), dtype=np.int64)
    for (a, b), value in pairs.items():
        table[a - 1, b - 1] = value
        table[b - 1, a - 1] = value
    return table


# Comfortable span in semitones; same finger → 0.
NATURAL_SPANS: np.ndarray = _symmetric({
    (1, 2): 2, (2, 3): 2, (3, 4): 1, (4, 5): 2,
    (1, 3): 4, (2, 4): 3, (3, 5): 3,
    (1, 4): 5, (2, 5): 5,
    (1, 5): 8,
})

# How often each ordered finger transition occurs in annotated music.
TRANSITION_FREQUENCIES: np.ndarray = np.array(
    [
        # to: 1    2    3    4    5
        [0, 900, 451, 301, 356],  # from 1
        [936, 0, 405, 150, 334],  # from 2
        [489, 528, 0, 420, 271],  # from 3
        [286, 149, 409, 0, 590],  # from 4
        [286, 248, 448, 561, 0],  # from 5
    ],
    dtype=np.int64,
)
TRANSITION_FREQUENCIES.setflags(write=False)
NATURAL_SPANS.setflags(write=False)

_BLACK_PITCH_CLASSES: frozenset[int] = frozenset({1, 3, 6, 8, 10})

# Standard scale fingering: 1-2-3-1-2-3-4-5 and its reverse 5-4-3-2-1-3-2-1.
_SCALE_OUTWARD: frozenset[tuple[int, int]] = frozenset(
    {(1, 2), (2, 3), (3, 1), (3, 4), (4, 5)}
)
_SCALE_INWARD: frozenset[tuple[int, int]] = frozenset(
    {(5, 4), (4, 3), (3, 2), (2, 1), (1, 3), (1, 2)}
)
_SCALE_CROSSINGS: tuple[tuple[int, int, float, str], ...] = (
    (3, 1, -20.0, "Thumb under (3->1)"),
    (4, 1, -15.0, "Thumb under (4->1)"),
    (1, 3, -20.0, "Finger over (1->3)"),
    (1, 4, -10.0, "Finger over (1->4)"),
)

_BEGINNER_HEAVY_CONTEXTS: frozenset[PatternType] = frozenset(
    {PatternType.POLYPHONIC, PatternType.ORNAMENTED}
)


def is_black_key(pitch: int) -> bool:
    return pitch % 12 in _BLACK_PITCH_CLASSES


class FingeringCostModel:
    """Rule-based cost model for evaluating finger assignments.

    Args:
        difficulty: Player level; scales every position-mode transition.
    """

    def __init__(self, difficulty: Difficulty | str = Difficulty.INTERMEDIATE) -> None:
        self.difficulty: Difficulty = Difficulty.parse(difficulty)

    # ── Table lookups ─────────────────────────────────────────

    @staticmethod
    def natural_span(finger_a: int, finger_b: int) -> int:
        """Comfortable semitone span between two fingers (order-independent)."""
        return int(NATURAL_SPANS[finger_a - 1, finger_b - 1])

    @staticmethod
    def transition_bonus(finger_a: int, finger_b: int) -> float:
        """Reward for finger pairs that are common in real fingerings.

        Only a tie-breaker: at most -10, and 0 for pairs with no entry.
        """
        frequency = int(TRANSITION_FREQUENCIES[finger_a - 1, finger_b - 1])
        if frequency > 500:
            return -10.0
        if frequency > 300:
            return -6.0
        if frequency > 100:
            return -3.0
        return 0.0

    # ── Initial note ──────────────────────────────────────────

    def initial_cost(
        self, finger: int, note: Note, hand: Hand, position: HandPosition
    ) -> CostResult:
        """Cost of starting a hand's sequence on *finger*.

        Rewards the finger the hand position expects for the first pitch and
        discourages thumb or pinky on a black key. Not difficulty-scaled.

        Args:
            finger: Candidate finger (1–5).
            note: First note of the sequence.
            hand: Playing hand.
            position: Hand position computed for *note*.

        Returns:
            Cost and reasons.
        """
        cost = 0.0
        reasons: list[str] = []

        expected = expected_finger(note.pitch, position.anchor_pitch, hand)
        if finger == expected:
            cost -= 30
            reasons.append("Matches hand position")
        else:
            diff = abs(finger - expected)
            cost += diff * 15
            reasons.append(f"{diff} fingers from expected")

        if is_black_key(note.pitch):
            if finger in (1, 5):
                cost += 20
                reasons.append("Short finger on black key")
            else:
                cost -= 5
                reasons.append("Long finger on black key")

        return CostResult(cost, tuple(reasons))

    # ── Transitions ───────────────────────────────────────────

    def transition_cost(
        self,
        prev_note: Note,
        prev_finger: int,
        curr_note: Note,
        curr_finger: int,
        pattern: PatternType,
        hand: Hand,
        position: HandPosition,
    ) -> CostResult:
        """Cost of moving from one finger assignment to the next.

        Scale passages (by analysis or by upstream tag) are handed to
        :meth:`scale_transition_cost`. Everything else is scored against
        the five-finger position, natural finger order, span limits, finger
        repetition, empirical pair frequencies and black-key comfort, then
        scaled by the difficulty profile.

        Args:
            prev_note: Previous note of the same hand.
            prev_finger: Finger on *prev_note*.
            curr_note: Current note.
            curr_finger: Candidate finger on *curr_note*.
            pattern: Pattern context of *curr_note*.
            hand: Playing hand.
            position: Hand position computed for *curr_note*.

        Returns:
            Cost and reasons.
        """
        interval = curr_note.pitch - prev_note.pitch
        abs_interval = abs(interval)
        ascending = interval > 0

        if position.is_scale or pattern is PatternType.SCALE:
            return self.scale_transition_cost(
                prev_finger, curr_finger, ascending, hand, abs_interval
            )

        cost = 0.0
        reasons: list[str] = []

        # Five-finger position
        expected = expected_finger(curr_note.pitch, position.anchor_pitch, hand)
        if position.in_position and curr_finger == expected:
            cost -= 40
            reasons.append("Correct finger for position")
        elif position.in_position:
            cost += abs(curr_finger - expected) * 20
            reasons.append("Wrong finger for position")

        # Fingers should follow pitch direction
        finger_diff = curr_finger - prev_finger
        if hand == Hand.LH:
            finger_diff = -finger_diff
        if ascending and finger_diff > 0:
            cost -= 15
            reasons.append(f"Natural {Hand(hand).value} ascending")
        elif interval < 0 and finger_diff < 0:
            cost -= 15
            reasons.append(f"Natural {Hand(hand).value} descending")
        elif interval != 0 and finger_diff != 0 and 1 not in (prev_finger, curr_finger):
            cost += 50
            reasons.append("Unnatural finger crossing")

        # Span
        over_stretch = abs_interval - self.natural_span(prev_finger, curr_finger)
        if over_stretch > 4:
            cost += over_stretch * 12
            reasons.append("Over-stretch")
        elif over_stretch > 2:
            cost += over_stretch * 6

        if curr_finger == prev_finger and interval != 0:
            cost += abs_interval * 8
            reasons.append("Same finger leap")

        # Repeated note
        if interval == 0 and curr_finger == prev_finger:
            cost += 30
            reasons.append("Same finger on repeated note")
        elif interval == 0:
            cost -= 10
            reasons.append("Good finger change on repeat")

        cost += self.transition_bonus(prev_finger, curr_finger)

        if is_black_key(curr_note.pitch):
            if curr_finger in (1, 5):
                cost += 25
                reasons.append("Short finger on black key")
            else:
                cost -= 5

        if pattern is PatternType.SCALE:
            thumb_under_dir = ascending if hand == Hand.RH else not ascending
            if thumb_under_dir and (prev_finger, curr_finger) == (3, 1):
                cost -= 20
                reasons.append("Good thumb under (3->1)")
            elif not thumb_under_dir and (prev_finger, curr_finger) == (1, 3):
                cost -= 20
                reasons.append("Good finger over (1->3)")

        return CostResult(self.apply_difficulty(cost, pattern), tuple(reasons))

    def scale_transition_cost(
        self,
        prev_finger: int,
        curr_finger: int,
        ascending: bool,
        hand: Hand,
        interval: int,
    ) -> CostResult:
        """Cost of a transition inside a scale run.

        Right hand ascending and left hand descending follow 1-2-3-1-2-3-4-5;
        the opposite directions follow 5-4-3-2-1-3-2-1. Transitions outside
        the template may still earn a thumb-crossing bonus.

        Args:
            prev_finger: Finger on the previous note.
            curr_finger: Candidate finger on the current note.
            ascending: Whether pitch rises (a repeated pitch counts as not).
            hand: Playing hand.
            interval: Absolute interval in semitones.

        Returns:
            Cost and reasons (never difficulty-scaled).
        """
        cost = 0.0
        reasons: list[str] = []

        outward = ascending if hand == Hand.RH else not ascending
        template = _SCALE_OUTWARD if outward else _SCALE_INWARD
        pair = (prev_finger, curr_finger)

        if pair in template:
            cost -= 30
            reasons.append("Standard scale fingering")
        else:
            for from_finger, to_finger, bonus, label in _SCALE_CROSSINGS:
                if pair == (from_finger, to_finger):
                    cost += bonus
                    reasons.append(label)
                    break
            else:
                cost += 20
                reasons.append("Non-standard scale transition")

        if curr_finger == prev_finger:
            cost += 40
            reasons.append("Same finger in scale")

        span = self.natural_span(prev_finger, curr_finger)
        if interval > span + 2:
            cost += (interval - span) * 10
            reasons.append("Over-stretch in scale")

        return CostResult(cost, tuple(reasons))

    # ── Difficulty ────────────────────────────────────────────

    def apply_difficulty(self, cost: float, pattern: PatternType) -> float:
        """Scale a transition cost by the player level.

        Beginners weigh everything up (more so in polyphonic or ornamented
        passages); advanced players weigh everything down.
        """
        if self.difficulty is Difficulty.BEGINNER:
            if pattern in _BEGINNER_HEAVY_CONTEXTS:
                return cost * 1.3
            return cost * 1.1
        if self.difficulty is Difficulty.ADVANCED:
            return cost * 0.9
        return cost
