"""Hand Position — per-note scale / five-finger-position analysis.

For one hand's note sequence, decides whether the passage is played as a
scale (continuous thumb crossings, no fixed position) or as a series of
stable five-finger positions, and computes the anchor pitch each note's
expected finger is measured from:
    - anchor_pitch : pivot of the current position (thumb side)
    - in_position  : note belongs to a five-finger position
    - is_scale     : whole sequence is a stepwise scale run

All computations are deterministic and depend only on pitches.
"""

from __future__ import annotations

from typing import Sequence

from .models import Hand, HandPosition, Note


# ── Analysis thresholds ────────────────────────────────────────
_MIN_SCALE_NOTES: int = 8
_STEPWISE_RATIO: float = 0.8
_DIRECTION_RATIO: float = 0.6
_POSITION_SPAN: int = 7  # a fifth; widest range kept under one hand position


def expected_finger(pitch: int, anchor_pitch: int, hand: Hand) -> int:
    """Finger that naturally covers *pitch* in a position anchored at *anchor_pitch*.

    The right-hand thumb sits on the anchor and higher pitches map to higher
    fingers; the left hand is mirrored.

    Args:
        pitch: Note pitch (semitones).
        anchor_pitch: Position pivot (semitones).
        hand: Playing hand.

    Returns:
        Finger number 1–5.
    """
    offset = pitch - anchor_pitch
    if hand == Hand.LH:
        offset = -offset

    if offset <= 0:
        return 1
    if offset <= 2:
        return 2
    if offset <= 4:
        return 3
    if offset <= 5:
        return 4
    return 5


def detect_scale_pattern(notes: Sequence[Note]) -> bool:
    """Return ``True`` when *notes* form a stepwise run in one direction.

    Needs at least eight notes, more than 80 % stepwise intervals (one or
    two semitones), more than 60 % of stepwise intervals continuing the
    direction of the previous one, and a range wider than a fifth.
    """
    n = len(notes)
    if n < _MIN_SCALE_NOTES:
        return False

    stepwise_count = 0
    same_direction = 0
    last_direction = 0

    for prev, curr in zip(notes, notes[1:]):
        interval = curr.pitch - prev.pitch
        if abs(interval) in (1, 2):
            stepwise_count += 1
            direction = 1 if interval > 0 else -1
            if direction == last_direction:
                same_direction += 1
            last_direction = direction

    stepwise_ratio = stepwise_count / (n - 1)
    direction_ratio = same_direction / (n - 2)
    pitches = [note.pitch for note in notes]
    pitch_range = max(pitches) - min(pitches)

    return (
        stepwise_ratio > _STEPWISE_RATIO
        and direction_ratio > _DIRECTION_RATIO
        and pitch_range > _POSITION_SPAN
    )


def analyze_hand_positions(notes: Sequence[Note], hand: Hand) -> list[HandPosition]:
    """Compute one :class:`HandPosition` per note of a single hand.

    Scale runs get no fixed position: every note is anchored at the first
    pitch and flagged ``is_scale``. Otherwise the notes are grouped greedily
    into windows spanning at most a fifth; each window is anchored at its
    lowest pitch (right hand) or highest pitch (left hand).

    Args:
        notes: One hand's notes in performance order.
        hand: The hand playing them.

    Returns:
        List of positions, same length as *notes*.
    """
    if not notes:
        return []

    if detect_scale_pattern(notes):
        scale_position = HandPosition(
            anchor_pitch=notes[0].pitch, in_position=False, is_scale=True
        )
        return [scale_position] * len(notes)

    positions: list[HandPosition] = []
    segment_start = 0
    min_pitch = max_pitch = notes[0].pitch

    def close_segment(end: int) -> None:
        anchor = min_pitch if hand == Hand.RH else max_pitch
        position = HandPosition(anchor_pitch=anchor, in_position=True, is_scale=False)
        positions.extend([position] * (end - segment_start))

    for i, note in enumerate(notes):
        new_min = min(min_pitch, note.pitch)
        new_max = max(max_pitch, note.pitch)
        if new_max - new_min > _POSITION_SPAN:
            close_segment(i)
            segment_start = i
            min_pitch = max_pitch = note.pitch
        else:
            min_pitch, max_pitch = new_min, new_max

    close_segment(len(notes))
    return positions
