"""Solver — dynamic-programming search for the optimal fingering of one hand.

State:  ``(note_index, finger)``
Transition: :meth:`FingeringCostModel.transition_cost` between every finger
            on note ``i - 1`` and every finger on note ``i``.
Output: the minimum-cost finger path with its per-note reasons.

Design choices:
    - No randomness; ties go to the lowest finger number.
    - The lattice is a dense ``(n, 5)`` array; absent cells hold ``inf``
      and parent links are plain finger numbers.
    - Edges whose transition cost alone exceeds the prune threshold are
      treated as unplayable. If that empties a whole row, the row is
      recomputed without pruning so the path stays connected.
    - Long sequences are planned in overlapping windows (see
      :func:`chunked_solve`).
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from .config import DEFAULT_CONFIG, PlannerConfig
from .cost_model import FingeringCostModel
from .hand_position import analyze_hand_positions
from .models import (
    DEFAULT_FINGER,
    FINGERS,
    FingeringSolution,
    FingeringState,
    Hand,
    HandPosition,
    Note,
    PatternSegment,
    PatternType,
)

logger = logging.getLogger(__name__)


def pattern_context(
    notes: Sequence[Note], index: int, patterns: Sequence[PatternSegment]
) -> PatternType:
    """Pattern type of ``notes[index]``.

    Segments are matched first against the note's measure number, then
    against *index* itself; the first containing segment wins.
    """
    measure = notes[index].measure_number
    for segment in patterns:
        if segment.contains(measure):
            return segment.pattern_type
    for segment in patterns:
        if segment.contains(index):
            return segment.pattern_type
    return PatternType.UNKNOWN


class _Lattice:
    """Dense DP tables for one sequence."""

    def __init__(self, n: int) -> None:
        self.costs = np.full((n, len(FINGERS)), np.inf)
        self.parents = np.full((n, len(FINGERS)), -1, dtype=np.int64)
        self.reasons: list[list[tuple[str, ...]]] = [
            [() for _ in FINGERS] for _ in range(n)
        ]

    def present(self, index: int, finger: int) -> bool:
        return bool(np.isfinite(self.costs[index, finger - 1]))

    def set(
        self, index: int, finger: int, cost: float, parent: int, reasons: tuple[str, ...]
    ) -> None:
        self.costs[index, finger - 1] = cost
        self.parents[index, finger - 1] = parent
        self.reasons[index][finger - 1] = reasons


def solve(
    notes: Sequence[Note],
    patterns: Sequence[PatternSegment],
    hand: Hand,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> FingeringSolution:
    """Find the optimal fingering for one hand's notes via DP.

    Args:
        notes: The hand's notes in performance order.
        patterns: Pattern segments; indices are relative to *notes*.
        hand: The hand playing *notes*.
        config: Planner settings (difficulty, prune threshold).

    Returns:
        A :class:`FingeringSolution` with one finger, explanation and path
        entry per note. ``total_cost`` is the minimum cumulative cost at
        the last note.
    """
    if not notes:
        return FingeringSolution.empty()
    hand = Hand(hand)

    cost_model = FingeringCostModel(config.difficulty)
    positions = analyze_hand_positions(notes, hand)
    n = len(notes)
    lattice = _Lattice(n)

    # ── Initialise first note ─────────────────────────────────
    for finger in FINGERS:
        initial = cost_model.initial_cost(finger, notes[0], hand, positions[0])
        lattice.set(0, finger, initial.cost, -1, initial.reasons)

    # ── Forward pass ──────────────────────────────────────────
    for i in range(1, n):
        context = pattern_context(notes, i, patterns)
        _fill_row(lattice, cost_model, notes, positions, i, context, hand, config.prune_threshold)

        if not np.isfinite(lattice.costs[i]).any():
            logger.warning(
                "%s note %d (pitch %d): every transition exceeds %.0f; "
                "recomputing without pruning",
                hand.value,
                i,
                notes[i].pitch,
                config.prune_threshold,
            )
            _fill_row(lattice, cost_model, notes, positions, i, context, hand, math.inf)

    return _backtrack(lattice, notes, positions, hand)


def _fill_row(
    lattice: _Lattice,
    cost_model: FingeringCostModel,
    notes: Sequence[Note],
    positions: Sequence[HandPosition],
    i: int,
    context: PatternType,
    hand: Hand,
    prune_threshold: float,
) -> None:
    prev_note, curr_note = notes[i - 1], notes[i]
    for to_finger in FINGERS:
        best_cost = math.inf
        best_parent = -1
        best_reasons: tuple[str, ...] = ()

        for from_finger in FINGERS:
            if not lattice.present(i - 1, from_finger):
                continue

            trans = cost_model.transition_cost(
                prev_note, from_finger, curr_note, to_finger, context, hand, positions[i]
            )
            if trans.cost > prune_threshold:
                continue

            total = float(lattice.costs[i - 1, from_finger - 1]) + trans.cost
            if total < best_cost:
                best_cost = total
                best_parent = from_finger
                best_reasons = trans.reasons

        if best_cost < math.inf:
            lattice.set(i, to_finger, best_cost, best_parent, best_reasons)


def _backtrack(
    lattice: _Lattice,
    notes: Sequence[Note],
    positions: Sequence[HandPosition],
    hand: Hand,
) -> FingeringSolution:
    n = len(notes)
    last_row = lattice.costs[n - 1]

    if np.isfinite(last_row).any():
        finger = int(np.argmin(last_row)) + 1
        total_cost = float(last_row[finger - 1])
    else:
        finger = DEFAULT_FINGER
        total_cost = 0.0

    fingering: list[int] = [DEFAULT_FINGER] * n
    explanations: list[str] = [""] * n
    path: list[FingeringState] = []

    for i in range(n - 1, -1, -1):
        fingering[i] = finger
        present = lattice.present(i, finger)
        reasons = lattice.reasons[i][finger - 1] if present else ()
        explanations[i] = "; ".join(reasons)
        path.append(
            FingeringState(
                note_index=i,
                finger=finger,
                hand=hand,
                pitch=notes[i].pitch,
                anchor_pitch=positions[i].anchor_pitch,
                cost=float(lattice.costs[i, finger - 1]) if present else 0.0,
                reasons=reasons,
            )
        )
        if present:
            parent = int(lattice.parents[i, finger - 1])
            if parent > 0:
                finger = parent

    path.reverse()
    return FingeringSolution(
        fingering=tuple(fingering),
        total_cost=total_cost,
        path=tuple(path),
        explanations=tuple(explanations),
    )


def chunked_solve(
    notes: Sequence[Note],
    patterns: Sequence[PatternSegment],
    hand: Hand,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> FingeringSolution:
    """Plan a long sequence in overlapping windows.

    Each window of ``config.chunk_size`` notes is solved independently,
    starting ``chunk_size - chunk_overlap`` notes after the previous one.
    The first window is kept whole; later windows drop their overlapping
    head. The total is the sum of the window minima, so it approximates
    rather than bounds the single-pass optimum. No path is returned.
    """
    hand = Hand(hand)
    stride = config.chunk_size - config.chunk_overlap
    n = len(notes)

    fingering: list[int] = []
    explanations: list[str] = []
    total_cost = 0.0
    windows = 0

    for start in range(0, n, stride):
        end = min(start + config.chunk_size, n)
        window = solve(notes[start:end], patterns, hand, config)
        skip = 0 if start == 0 else config.chunk_overlap
        fingering.extend(window.fingering[skip:])
        explanations.extend(window.explanations[skip:])
        total_cost += window.total_cost
        windows += 1

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "%s: %d notes planned in %d windows (cost %.1f)",
            hand.value,
            n,
            windows,
            total_cost,
        )

    return FingeringSolution(
        fingering=tuple(fingering),
        total_cost=total_cost,
        path=(),
        explanations=tuple(explanations),
    )


def plan_hand_fingering(
    notes: Sequence[Note],
    patterns: Sequence[PatternSegment],
    hand: Hand,
    config: PlannerConfig = DEFAULT_CONFIG,
) -> FingeringSolution:
    """Plan one hand, switching to windows above ``config.chunk_threshold`` notes."""
    if not notes:
        return FingeringSolution.empty()
    hand = Hand(hand)
    if len(notes) > config.chunk_threshold:
        return chunked_solve(notes, patterns, hand, config)
    return solve(notes, patterns, hand, config)
