"""Planner — split a two-hand note stream, plan each hand, merge the results.

Each hand is optimised independently over its own notes; the per-hand
fingers and explanations are then written back into the original
performance order.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .config import DEFAULT_CONFIG, Difficulty, PlannerConfig
from .models import DEFAULT_FINGER, FingeringSolution, Hand, Note, PatternSegment
from .solver import plan_hand_fingering

logger = logging.getLogger(__name__)


def plan_fingering(
    notes: Sequence[Note],
    patterns: Sequence[PatternSegment],
    config: PlannerConfig = DEFAULT_CONFIG,
) -> FingeringSolution:
    """Assign a finger to every note of a piece.

    Args:
        notes: Notes of both hands, interleaved in performance order.
        patterns: Pattern segments shared by both hands.
        config: Planner settings used for the whole call.

    Returns:
        A :class:`FingeringSolution` aligned with *notes*. ``total_cost`` is
        the sum of both hands; ``path`` holds the right-hand trail followed
        by the left-hand trail, indexed per hand.
    """
    if not notes:
        return FingeringSolution.empty()

    rh_notes = [note for note in notes if note.hand == Hand.RH]
    lh_notes = [note for note in notes if note.hand == Hand.LH]

    rh = plan_hand_fingering(rh_notes, patterns, Hand.RH, config)
    lh = plan_hand_fingering(lh_notes, patterns, Hand.LH, config)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Planned %d RH notes (cost %.1f) and %d LH notes (cost %.1f) at %s level",
            len(rh_notes),
            rh.total_cost,
            len(lh_notes),
            lh.total_cost,
            config.difficulty.value,
        )

    fingering: list[int] = []
    explanations: list[str] = []
    cursors = {Hand.RH: 0, Hand.LH: 0}
    solutions = {Hand.RH: rh, Hand.LH: lh}

    for note in notes:
        # Anything not tagged RH is merged from the LH result.
        hand = Hand.RH if note.hand == Hand.RH else Hand.LH
        solution = solutions[hand]
        idx = cursors[hand]
        if idx < len(solution.fingering):
            fingering.append(solution.fingering[idx])
            explanations.append(solution.explanations[idx])
        else:
            logger.warning("%s fingering exhausted at note %d", str(note.hand), idx)
            fingering.append(DEFAULT_FINGER)
            explanations.append("")
        cursors[hand] = idx + 1

    return FingeringSolution(
        fingering=tuple(fingering),
        total_cost=rh.total_cost + lh.total_cost,
        path=rh.path + lh.path,
        explanations=tuple(explanations),
    )


class FingeringPlanner:
    """Stateful front end holding a difficulty setting between calls.

    The configuration is copied at the start of every call, so a
    concurrent :meth:`set_difficulty_level` only affects later calls.

    Args:
        config: Initial settings; defaults to intermediate difficulty.
    """

    def __init__(self, config: PlannerConfig = DEFAULT_CONFIG) -> None:
        self._config = config

    @property
    def config(self) -> PlannerConfig:
        return self._config

    def set_difficulty_level(self, level: str | Difficulty) -> None:
        """Switch to ``"beginner"``, ``"intermediate"`` or ``"advanced"``.

        Raises:
            ValueError: If *level* is not a known difficulty.
        """
        self._config = self._config.with_difficulty(level)

    def plan_fingering(
        self, notes: Sequence[Note], patterns: Sequence[PatternSegment]
    ) -> FingeringSolution:
        config = self._config
        return plan_fingering(notes, patterns, config)

    def plan_hand_fingering(
        self, notes: Sequence[Note], patterns: Sequence[PatternSegment], hand: Hand
    ) -> FingeringSolution:
        config = self._config
        return plan_hand_fingering(notes, patterns, hand, config)
