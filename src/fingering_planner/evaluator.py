"""Evaluator — compare planned fingering with a reference fingering.

Provides two granularity levels:
    - ``finger_accuracy``       : fraction of notes with the same finger
    - ``hand_finger_accuracy``  : the same fraction per hand and overall
"""

from __future__ import annotations

from typing import Sequence

from .models import Hand, Note


def _check_lengths(predicted: Sequence[int], reference: Sequence[int]) -> None:
    if len(predicted) != len(reference):
        raise ValueError(
            f"Length mismatch: predicted={len(predicted)}, reference={len(reference)}"
        )


def finger_accuracy(predicted: Sequence[int], reference: Sequence[int]) -> float:
    """Fraction of notes where the planned finger equals the reference.

    Args:
        predicted: Planner fingering.
        reference: Expert fingering, aligned with *predicted*.

    Returns:
        Accuracy in [0.0, 1.0]. Returns 0.0 on empty input.

    Raises:
        ValueError: If the two sequences have different lengths.
    """
    _check_lengths(predicted, reference)
    if not reference:
        return 0.0

    correct = sum(1 for p, r in zip(predicted, reference) if p == r)
    return correct / len(reference)


def hand_finger_accuracy(
    notes: Sequence[Note],
    predicted: Sequence[int],
    reference: Sequence[int],
) -> dict[str, float]:
    """Finger accuracy broken down by hand.

    Args:
        notes: The notes both fingerings refer to.
        predicted: Planner fingering aligned with *notes*.
        reference: Expert fingering aligned with *notes*.

    Returns:
        A dict with keys ``"RH"``, ``"LH"`` and ``"overall"``. A hand with
        no notes scores 0.0.
    """
    _check_lengths(predicted, reference)
    _check_lengths(notes, reference)

    scores: dict[str, float] = {}
    for hand in Hand:
        indices = [i for i, note in enumerate(notes) if note.hand == hand]
        scores[hand.value] = finger_accuracy(
            [predicted[i] for i in indices], [reference[i] for i in indices]
        )
    scores["overall"] = finger_accuracy(predicted, reference)
    return scores
