from __future__ import annotations

import pytest

from fingering_planner.evaluator import finger_accuracy, hand_finger_accuracy
from fingering_planner.models import Hand, Note


def test_finger_accuracy_counts_matches() -> None:
    assert finger_accuracy([1, 2, 3, 4], [1, 2, 4, 4]) == pytest.approx(0.75)


def test_finger_accuracy_empty() -> None:
    assert finger_accuracy([], []) == 0.0


def test_finger_accuracy_length_mismatch() -> None:
    with pytest.raises(ValueError, match="Length mismatch"):
        finger_accuracy([1, 2], [1])


def test_hand_breakdown() -> None:
    notes = [Note(60, Hand.RH), Note(48, Hand.LH), Note(62, Hand.RH), Note(50, Hand.LH)]

    scores = hand_finger_accuracy(notes, [1, 5, 2, 3], [1, 5, 3, 4])

    assert scores == {"RH": 0.5, "LH": 0.5, "overall": 0.5}


def test_hand_without_notes_scores_zero() -> None:
    notes = [Note(60, Hand.RH), Note(62, Hand.RH)]

    scores = hand_finger_accuracy(notes, [1, 2], [1, 2])

    assert scores == {"RH": 1.0, "LH": 0.0, "overall": 1.0}
