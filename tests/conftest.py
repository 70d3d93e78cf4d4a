"""Shared note builders for the test suite."""

from __future__ import annotations

from typing import Callable, Sequence

import pytest

from fingering_planner.models import Hand, Note


C_MAJOR_ASCENDING: tuple[int, ...] = (60, 62, 64, 65, 67, 69, 71, 72, 74, 76)

NoteFactory = Callable[..., list[Note]]


def _build_notes(pitches: Sequence[int], hand: Hand = Hand.RH, measure: int = 1) -> list[Note]:
    return [Note(pitch=pitch, hand=hand, measure_number=measure) for pitch in pitches]


@pytest.fixture
def make_notes() -> NoteFactory:
    return _build_notes


@pytest.fixture
def c_major_rh() -> list[Note]:
    return _build_notes(C_MAJOR_ASCENDING)
