from __future__ import annotations

import pytest

from fingering_planner.config import Difficulty
from fingering_planner.cost_model import FingeringCostModel, is_black_key
from fingering_planner.models import Hand, HandPosition, Note, PatternType

_FREE = HandPosition(anchor_pitch=60, in_position=False, is_scale=False)
_SCALE = HandPosition(anchor_pitch=60, in_position=False, is_scale=True)


def _rh(pitch: int) -> Note:
    return Note(pitch=pitch, hand=Hand.RH, measure_number=1)


def _lh(pitch: int) -> Note:
    return Note(pitch=pitch, hand=Hand.LH, measure_number=1)


@pytest.fixture
def model() -> FingeringCostModel:
    return FingeringCostModel()


def test_black_keys_by_pitch_class() -> None:
    assert [p for p in range(60, 72) if is_black_key(p)] == [61, 63, 66, 68, 70]


def test_natural_span_is_symmetric(model: FingeringCostModel) -> None:
    assert model.natural_span(1, 5) == model.natural_span(5, 1) == 8
    assert model.natural_span(3, 4) == 1
    assert model.natural_span(2, 4) == 3
    assert model.natural_span(3, 3) == 0


@pytest.mark.parametrize(
    ("pair", "bonus"),
    [((2, 1), -10.0), ((1, 3), -6.0), ((1, 4), -6.0), ((4, 1), -3.0), ((2, 4), -3.0), ((3, 3), 0.0)],
)
def test_transition_bonus_tiers(model: FingeringCostModel, pair: tuple[int, int], bonus: float) -> None:
    assert model.transition_bonus(*pair) == bonus


# ── Initial cost ──────────────────────────────────────────────


def test_initial_cost_rewards_expected_finger(model: FingeringCostModel) -> None:
    position = HandPosition(anchor_pitch=60, in_position=True, is_scale=False)

    result = model.initial_cost(3, _rh(64), Hand.RH, position)

    assert result.cost == -30
    assert result.reasons == ("Matches hand position",)


def test_initial_cost_penalises_distance_from_expected(model: FingeringCostModel) -> None:
    position = HandPosition(anchor_pitch=60, in_position=True, is_scale=False)

    result = model.initial_cost(1, _rh(64), Hand.RH, position)

    assert result.cost == 30
    assert result.reasons == ("2 fingers from expected",)


def test_initial_cost_black_key_prefers_long_fingers(model: FingeringCostModel) -> None:
    position = HandPosition(anchor_pitch=60, in_position=True, is_scale=False)

    long_finger = model.initial_cost(2, _rh(61), Hand.RH, position)
    thumb = model.initial_cost(1, _rh(61), Hand.RH, position)

    assert long_finger.cost == -35
    assert "Long finger on black key" in long_finger.reasons
    assert thumb.cost == 35
    assert "Short finger on black key" in thumb.reasons


def test_initial_cost_ignores_difficulty() -> None:
    position = HandPosition(anchor_pitch=60, in_position=True, is_scale=False)
    beginner = FingeringCostModel(Difficulty.BEGINNER)
    advanced = FingeringCostModel(Difficulty.ADVANCED)

    assert (
        beginner.initial_cost(4, _rh(62), Hand.RH, position)
        == advanced.initial_cost(4, _rh(62), Hand.RH, position)
    )


# ── Position-mode transitions ─────────────────────────────────


def test_unnatural_crossing_without_thumb(model: FingeringCostModel) -> None:
    result = model.transition_cost(_rh(60), 3, _rh(62), 2, PatternType.UNKNOWN, Hand.RH, _FREE)

    # +50 crossing, -10 for the common 3->2 pair
    assert result.cost == 40
    assert result.reasons == ("Unnatural finger crossing",)


def test_thumb_is_exempt_from_crossing_penalty(model: FingeringCostModel) -> None:
    result = model.transition_cost(_rh(62), 1, _rh(60), 2, PatternType.UNKNOWN, Hand.RH, _FREE)

    assert "Unnatural finger crossing" not in result.reasons


def test_left_hand_ascends_toward_thumb(model: FingeringCostModel) -> None:
    result = model.transition_cost(_lh(60), 3, _lh(62), 2, PatternType.UNKNOWN, Hand.LH, _FREE)

    assert result.cost == -25
    assert result.reasons == ("Natural LH ascending",)


def test_right_hand_natural_ascent_onto_black_key(model: FingeringCostModel) -> None:
    result = model.transition_cost(_rh(60), 1, _rh(61), 2, PatternType.UNKNOWN, Hand.RH, _FREE)

    # -15 natural, -10 common pair, -5 long finger on black key
    assert result.cost == -30
    assert result.reasons == ("Natural RH ascending",)


def test_repeated_note_prefers_finger_change(model: FingeringCostModel) -> None:
    change = model.transition_cost(_rh(64), 2, _rh(64), 3, PatternType.UNKNOWN, Hand.RH, _FREE)
    same = model.transition_cost(_rh(64), 2, _rh(64), 2, PatternType.UNKNOWN, Hand.RH, _FREE)

    assert change.cost == -16
    assert change.reasons == ("Good finger change on repeat",)
    assert same.cost == 30
    assert same.reasons == ("Same finger on repeated note",)


def test_same_finger_leap_costs_more_than_changing_finger(model: FingeringCostModel) -> None:
    position = HandPosition(anchor_pitch=72, in_position=True, is_scale=False)

    same = model.transition_cost(_rh(60), 1, _rh(72), 1, PatternType.UNKNOWN, Hand.RH, position)
    other = model.transition_cost(_rh(60), 1, _rh(72), 5, PatternType.UNKNOWN, Hand.RH, position)

    assert same.cost == 200
    assert same.reasons == ("Correct finger for position", "Over-stretch", "Same finger leap")
    assert other.cost == 83
    assert same.cost > other.cost


def test_position_mismatch_scales_with_finger_distance(model: FingeringCostModel) -> None:
    position = HandPosition(anchor_pitch=60, in_position=True, is_scale=False)

    result = model.transition_cost(_rh(62), 2, _rh(64), 5, PatternType.UNKNOWN, Hand.RH, position)

    # expected 3: +40 mismatch, -15 natural, span 2-5 ok, -6 for 2->5
    assert result.cost == 19
    assert "Wrong finger for position" in result.reasons


# ── Scale transitions ─────────────────────────────────────────


def test_scale_thumb_under_is_standard(model: FingeringCostModel) -> None:
    result = model.scale_transition_cost(3, 1, True, Hand.RH, 1)

    assert result.cost == -30
    assert result.reasons == ("Standard scale fingering",)


def test_scale_thumb_under_from_fourth_finger(model: FingeringCostModel) -> None:
    result = model.scale_transition_cost(4, 1, True, Hand.RH, 2)

    assert result.cost == -15
    assert result.reasons == ("Thumb under (4->1)",)


def test_scale_descending_right_hand_template(model: FingeringCostModel) -> None:
    assert model.scale_transition_cost(1, 3, False, Hand.RH, 2).cost == -30
    crossing = model.scale_transition_cost(3, 1, False, Hand.RH, 2)
    assert crossing.cost == -20
    assert crossing.reasons == ("Thumb under (3->1)",)


def test_scale_left_hand_templates_are_mirrored(model: FingeringCostModel) -> None:
    assert model.scale_transition_cost(2, 1, True, Hand.LH, 2).cost == -30
    assert model.scale_transition_cost(3, 1, False, Hand.LH, 1).cost == -30


def test_scale_same_finger_and_stretch(model: FingeringCostModel) -> None:
    step = model.scale_transition_cost(2, 2, True, Hand.RH, 2)
    leap = model.scale_transition_cost(2, 2, True, Hand.RH, 3)

    assert step.cost == 60
    assert step.reasons == ("Non-standard scale transition", "Same finger in scale")
    assert leap.cost == 90
    assert leap.reasons[-1] == "Over-stretch in scale"


def test_scale_position_delegates_to_scale_cost(model: FingeringCostModel) -> None:
    via_position = model.transition_cost(_rh(64), 3, _rh(65), 1, PatternType.UNKNOWN, Hand.RH, _SCALE)
    via_pattern = model.transition_cost(_rh(64), 3, _rh(65), 1, PatternType.SCALE, Hand.RH, _FREE)

    expected = model.scale_transition_cost(3, 1, True, Hand.RH, 1)
    assert via_position == expected
    assert via_pattern == expected


def test_scale_costs_are_not_difficulty_scaled() -> None:
    beginner = FingeringCostModel(Difficulty.BEGINNER)

    result = beginner.transition_cost(_rh(64), 3, _rh(65), 1, PatternType.SCALE, Hand.RH, _FREE)

    assert result.cost == -30


# ── Difficulty ────────────────────────────────────────────────


@pytest.mark.parametrize("pattern", [PatternType.POLYPHONIC, PatternType.ORNAMENTED])
def test_difficulty_orders_reward_magnitudes(pattern: PatternType) -> None:
    costs = {
        level: FingeringCostModel(level)
        .transition_cost(_lh(60), 3, _lh(62), 2, pattern, Hand.LH, _FREE)
        .cost
        for level in Difficulty
    }

    assert costs[Difficulty.BEGINNER] == pytest.approx(-32.5)
    assert costs[Difficulty.INTERMEDIATE] == pytest.approx(-25.0)
    assert costs[Difficulty.ADVANCED] == pytest.approx(-22.5)
    assert (
        abs(costs[Difficulty.ADVANCED])
        <= abs(costs[Difficulty.INTERMEDIATE])
        <= abs(costs[Difficulty.BEGINNER])
    )


def test_beginner_factor_outside_heavy_contexts() -> None:
    model = FingeringCostModel("beginner")

    assert model.apply_difficulty(-25.0, PatternType.UNKNOWN) == pytest.approx(-27.5)
    assert model.apply_difficulty(-25.0, PatternType.ARPEGGIO) == pytest.approx(-27.5)
