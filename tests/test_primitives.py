import pytest

from playerbot.world.primitives import (
    ATTACK_OFFSETS,
    STEP_OFFSETS,
    AttackDirection,
    Location,
    Offset,
    StepDirection,
    attack_direction_for,
    attack_order,
    step_direction_for,
)


def test_location_offset_arithmetic():
    assert Location(1, 2) + Offset(1, -1) == Location(2, 1)
    assert Location(3, 3) - Location(1, 2) == Offset(2, 1)
    assert Offset(1, 0) * 3 == Offset(3, 0)


def test_offset_lengths():
    offset = Offset(2, -3)
    assert offset.size == 3
    assert offset.manhattan == 5
    assert Offset(-1, 1).is_diagonal_unit()
    assert not Offset(0, 1).is_diagonal_unit()


def test_location_is_value_type():
    seen = {Location(1, 1): "a"}
    assert seen[Location(1, 1)] == "a"
    assert Location(0, 0) != Offset(0, 0)
    with pytest.raises(AttributeError):
        Location(0, 0).x = 3


def test_offset_sets():
    assert len(STEP_OFFSETS) == 4
    assert len(ATTACK_OFFSETS) == 8
    assert all(offset.size == 1 for offset in ATTACK_OFFSETS)
    assert set(STEP_OFFSETS) <= set(ATTACK_OFFSETS)
    assert STEP_OFFSETS[0] == Offset(0, -1)


def test_direction_lookups():
    assert step_direction_for(Offset(0, -1)) is StepDirection.NORTH
    assert step_direction_for(Offset(-1, 0)) is StepDirection.WEST
    assert attack_direction_for(Offset(1, 1)) is AttackDirection.SOUTH_EAST
    assert attack_order(AttackDirection.NORTH) < attack_order(AttackDirection.WEST)


def test_direction_lookup_rejects_non_unit_offsets():
    with pytest.raises(ValueError):
        step_direction_for(Offset(1, 1))
    with pytest.raises(ValueError):
        attack_direction_for(Offset(2, 0))
    with pytest.raises(ValueError):
        attack_direction_for(Offset(0, 0))
