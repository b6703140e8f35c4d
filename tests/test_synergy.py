from fractions import Fraction

import pytest

from farm.crop_catalog import CropId
from farm.errors import InvalidPatternType
from farm.synergy import (
    PATTERN_BONUSES,
    PatternType,
    ResourceBonus,
    apply_multipliers,
    combine_bonuses,
    describe,
    get_companion_bonus,
    get_pattern_bonus,
    pattern_from_id,
)


def test_pattern_table_values():
    """Pattern bonuses match the published table."""
    assert PATTERN_BONUSES[PatternType.MONOCULTURE_ROW].yield_multiplier == Fraction(115, 100)
    assert PATTERN_BONUSES[PatternType.PERIMETER_DEFENSE].yield_multiplier == Fraction(140, 100)
    assert PATTERN_BONUSES[PatternType.CROP_DIVERSITY].fertility_bonus == 5
    assert PATTERN_BONUSES[PatternType.CROSS_PATTERN].resources == ResourceBonus(seeds=1)
    assert PATTERN_BONUSES[PatternType.CHECKERBOARD].water_bonus == 2
    assert PATTERN_BONUSES[PatternType.ROTATION_SEQUENCE].fertility_bonus == 10
    assert get_pattern_bonus(PatternType.MONOCULTURE_BLOCK) is PATTERN_BONUSES[PatternType.MONOCULTURE_BLOCK]
    assert len(PATTERN_BONUSES) == 8


def test_companion_bonus_is_symmetric():
    """Companion pairs are found in either order."""
    assert get_companion_bonus(CropId.WHEAT, CropId.CARROT) == get_companion_bonus(CropId.CARROT, CropId.WHEAT)
    assert get_companion_bonus(CropId.WHEAT, CropId.CARROT).yield_multiplier == Fraction(110, 100)
    corn_lettuce = get_companion_bonus(5, 3)
    assert corn_lettuce.yield_multiplier == Fraction(105, 100)
    assert corn_lettuce.water_bonus == 5


@pytest.mark.parametrize("a, b", [(CropId.TOMATO, CropId.CORN), (CropId.WHEAT, CropId.WHEAT), (9, 1), (0, 4)])
def test_companion_bonus_absent(a, b):
    """Non-companion pairs and unknown ids have no bonus."""
    assert get_companion_bonus(a, b) is None


def test_combine_bonuses_orders_and_sums():
    """Multipliers are kept in enum order with the companion last; other bonuses add up."""
    companion = get_companion_bonus(CropId.CORN, CropId.LETTUCE)
    totals = combine_bonuses([PatternType.ROTATION_SEQUENCE, PatternType.CROP_DIVERSITY], companion)
    assert totals.multipliers == (Fraction(125, 100), Fraction(120, 100), Fraction(105, 100))
    assert totals.fertility_bonus == 15
    assert totals.water_bonus == 5
    assert totals.total_multiplier == Fraction(125, 100) * Fraction(120, 100) * Fraction(105, 100)


def test_combine_bonuses_empty():
    """No patterns means a neutral multiplier."""
    totals = combine_bonuses([])
    assert totals.multipliers == ()
    assert totals.total_multiplier == 1
    assert totals.resources == ResourceBonus()


def test_apply_multipliers_floors_once_and_ignores_order():
    """The exact product is floored once, so order cannot change the result."""
    assert apply_multipliers(96, [Fraction(115, 100)]) == 110
    assert apply_multipliers(100, [Fraction(115, 100), Fraction(120, 100)]) == 138
    muls = [Fraction(115, 100), Fraction(130, 100), Fraction(110, 100)]
    for amount in range(0, 300):
        assert apply_multipliers(amount, muls) == apply_multipliers(amount, list(reversed(muls)))


def test_pattern_from_id():
    """Pattern ids outside 0..7 are rejected."""
    assert pattern_from_id(5) is PatternType.CHECKERBOARD
    with pytest.raises(InvalidPatternType):
        pattern_from_id(8)
    with pytest.raises(InvalidPatternType):
        pattern_from_id(True)


def test_describe_every_pattern():
    """Every pattern has a description."""
    for pattern in PatternType:
        assert describe(pattern)
    assert PatternType.MONOCULTURE_BLOCK.label == "Monoculture Block"
