from fractions import Fraction

import pytest

from farm.crop_catalog import CROP_CATALOG, CropId
from farm.errors import InvalidCropConfig
from farm.yield_calc import (
    compute_yield,
    crop_breakdown,
    crop_yield,
    fertility_modifier,
    harvest_yield,
    season_yield_modifier,
    water_modifier,
)

WHEAT = CROP_CATALOG[CropId.WHEAT]


@pytest.mark.parametrize(
    "elapsed, expected",
    [
        (0, 100),
        (20, 100),
        # 80 * 20 // 40 = 40 lost halfway through the decay window
        (40, 60),
        (59, 22),
        (60, 20),
        (500, 20),
    ],
)
def test_harvest_yield_decay_curve(elapsed, expected):
    """Wheat pays full yield in the optimal window and decays linearly to min."""
    assert harvest_yield(elapsed, 100, 20, 60, 20) == expected


@pytest.mark.parametrize("elapsed", [0, 20, 30, 500])
@pytest.mark.parametrize("max_decay_time", [20, 10])
def test_harvest_yield_rejects_empty_decay_window(elapsed, max_decay_time):
    """A decay deadline at or before the optimal window is a broken crop config at any elapsed time."""
    with pytest.raises(InvalidCropConfig):
        harvest_yield(elapsed, 100, 20, max_decay_time, 20)


def test_harvest_yield_is_monotone_non_increasing():
    """Yield never goes up as more time passes after maturity."""
    for crop in CROP_CATALOG.values():
        values = [
            harvest_yield(t, crop.base_yield, crop.optimal_window, crop.max_decay_time, crop.min_yield)
            for t in range(0, crop.max_decay_time * 2)
        ]
        assert all(a >= b for a, b in zip(values, values[1:]))
        assert values[0] == crop.base_yield
        assert values[-1] == crop.min_yield


@pytest.mark.parametrize("fertility, expected", [(0, 40), (20, 52), (50, 70), (80, 88), (100, 100), (150, 100)])
def test_fertility_modifier(fertility, expected):
    """Fertility maps linearly onto 40..100 percent."""
    assert fertility_modifier(fertility) == expected


@pytest.mark.parametrize(
    "water, expected",
    [
        (100, Fraction(1)),
        (60, Fraction(1)),
        (59, Fraction(85, 100)),
        (40, Fraction(85, 100)),
        (39, Fraction(70, 100)),
        (20, Fraction(70, 100)),
        (19, Fraction(1, 2)),
        (0, Fraction(1, 2)),
    ],
)
def test_water_modifier_steps(water, expected):
    """Water modifier is a step function with thresholds at 60, 40 and 20."""
    assert water_modifier(water) == expected


def test_compute_yield_applies_fertility_then_water():
    """Each stage floors before the next one is applied."""
    assert compute_yield(0, 100, 20, 60, 20, fertility=100, water=100) == 100
    assert compute_yield(0, 100, 20, 60, 20, fertility=80, water=100) == 88
    # 88 * 0.85 = 74.8
    assert compute_yield(0, 100, 20, 60, 20, fertility=80, water=50) == 74


def test_compute_yield_never_below_half_min_yield():
    """The worst case still pays min_yield // 2."""
    assert compute_yield(1000, 100, 20, 60, 20, fertility=20, water=0) == 10
    assert compute_yield(1000, 100, 20, 60, 20, fertility=0, water=0) == 10


def test_compute_yield_monotone_in_fertility_and_water():
    """More fertility or more water never lowers the yield."""
    for fertility in range(0, 100):
        assert compute_yield(30, 100, 20, 60, 20, fertility, 70) <= compute_yield(30, 100, 20, 60, 20, fertility + 1, 70)
    for water in range(0, 100):
        assert compute_yield(30, 100, 20, 60, 20, 80, water) <= compute_yield(30, 100, 20, 60, 20, 80, water + 1)


@pytest.mark.parametrize(
    "season, expected",
    [
        (None, Fraction(110, 100)),
        (0, Fraction(110, 100)),
        (1, Fraction(90, 100)),
        (2, Fraction(0)),
        (3, Fraction(1)),
        (9, Fraction(1)),
    ],
)
def test_season_yield_modifier(season, expected):
    """Missing seasons read as spring and large indices clamp to winter."""
    assert season_yield_modifier(WHEAT, season) == expected


def test_crop_yield_uses_planting_season():
    """Wheat planted in spring earns its 110% spring modifier."""
    assert crop_yield(WHEAT, 0, 100, 100, 0) == 110
    assert crop_yield(WHEAT, 0, 100, 100, 1) == 90
    # Zero season modifier still hits the floor.
    assert crop_yield(WHEAT, 0, 100, 100, 2) == 10


def test_crop_breakdown_keeps_stages():
    """The breakdown exposes every intermediate value."""
    b = crop_breakdown(WHEAT, 40, fertility=80, water=30, planted_in_season=0)
    assert b.time_yield == 60
    assert b.fertility_modifier == 88
    assert b.after_fertility == 52
    assert b.after_season == 57
    assert b.water_modifier == Fraction(70, 100)
    assert b.after_water == 39
    assert b.floor == 10
    assert b.final == 39
