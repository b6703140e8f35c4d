from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from farm.crop_catalog import CropConfig
from farm.errors import InvalidCropConfig

MIN_FERTILITY_MODIFIER = 40
MAX_FERTILITY_MODIFIER = 100

# (lowest water level, modifier), checked top-down.
_WATER_STEPS = (
    (60, Fraction(1)),
    (40, Fraction(85, 100)),
    (20, Fraction(70, 100)),
    (0, Fraction(50, 100)),
)


@dataclass(frozen=True)
class YieldBreakdown:
    time_yield: int
    fertility_modifier: int
    after_fertility: int
    season_modifier: Fraction
    after_season: int
    water_modifier: Fraction
    after_water: int
    floor: int
    final: int


def harvest_yield(
    elapsed_since_maturity: int,
    base_yield: int,
    optimal_window: int,
    max_decay_time: int,
    min_yield: int,
) -> int:
    """
    Time-based yield with a flat optimal window followed by linear decay:
    - elapsed <= optimal_window: base_yield
    - elapsed >= max_decay_time: min_yield
    - otherwise interpolate, multiplying before dividing so no precision is lost
    """
    decay_window = max_decay_time - optimal_window
    if decay_window <= 0:
        raise InvalidCropConfig(
            f"max_decay_time ({max_decay_time}) must exceed optimal_window ({optimal_window})"
        )
    if elapsed_since_maturity <= optimal_window:
        return base_yield
    if elapsed_since_maturity >= max_decay_time:
        return min_yield

    time_into_decay = elapsed_since_maturity - optimal_window
    loss = max(0, base_yield - min_yield) * time_into_decay // decay_window
    return max(base_yield - loss, min_yield)


def fertility_modifier(fertility: int) -> int:
    """Map fertility 0..100 linearly onto a 40..100 percentage."""
    fertility = max(0, fertility)
    span = MAX_FERTILITY_MODIFIER - MIN_FERTILITY_MODIFIER
    return min(MAX_FERTILITY_MODIFIER, MIN_FERTILITY_MODIFIER + fertility * span // 100)


def water_modifier(water_level: int) -> Fraction:
    """Step function of soil moisture: 60+ full, 40+ 0.85, 20+ 0.7, else 0.5."""
    for threshold, modifier in _WATER_STEPS:
        if water_level >= threshold:
            return modifier
    return _WATER_STEPS[-1][1]


def season_yield_modifier(crop: CropConfig, planted_in_season: int | None) -> Fraction:
    """Return the crop's yield modifier for the season it was planted in."""
    season = 0 if planted_in_season is None else min(max(planted_in_season, 0), 3)
    return crop.yield_modifiers[season]


def _scale(amount: int, modifier: Fraction) -> int:
    return amount * modifier.numerator // modifier.denominator


def yield_breakdown(
    elapsed_since_maturity: int,
    base_yield: int,
    optimal_window: int,
    max_decay_time: int,
    min_yield: int,
    fertility: int,
    water: int,
    season_modifier: Fraction = Fraction(1),
) -> YieldBreakdown:
    """Compute the harvest yield and keep every intermediate stage."""
    time_yield = harvest_yield(elapsed_since_maturity, base_yield, optimal_window, max_decay_time, min_yield)
    fert_mod = fertility_modifier(fertility)
    after_fertility = time_yield * fert_mod // 100
    season_modifier = Fraction(season_modifier)
    after_season = _scale(after_fertility, season_modifier)
    water_mod = water_modifier(water)
    after_water = _scale(after_season, water_mod)
    floor = min_yield // 2
    return YieldBreakdown(
        time_yield=time_yield,
        fertility_modifier=fert_mod,
        after_fertility=after_fertility,
        season_modifier=season_modifier,
        after_season=after_season,
        water_modifier=water_mod,
        after_water=after_water,
        floor=floor,
        final=max(after_water, floor),
    )


def compute_yield(
    elapsed_since_maturity: int,
    base_yield: int,
    optimal_window: int,
    max_decay_time: int,
    min_yield: int,
    fertility: int,
    water: int,
    season_modifier: Fraction = Fraction(1),
) -> int:
    """Return the coin yield before pattern bonuses (never below min_yield // 2)."""
    return yield_breakdown(
        elapsed_since_maturity,
        base_yield,
        optimal_window,
        max_decay_time,
        min_yield,
        fertility,
        water,
        season_modifier,
    ).final


def crop_breakdown(
    crop: CropConfig,
    elapsed_since_maturity: int,
    fertility: int,
    water: int,
    planted_in_season: int | None = None,
) -> YieldBreakdown:
    return yield_breakdown(
        elapsed_since_maturity,
        crop.base_yield,
        crop.optimal_window,
        crop.max_decay_time,
        crop.min_yield,
        fertility,
        water,
        season_yield_modifier(crop, planted_in_season),
    )


def crop_yield(
    crop: CropConfig,
    elapsed_since_maturity: int,
    fertility: int,
    water: int,
    planted_in_season: int | None = None,
) -> int:
    """Return the pre-bonus yield for a catalog crop."""
    return crop_breakdown(crop, elapsed_since_maturity, fertility, water, planted_in_season).final
