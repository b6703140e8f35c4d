from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from fractions import Fraction
from typing import Iterable, Sequence

from farm.crop_catalog import CropId, parse_crop_id
from farm.errors import FarmValidationError, InvalidPatternType


class PatternType(IntEnum):
    MONOCULTURE_ROW = 0
    MONOCULTURE_BLOCK = 1
    COMPANION_PLANTING = 2
    CROP_DIVERSITY = 3
    CROSS_PATTERN = 4
    CHECKERBOARD = 5
    PERIMETER_DEFENSE = 6
    ROTATION_SEQUENCE = 7

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


@dataclass(frozen=True)
class ResourceBonus:
    seeds: int = 0
    fiber: int = 0
    wood: int = 0
    points: int = 0

    def __add__(self, other: "ResourceBonus") -> "ResourceBonus":
        return ResourceBonus(
            seeds=self.seeds + other.seeds,
            fiber=self.fiber + other.fiber,
            wood=self.wood + other.wood,
            points=self.points + other.points,
        )


@dataclass(frozen=True)
class PatternBonus:
    yield_multiplier: Fraction
    fertility_bonus: int = 0
    water_bonus: int = 0
    resources: ResourceBonus = ResourceBonus()


@dataclass(frozen=True)
class BonusTotals:
    # Applied in this order: detected patterns by enum value, then companion.
    multipliers: tuple[Fraction, ...] = ()
    fertility_bonus: int = 0
    water_bonus: int = 0
    resources: ResourceBonus = field(default_factory=ResourceBonus)

    @property
    def total_multiplier(self) -> Fraction:
        total = Fraction(1)
        for multiplier in self.multipliers:
            total *= multiplier
        return total


PATTERN_BONUSES: dict[PatternType, PatternBonus] = {
    PatternType.MONOCULTURE_ROW: PatternBonus(Fraction(115, 100)),
    PatternType.MONOCULTURE_BLOCK: PatternBonus(Fraction(120, 100)),
    PatternType.COMPANION_PLANTING: PatternBonus(Fraction(110, 100)),
    PatternType.CROP_DIVERSITY: PatternBonus(Fraction(125, 100), fertility_bonus=5),
    PatternType.CROSS_PATTERN: PatternBonus(Fraction(130, 100), resources=ResourceBonus(seeds=1)),
    PatternType.CHECKERBOARD: PatternBonus(Fraction(110, 100), water_bonus=2),
    PatternType.PERIMETER_DEFENSE: PatternBonus(Fraction(140, 100)),
    PatternType.ROTATION_SEQUENCE: PatternBonus(Fraction(120, 100), fertility_bonus=10),
}

_DESCRIPTIONS = {
    PatternType.MONOCULTURE_ROW: "3+ same crops in a row: +15% yield",
    PatternType.MONOCULTURE_BLOCK: "2x2 block of same crop: +20% yield",
    PatternType.COMPANION_PLANTING: "Beneficial crop pairs: +10% yield",
    PatternType.CROP_DIVERSITY: "Surrounded by different crops: +25% yield, +5 fertility",
    PatternType.CROSS_PATTERN: "Cross shape of same crop: +30% yield, +1 seed",
    PatternType.CHECKERBOARD: "Alternating crops in 3x3: +10% yield, +2 water",
    PatternType.PERIMETER_DEFENSE: "Border around center crop: +40% yield",
    PatternType.ROTATION_SEQUENCE: "4 different crops in line: +20% yield, +10 fertility",
}

# Symmetric: looked up with the pair sorted.
COMPANION_BONUSES: dict[tuple[CropId, CropId], PatternBonus] = {
    (CropId.WHEAT, CropId.CARROT): PatternBonus(Fraction(110, 100)),
    (CropId.CORN, CropId.LETTUCE): PatternBonus(Fraction(105, 100), water_bonus=5),
}


def pattern_from_id(raw: object) -> PatternType:
    """Return the PatternType for an integer id (0..7)."""
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidPatternType(f"Invalid pattern type {raw!r}")
    try:
        return PatternType(raw)
    except ValueError:
        raise InvalidPatternType(f"Invalid pattern type {raw!r}") from None


def get_pattern_bonus(pattern: PatternType) -> PatternBonus:
    return PATTERN_BONUSES[pattern]


def describe(pattern: PatternType) -> str:
    """Return a short human-readable description of a pattern's bonus."""
    return _DESCRIPTIONS[pattern]


def get_companion_bonus(crop_a: object, crop_b: object) -> PatternBonus | None:
    """Return the companion bonus for a crop pair in either order, if any."""
    try:
        a = parse_crop_id(crop_a)
        b = parse_crop_id(crop_b)
    except FarmValidationError:
        return None
    key = (a, b) if a <= b else (b, a)
    return COMPANION_BONUSES.get(key)


def combine_bonuses(
    patterns: Iterable[PatternType],
    companion: PatternBonus | None = None,
) -> BonusTotals:
    """
    Fold detected pattern bonuses into one record.
    Yield multipliers are collected in enumeration order followed by the companion
    multiplier; fertility, water and resource grants add up. A companion match
    contributes its multiplier and water bonus only.
    """
    multipliers: list[Fraction] = []
    fertility = 0
    water = 0
    resources = ResourceBonus()
    for pattern in sorted(set(patterns)):
        bonus = PATTERN_BONUSES[pattern]
        multipliers.append(bonus.yield_multiplier)
        fertility += bonus.fertility_bonus
        water += bonus.water_bonus
        resources = resources + bonus.resources
    if companion is not None:
        multipliers.append(companion.yield_multiplier)
        water += companion.water_bonus
    return BonusTotals(
        multipliers=tuple(multipliers),
        fertility_bonus=fertility,
        water_bonus=water,
        resources=resources,
    )


def apply_multipliers(amount: int, multipliers: Sequence[Fraction]) -> int:
    """Scale amount by the exact product of multipliers, flooring once at the end."""
    total = Fraction(amount)
    for multiplier in multipliers:
        total *= multiplier
    return total.numerator // total.denominator
