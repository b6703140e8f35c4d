from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from fractions import Fraction

from farm.errors import InvalidCropType


class CropId(IntEnum):
    WHEAT = 1
    TOMATO = 2
    CORN = 3
    CARROT = 4
    LETTUCE = 5

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True)
class HarvestByproducts:
    seeds: int = 0
    fiber: int = 0


@dataclass(frozen=True)
class CropConfig:
    crop_id: CropId
    # Seconds from planting until the crop can be harvested.
    growth_time: int
    # Seconds after maturity during which the harvest pays base_yield.
    optimal_window: int
    # Seconds after maturity at which the harvest bottoms out at min_yield.
    max_decay_time: int
    base_yield: int
    min_yield: int
    fertility_cost: int
    is_restorative: bool
    growth_stages: int
    valid_seasons: frozenset[int]
    # Spring, Summer, Fall, Winter
    growth_rate_modifiers: tuple[Fraction, Fraction, Fraction, Fraction]
    yield_modifiers: tuple[Fraction, Fraction, Fraction, Fraction]
    byproducts: HarvestByproducts = HarvestByproducts()

    def is_valid_season(self, season: int) -> bool:
        """Return True if the crop may be planted in the given season index."""
        return season in self.valid_seasons

    def mature_at(self, planted_at: int) -> int:
        return planted_at + self.growth_time

    def is_mature(self, planted_at: int, now: int) -> bool:
        """Return True once now has reached planted_at + growth_time."""
        return now >= self.mature_at(planted_at)

    def growth_stage(self, planted_at: int, now: int) -> int:
        """Return the visual growth stage (0-based, last stage means mature)."""
        if self.is_mature(planted_at, now):
            return self.growth_stages - 1
        elapsed = max(0, now - planted_at)
        return min(self.growth_stages - 2, elapsed * (self.growth_stages - 1) // self.growth_time)


def _pct(*values: int) -> tuple[Fraction, ...]:
    return tuple(Fraction(v, 100) for v in values)


# Short timings keep a full grow/decay cycle inside a couple of minutes.
CROP_CATALOG: dict[CropId, CropConfig] = {
    CropId.WHEAT: CropConfig(
        crop_id=CropId.WHEAT,
        growth_time=30,
        optimal_window=20,
        max_decay_time=60,
        base_yield=100,
        min_yield=20,
        fertility_cost=10,
        is_restorative=False,
        growth_stages=4,
        valid_seasons=frozenset({0, 1, 3}),
        growth_rate_modifiers=_pct(100, 80, 0, 120),
        yield_modifiers=_pct(110, 90, 0, 100),
        byproducts=HarvestByproducts(seeds=1, fiber=2),
    ),
    CropId.TOMATO: CropConfig(
        crop_id=CropId.TOMATO,
        growth_time=45,
        optimal_window=30,
        max_decay_time=90,
        base_yield=300,
        min_yield=60,
        fertility_cost=15,
        is_restorative=False,
        growth_stages=4,
        valid_seasons=frozenset({1}),
        growth_rate_modifiers=_pct(0, 100, 0, 0),
        yield_modifiers=_pct(0, 100, 0, 0),
        byproducts=HarvestByproducts(seeds=1),
    ),
    CropId.CORN: CropConfig(
        crop_id=CropId.CORN,
        growth_time=60,
        optimal_window=40,
        max_decay_time=120,
        base_yield=500,
        min_yield=100,
        fertility_cost=20,
        is_restorative=False,
        growth_stages=4,
        valid_seasons=frozenset({1}),
        growth_rate_modifiers=_pct(0, 100, 0, 0),
        yield_modifiers=_pct(0, 100, 0, 0),
        byproducts=HarvestByproducts(seeds=2),
    ),
    CropId.CARROT: CropConfig(
        crop_id=CropId.CARROT,
        growth_time=25,
        optimal_window=15,
        max_decay_time=50,
        base_yield=150,
        min_yield=30,
        fertility_cost=5,
        is_restorative=True,
        growth_stages=3,
        valid_seasons=frozenset({0, 1, 2, 3}),
        growth_rate_modifiers=_pct(100, 100, 110, 100),
        yield_modifiers=_pct(100, 100, 100, 100),
        byproducts=HarvestByproducts(seeds=1, fiber=1),
    ),
    CropId.LETTUCE: CropConfig(
        crop_id=CropId.LETTUCE,
        growth_time=20,
        optimal_window=10,
        max_decay_time=40,
        base_yield=80,
        min_yield=16,
        fertility_cost=5,
        is_restorative=True,
        growth_stages=3,
        valid_seasons=frozenset({0, 1, 2}),
        growth_rate_modifiers=_pct(110, 80, 100, 0),
        yield_modifiers=_pct(100, 90, 100, 0),
        byproducts=HarvestByproducts(fiber=3),
    ),
}


def parse_crop_id(raw: object) -> CropId:
    """Return the CropId for an integer id or a crop name."""
    if isinstance(raw, CropId):
        return raw
    if isinstance(raw, str):
        key = raw.strip()
        if key.isdigit():
            raw = int(key)
        else:
            try:
                return CropId[key.upper()]
            except KeyError:
                raise InvalidCropType(f"Invalid crop type {raw!r}") from None
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise InvalidCropType(f"Invalid crop type {raw!r}")
    try:
        return CropId(raw)
    except ValueError:
        raise InvalidCropType(f"Invalid crop type {raw!r}") from None


def get_crop_config(crop: object) -> CropConfig:
    """Return the static configuration for a crop id (1..5)."""
    return CROP_CATALOG[parse_crop_id(crop)]


def crops_for_season(season: int) -> list[CropId]:
    """Return the crops that may be planted in a season, in id order."""
    return [crop_id for crop_id, cfg in CROP_CATALOG.items() if cfg.is_valid_season(season)]
