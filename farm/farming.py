from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction

from farm.config import GameConfig
from farm.crop_catalog import CROP_CATALOG, CropId, get_crop_config, parse_crop_id
from farm.errors import CropNotMature, InvalidPlotIndex, InvalidSeasonForCrop, NoActiveCrop, TileNotEmpty
from farm.events import CropHarvested, CropPlanted, EventLog, FallowRestored, PatternDetected, PatternsPreview, TileCleared, emit
from farm.grid import validate_index
from farm.ledger import MAX_FERTILITY, PlayerLedger, clamp_fertility, saturating_add
from farm.patterns import PatternMatch, detect_at_index
from farm.resources import MAX_WATER, ResourceType
from farm.season import SeasonClock
from farm.synergy import (
    BonusTotals,
    PatternType,
    apply_multipliers,
    combine_bonuses,
    get_companion_bonus,
    get_pattern_bonus,
)
from farm.yield_calc import crop_yield

logger = logging.getLogger(__name__)

# Restorative crops give this much fertility back before their cost is taken.
RESTORATIVE_FERTILITY = 10


@dataclass(frozen=True)
class PlantResult:
    tile_index: int
    crop: CropId
    fertility: int
    rotation_bonus: int


@dataclass(frozen=True)
class HarvestResult:
    tile_index: int
    crop: CropId
    base_yield: int
    final_yield: int
    points: int
    patterns: tuple[PatternType, ...]
    companion: CropId | None
    fertility_after: int
    water_after: int


@dataclass(frozen=True)
class PatternPreview:
    patterns: tuple[PatternType, ...]
    companion: CropId | None
    total_multiplier: Fraction
    # 0 when the tile holds no mature crop.
    projected_yield: int


def _bonuses_for(crop: CropId, match: PatternMatch) -> BonusTotals:
    companion = None
    if match.companion is not None:
        companion = get_companion_bonus(crop, match.companion)
    return combine_bonuses(match.patterns, companion)


def plant_crop(
    ledger: PlayerLedger,
    season: SeasonClock,
    tile_index: int,
    crop_type: object,
    now: int,
    config: GameConfig | None = None,
    events: EventLog | None = None,
) -> PlantResult:
    """Plant a crop on an empty tile, applying the rotation bonus when the crop changed."""
    config = config or GameConfig()
    validate_index(tile_index)
    crop = parse_crop_id(crop_type)
    crop_cfg = CROP_CATALOG[crop]
    current = int(season.current_season)
    if not crop_cfg.is_valid_season(current):
        raise InvalidSeasonForCrop(f"{crop.label} cannot be planted in season {current}")
    plot = ledger.plots[tile_index]
    if not plot.is_empty:
        raise TileNotEmpty(f"tile {tile_index} already holds crop {plot.crop}")

    if plot.fertility == 0:
        plot.fertility = config.migrated_fertility
    bonus = 0
    if plot.last_crop and plot.last_crop != crop:
        bonus = config.rotation_bonus
        plot.fertility = min(plot.fertility + bonus, MAX_FERTILITY)
        logger.debug("rotation bonus +%d on tile %d", bonus, tile_index)
    plot.fertility = clamp_fertility(plot.fertility)

    plot.crop = int(crop)
    plot.planted_at = now
    plot.restorative_bonus_used = False
    plot.planted_in_season = current
    ledger.water_levels[tile_index] = config.planting_water_level
    ledger.last_watered[tile_index] = now

    logger.debug("planted %s on tile %d at %d (fertility %d)", crop.label, tile_index, now, plot.fertility)
    emit(
        events,
        CropPlanted(
            owner=ledger.owner,
            tile_index=tile_index,
            crop_type=int(crop),
            season=current,
            fertility=plot.fertility,
            rotation_bonus=bonus,
            timestamp=now,
        ),
    )
    return PlantResult(tile_index=tile_index, crop=crop, fertility=plot.fertility, rotation_bonus=bonus)


def harvest_crop(
    ledger: PlayerLedger,
    tile_index: int,
    now: int,
    config: GameConfig | None = None,
    events: EventLog | None = None,
) -> HarvestResult:
    """
    Harvest a mature crop.

    Order of application:
    - yield from time, fertility, planting season and current water
    - pattern multipliers (enum order) then the companion multiplier, floored once
    - coins += yield + bonus points; bonus resources and byproducts saturate at stack caps
    - fertility cost / restoration plus pattern fertility bonus, clamped to [20, 100]
    - pattern water bonus, capped at 100
    """
    validate_index(tile_index)
    plot = ledger.plots[tile_index]
    if plot.is_empty:
        raise NoActiveCrop(f"tile {tile_index} is empty")
    crop_cfg = get_crop_config(plot.crop)
    if not crop_cfg.is_mature(plot.planted_at, now):
        raise CropNotMature(
            f"tile {tile_index} matures at {crop_cfg.mature_at(plot.planted_at)} (now {now})"
        )

    crop = crop_cfg.crop_id
    elapsed = now - crop_cfg.mature_at(plot.planted_at)
    water = ledger.water_levels[tile_index]
    base = crop_yield(crop_cfg, elapsed, plot.fertility, water, plot.planted_in_season)

    match = detect_at_index(ledger.plots, tile_index, now)
    totals = _bonuses_for(crop, match)
    final = apply_multipliers(base, totals.multipliers)
    points = totals.resources.points

    ledger.grant_resource(ResourceType.SEEDS, totals.resources.seeds)
    ledger.grant_resource(ResourceType.FIBER, totals.resources.fiber)
    ledger.grant_resource(ResourceType.WOOD, totals.resources.wood)
    ledger.grant_coins(points)
    ledger.grant_coins(final)
    ledger.grant_resource(ResourceType.SEEDS, crop_cfg.byproducts.seeds)
    ledger.grant_resource(ResourceType.FIBER, crop_cfg.byproducts.fiber)

    fertility = plot.fertility
    if crop_cfg.is_restorative:
        fertility += RESTORATIVE_FERTILITY
    fertility -= crop_cfg.fertility_cost
    plot.fertility = clamp_fertility(fertility + totals.fertility_bonus)
    ledger.water_levels[tile_index] = saturating_add(water, totals.water_bonus, MAX_WATER)

    plot.last_crop = int(crop)
    plot.clear(now)

    logger.debug(
        "harvested %s on tile %d: %d -> %d coins, patterns=%s, fertility now %d",
        crop.label,
        tile_index,
        base,
        final,
        [p.label for p in match.patterns],
        plot.fertility,
    )
    emit(
        events,
        CropHarvested(
            owner=ledger.owner,
            tile_index=tile_index,
            crop_type=int(crop),
            base_yield=base,
            final_yield=final,
            points=points,
            fertility_after=plot.fertility,
            timestamp=now,
        ),
    )
    for pattern in match.patterns:
        emit(
            events,
            PatternDetected(
                owner=ledger.owner,
                tile_index=tile_index,
                pattern_type=int(pattern),
                multiplier=str(get_pattern_bonus(pattern).yield_multiplier),
            ),
        )
    return HarvestResult(
        tile_index=tile_index,
        crop=crop,
        base_yield=base,
        final_yield=final,
        points=points,
        patterns=match.patterns,
        companion=match.companion,
        fertility_after=plot.fertility,
        water_after=ledger.water_levels[tile_index],
    )


def clear_tile(ledger: PlayerLedger, tile_index: int, now: int, events: EventLog | None = None) -> None:
    """Empty a tile without paying out its crop. An already empty tile keeps its fallow time."""
    validate_index(tile_index)
    plot = ledger.plots[tile_index]
    previous = plot.crop
    if previous is not None:
        plot.clear(now)
    logger.debug("cleared tile %d (had %s)", tile_index, previous)
    emit(events, TileCleared(owner=ledger.owner, tile_index=tile_index, crop_type=previous, timestamp=now))


def leave_fallow(
    ledger: PlayerLedger,
    tile_index: int,
    now: int,
    config: GameConfig | None = None,
    events: EventLog | None = None,
) -> int:
    """Restore one fertility point per fallow_restore_rate seconds the tile sat empty.

    Returns the fertility gained; 0 leaves the tile untouched.
    """
    config = config or GameConfig()
    validate_index(tile_index)
    plot = ledger.plots[tile_index]
    if not plot.is_empty:
        raise TileNotEmpty(f"tile {tile_index} is planted")
    gain = max(0, now - plot.fallow_since) // config.fallow_restore_rate
    if gain <= 0:
        logger.debug("tile %d: need %d seconds of fallow", tile_index, config.fallow_restore_rate)
        return 0
    plot.fertility = clamp_fertility(plot.fertility + gain)
    plot.fallow_since = now
    logger.debug("fallow restored %d fertility on tile %d", gain, tile_index)
    emit(
        events,
        FallowRestored(
            owner=ledger.owner,
            tile_index=tile_index,
            fertility_gained=gain,
            fertility_after=plot.fertility,
            timestamp=now,
        ),
    )
    return gain


def check_patterns(
    ledger: PlayerLedger,
    plot_index: int,
    now: int,
    events: EventLog | None = None,
) -> PatternPreview:
    """Preview the patterns and projected yield at a plot without changing the ledger."""
    validate_index(plot_index, InvalidPlotIndex)
    plot = ledger.plots[plot_index]
    match = detect_at_index(ledger.plots, plot_index, now)
    projected = 0
    total = Fraction(1)
    if not plot.is_empty:
        crop_cfg = get_crop_config(plot.crop)
        totals = _bonuses_for(crop_cfg.crop_id, match)
        total = totals.total_multiplier
        if crop_cfg.is_mature(plot.planted_at, now):
            elapsed = now - crop_cfg.mature_at(plot.planted_at)
            base = crop_yield(
                crop_cfg,
                elapsed,
                plot.fertility,
                ledger.water_levels[plot_index],
                plot.planted_in_season,
            )
            projected = apply_multipliers(base, totals.multipliers)
    emit(
        events,
        PatternsPreview(
            owner=ledger.owner,
            tile_index=plot_index,
            pattern_types=tuple(int(p) for p in match.patterns),
            companion=None if match.companion is None else int(match.companion),
            projected_yield=projected,
        ),
    )
    return PatternPreview(
        patterns=match.patterns,
        companion=match.companion,
        total_multiplier=total,
        projected_yield=projected,
    )
