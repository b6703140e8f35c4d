from __future__ import annotations

from farm.config import GameConfig
from farm.crop_catalog import CROP_CATALOG, CropConfig
from farm.errors import InvalidCropConfig, InvalidGameConfig
from farm.ledger import MAX_FERTILITY, MIN_FERTILITY
from farm.resources import MAX_WATER


def validate_game_config(cfg: GameConfig) -> None:
    """Validate configuration invariants before any handler uses them."""
    for index, length in enumerate(cfg.season_lengths):
        if length < 1:
            raise InvalidGameConfig(f"season_lengths[{index}] must be >= 1 (got {length})")
    _ensure_non_negative(cfg.rotation_bonus, "rotation_bonus")
    _ensure_non_negative(cfg.water_decay_per_day, "water_decay_per_day")
    _ensure_non_negative(cfg.watering_cooldown, "watering_cooldown")
    if cfg.fallow_restore_rate < 1:
        raise InvalidGameConfig(f"fallow_restore_rate must be >= 1 (got {cfg.fallow_restore_rate})")
    _ensure_range(cfg.player_fertility, MIN_FERTILITY, MAX_FERTILITY, "player_fertility")
    _ensure_range(cfg.migrated_fertility, MIN_FERTILITY, MAX_FERTILITY, "migrated_fertility")
    _ensure_range(cfg.planting_water_level, 0, MAX_WATER, "planting_water_level")
    _ensure_range(cfg.starting_water_level, 0, MAX_WATER, "starting_water_level")


def validate_crop_catalog(catalog: dict = CROP_CATALOG) -> None:
    """Check the static crop table for impossible decay curves."""
    for crop in catalog.values():
        _validate_crop(crop)


def _validate_crop(crop: CropConfig) -> None:
    if crop.growth_time <= 0:
        raise InvalidCropConfig(f"{crop.crop_id.label}: growth_time must be > 0")
    if crop.max_decay_time <= crop.optimal_window:
        raise InvalidCropConfig(
            f"{crop.crop_id.label}: max_decay_time ({crop.max_decay_time}) must exceed "
            f"optimal_window ({crop.optimal_window})"
        )
    if crop.min_yield > crop.base_yield:
        raise InvalidCropConfig(f"{crop.crop_id.label}: min_yield exceeds base_yield")
    if crop.growth_stages < 2:
        raise InvalidCropConfig(f"{crop.crop_id.label}: needs at least 2 growth stages")
    if not crop.valid_seasons <= {0, 1, 2, 3}:
        raise InvalidCropConfig(f"{crop.crop_id.label}: unknown season in valid_seasons")


def _ensure_non_negative(value: int, name: str) -> None:
    if value < 0:
        raise InvalidGameConfig(f"{name} must be >= 0 (got {value})")


def _ensure_range(value: int, low: int, high: int, name: str) -> None:
    if not low <= value <= high:
        raise InvalidGameConfig(f"{name} must be between {low} and {high} (got {value})")
