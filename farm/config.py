from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import json
import os
from pathlib import Path

CONFIG_ENV_VAR = "FARM_CONFIG_PATH"


@dataclass(frozen=True)
class GameConfig:
    # Days per season: Spring, Summer, Fall, Winter.
    season_lengths: tuple[int, int, int, int] = (30, 30, 30, 30)
    # Fertility granted when a tile is replanted with a different crop.
    rotation_bonus: int = 10
    player_fertility: int = 80
    # Used when a plot's fertility was never initialized.
    migrated_fertility: int = 60
    # Seconds of fallow per fertility point restored.
    fallow_restore_rate: int = 3600
    planting_water_level: int = 70
    starting_water_level: int = 70
    watering_cooldown: int = 3600
    water_decay_per_day: int = 5

    @staticmethod
    def from_json_file(path: str | Path) -> "GameConfig":
        """Load config from a JSON file on disk."""
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
        return GameConfig.from_dict(raw)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "GameConfig":
        """Build config from a decoded JSON dict; missing keys keep their defaults."""
        defaults = GameConfig()
        lengths_raw = raw.get("season_lengths", defaults.season_lengths)
        if isinstance(lengths_raw, dict):
            lengths = tuple(
                int(lengths_raw.get(name, default))
                for name, default in zip(("spring", "summer", "fall", "winter"), defaults.season_lengths)
            )
        else:
            lengths = tuple(int(v) for v in lengths_raw)
        if len(lengths) != 4:
            raise ValueError(f"season_lengths needs 4 entries (got {len(lengths)})")
        return GameConfig(
            season_lengths=lengths,
            rotation_bonus=int(raw.get("rotation_bonus", defaults.rotation_bonus)),
            player_fertility=int(raw.get("player_fertility", defaults.player_fertility)),
            migrated_fertility=int(raw.get("migrated_fertility", defaults.migrated_fertility)),
            fallow_restore_rate=int(raw.get("fallow_restore_rate", defaults.fallow_restore_rate)),
            planting_water_level=int(raw.get("planting_water_level", defaults.planting_water_level)),
            starting_water_level=int(raw.get("starting_water_level", defaults.starting_water_level)),
            watering_cooldown=int(raw.get("watering_cooldown", defaults.watering_cooldown)),
            water_decay_per_day=int(raw.get("water_decay_per_day", defaults.water_decay_per_day)),
        )


def load_game_config(path: str | Path | None = None) -> GameConfig:
    """
    Load and validate the game config.
    Resolution order: explicit path, then $FARM_CONFIG_PATH, then built-in defaults.
    """
    from farm.errors import InvalidGameConfig
    from farm.validation import validate_game_config

    if path is None:
        path = os.getenv(CONFIG_ENV_VAR) or None
    try:
        cfg = GameConfig() if path is None else GameConfig.from_json_file(path)
    except (OSError, ValueError, TypeError) as exc:
        raise InvalidGameConfig(f"cannot load {path}: {exc}") from exc
    validate_game_config(cfg)
    return cfg
