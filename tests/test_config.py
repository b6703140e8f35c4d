import dataclasses
import json

import pytest

from farm.config import CONFIG_ENV_VAR, GameConfig, load_game_config
from farm.crop_catalog import CROP_CATALOG, CropId
from farm.errors import InvalidCropConfig, InvalidGameConfig
from farm.validation import validate_crop_catalog, validate_game_config


def test_defaults():
    """Default config carries the standard game constants."""
    cfg = GameConfig()
    assert cfg.season_lengths == (30, 30, 30, 30)
    assert cfg.rotation_bonus == 10
    assert cfg.migrated_fertility == 60
    assert cfg.fallow_restore_rate == 3600
    validate_game_config(cfg)


def test_from_dict_partial_and_season_map():
    """Missing keys keep defaults; season lengths may be given by name."""
    cfg = GameConfig.from_dict({"rotation_bonus": 15, "season_lengths": {"summer": 45}})
    assert cfg.rotation_bonus == 15
    assert cfg.season_lengths == (30, 45, 30, 30)
    assert cfg.watering_cooldown == 3600


def test_from_dict_rejects_wrong_season_count():
    """Exactly four season lengths are required."""
    with pytest.raises(ValueError):
        GameConfig.from_dict({"season_lengths": [10, 10, 10]})


def test_load_game_config_from_env(tmp_path, monkeypatch):
    """$FARM_CONFIG_PATH is used when no explicit path is given."""
    path = tmp_path / "game.json"
    path.write_text(json.dumps({"water_decay_per_day": 7}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert load_game_config().water_decay_per_day == 7
    monkeypatch.delenv(CONFIG_ENV_VAR)
    assert load_game_config() == GameConfig()


@pytest.mark.parametrize(
    "raw",
    [
        {"fallow_restore_rate": 0},
        {"season_lengths": [30, 0, 30, 30]},
        {"player_fertility": 10},
        {"planting_water_level": 101},
        {"rotation_bonus": -1},
    ],
)
def test_load_game_config_rejects_invalid_values(tmp_path, raw):
    """Out-of-range settings fail validation."""
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(InvalidGameConfig):
        load_game_config(path)


def test_load_game_config_missing_file(tmp_path):
    """An unreadable config file is a configuration error."""
    with pytest.raises(InvalidGameConfig):
        load_game_config(tmp_path / "nope.json")


def test_crop_catalog_is_consistent():
    """The built-in crop table passes validation; a broken curve does not."""
    validate_crop_catalog()
    broken = dataclasses.replace(CROP_CATALOG[CropId.WHEAT], max_decay_time=10)
    with pytest.raises(InvalidCropConfig):
        validate_crop_catalog({CropId.WHEAT: broken})
