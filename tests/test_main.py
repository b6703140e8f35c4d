import json
import sys

from farm.main import _parse_args, format_result, main
from farm.season import SeasonClock
from farm.storage import JsonStore


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["farm.main", *argv])
    return main()


def test_main_round_trip(tmp_path, capsys, monkeypatch):
    """initPlayer, plant and harvest through the CLI."""
    state = str(tmp_path)
    assert _run(monkeypatch, state, "admin", "initSeason", "--now", "0") == 0
    assert _run(monkeypatch, state, "alice", "initPlayer", "--now", "0") == 0
    assert _run(monkeypatch, state, "alice", "plantCrop", "0", "wheat", "--now", "100") == 0
    capsys.readouterr()
    assert _run(monkeypatch, state, "alice", "harvestCrop", "0", "--now=130") == 0
    out = capsys.readouterr().out
    assert "final_yield=96" in out
    assert "event CropHarvested" in out
    assert JsonStore(tmp_path).load_player("alice").coins == 96


def test_main_reports_engine_errors(tmp_path, capsys, monkeypatch):
    """Engine failures exit 1 with the error code."""
    assert _run(monkeypatch, str(tmp_path), "alice", "harvestCrop", "0", "--now", "0") == 1
    assert "error: PlayerNotFound" in capsys.readouterr().out


def test_main_usage_errors(tmp_path, capsys, monkeypatch):
    """Missing positionals, unknown commands and wrong arity exit 2."""
    assert _run(monkeypatch, str(tmp_path), "alice") == 2
    assert _run(monkeypatch, str(tmp_path), "alice", "stealCoins") == 2
    assert _run(monkeypatch, str(tmp_path), "alice", "plantCrop", "0") == 2
    out = capsys.readouterr().out
    assert "Usage:" in out
    assert "plantCrop TILE_INDEX CROP_TYPE" in out


def test_main_uses_config_file(tmp_path, capsys, monkeypatch):
    """--config overrides the game constants."""
    cfg = tmp_path / "game.json"
    cfg.write_text(json.dumps({"season_lengths": [1, 1, 1, 1]}), encoding="utf-8")
    state = str(tmp_path / "state")
    _run(monkeypatch, state, "admin", "initSeason", "--now", "0")
    assert _run(monkeypatch, state, "admin", "advanceDay", "--config", str(cfg), "--now", "0") == 0
    assert "season=Summer" in capsys.readouterr().out


def test_parse_args():
    args, now, verbose, config = _parse_args(["farm", "dir", "alice", "waterTile", "3", "-v", "--now", "77"])
    assert args == ["dir", "alice", "waterTile", "3"]
    assert now == 77
    assert verbose
    assert config is None


def test_format_result():
    assert format_result(None) == "ok"
    assert format_result(SeasonClock(authority="admin")).startswith("season=Spring day=0")
