import sys

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from farm.crop_catalog import CropId
from farm.ledger import Plot, new_ledger
from farm.storage import JsonStore
from farm.yield_chart import _parse_args, main, pattern_multiplier_grid, yield_curve


def test_yield_curve_shape_and_values():
    curve = yield_curve(CropId.WHEAT, [0, 20, 40, 60, 100], fertility=100, water=100, season=3)
    assert curve.tolist() == [100, 100, 60, 20, 20]
    grid = yield_curve(CropId.WHEAT, np.zeros((2, 3), dtype=int), fertility=100, water=100)
    assert grid.shape == (2, 3)


def test_yield_curve_defaults_to_first_valid_season():
    """Tomatoes only grow in summer, so the curve uses the summer modifier."""
    assert yield_curve(CropId.TOMATO, [0], fertility=100, water=100).tolist() == [300]


def test_pattern_multiplier_grid():
    plots = [Plot() for _ in range(25)]
    assert np.array_equal(pattern_multiplier_grid(plots, 100), np.ones((5, 5)))
    for idx in (0, 1, 2):
        plots[idx] = Plot(crop=int(CropId.WHEAT), planted_at=0, fertility=80)
    grid = pattern_multiplier_grid(plots, 100)
    assert grid[0, :3].tolist() == pytest.approx([1.15, 1.15, 1.15])
    assert grid[0, 3] == 1.0
    assert grid[1, 0] == 1.0


def test_parse_args():
    assert _parse_args(["yield_chart"]) == ("yield_curves.png", 80, 70, None, None)
    assert _parse_args(["yield_chart", "out.png", "--water", "30", "--state", "d", "--player", "p"]) == (
        "out.png",
        80,
        30,
        "d",
        "p",
    )
    with pytest.raises(ValueError):
        _parse_args(["yield_chart", "--state", "d"])
    with pytest.raises(ValueError):
        _parse_args(["yield_chart", "a.png", "b.png"])


def test_main_saves_chart(tmp_path, capsys, monkeypatch):
    store = JsonStore(tmp_path / "state")
    store.create_player(new_ledger("alice", 0))
    out = tmp_path / "chart.png"
    monkeypatch.setattr(
        sys, "argv", ["yield_chart", str(out), "--state", str(tmp_path / "state"), "--player", "alice"]
    )
    assert main() == 0
    assert out.exists()
    assert "chart saved" in capsys.readouterr().out
