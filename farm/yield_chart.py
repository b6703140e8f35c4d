from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from matplotlib import colormaps, colors
import numpy as np

from farm.crop_catalog import CROP_CATALOG, CropId, get_crop_config
from farm.errors import FarmError
from farm.grid import GRID_SIZE, coords_of
from farm.patterns import PlotLike, companion_in_snapshot, detect_in_snapshot, mature_snapshot
from farm.storage import JsonStore
from farm.synergy import combine_bonuses, get_companion_bonus
from farm.yield_calc import crop_yield

DEFAULT_OUTPUT = "yield_curves.png"
DEFAULT_FERTILITY = 80
DEFAULT_WATER = 70


def yield_curve(
    crop_id: object,
    elapsed: Sequence[int] | np.ndarray,
    fertility: int = DEFAULT_FERTILITY,
    water: int = DEFAULT_WATER,
    season: int | None = None,
) -> np.ndarray:
    """Evaluate the pre-bonus harvest yield for each elapsed-since-maturity second."""
    crop = get_crop_config(crop_id)
    if season is None:
        season = min(crop.valid_seasons)
    values = [crop_yield(crop, int(t), fertility, water, season) for t in np.asarray(elapsed).ravel()]
    return np.array(values, dtype=int).reshape(np.shape(elapsed))


def pattern_multiplier_grid(plots: Sequence[PlotLike], now: int) -> np.ndarray:
    """Return a 5x5 grid of the combined pattern and companion multiplier per tile."""
    snapshot = mature_snapshot(plots, now)
    grid = np.ones((GRID_SIZE, GRID_SIZE), dtype=float)
    for index, crop in enumerate(snapshot):
        if crop is None:
            continue
        row, col = coords_of(index)
        companion = companion_in_snapshot(snapshot, row, col)
        bonus = None if companion is None else get_companion_bonus(crop, companion)
        totals = combine_bonuses(detect_in_snapshot(snapshot, row, col), bonus)
        grid[row, col] = float(totals.total_multiplier)
    return grid


def _curve_horizon() -> np.ndarray:
    longest = max(cfg.max_decay_time for cfg in CROP_CATALOG.values())
    return np.arange(0, longest + longest // 4 + 1)


def _parse_args(argv: list[str]) -> tuple[str, int, int, str | None, str | None]:
    """Parse CLI args into (output_path, fertility, water, state_dir, player)."""
    fertility = DEFAULT_FERTILITY
    water = DEFAULT_WATER
    state_dir: str | None = None
    player: str | None = None
    args: list[str] = []
    idx = 1
    while idx < len(argv):
        arg = argv[idx]
        if arg in ("--fertility", "--water", "--state", "--player"):
            if idx + 1 >= len(argv):
                raise ValueError(f"missing value for {arg}")
            value = argv[idx + 1]
            if arg == "--fertility":
                fertility = int(value)
            elif arg == "--water":
                water = int(value)
            elif arg == "--state":
                state_dir = value
            else:
                player = value
            idx += 2
            continue
        args.append(arg)
        idx += 1
    if len(args) > 1:
        raise ValueError("expected at most one output path")
    if (state_dir is None) != (player is None):
        raise ValueError("--state and --player must be given together")
    output_path = args[0] if args else DEFAULT_OUTPUT
    return output_path, fertility, water, state_dir, player


def _draw_heatmap(ax, grid: np.ndarray, owner: str) -> None:
    norm = colors.Normalize(vmin=1.0, vmax=max(1.0, float(np.max(grid))))
    image = ax.imshow(grid, cmap=colormaps.get_cmap("viridis"), norm=norm)
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            ax.text(col, row, f"{grid[row, col]:.2f}", ha="center", va="center", fontsize=8, color="white")
    ax.set_title(f"Pattern multiplier: {owner}")
    ax.set_xticks(range(GRID_SIZE))
    ax.set_yticks(range(GRID_SIZE))
    ax.figure.colorbar(image, ax=ax, shrink=0.8, label="Yield multiplier")


def main() -> int:
    """Plot every crop's yield curve and, optionally, a player's pattern multipliers."""
    try:
        output_path, fertility, water, state_dir, player = _parse_args(sys.argv)
    except ValueError as exc:
        print(f"error: {exc}")
        print("Usage: python -m farm.yield_chart [output.png] [--fertility N] [--water N] [--state DIR --player ID]")
        return 2

    grid = None
    if state_dir is not None:
        try:
            ledger = JsonStore(state_dir).load_player(player)
        except FarmError as exc:
            print(f"error: {exc.code}: {exc}")
            return 1
        grid = pattern_multiplier_grid(ledger.plots, int(time.time()))

    elapsed = _curve_horizon()
    print(f"fertility={fertility} water={water}")
    fig, axes = plt.subplots(1, 2 if grid is not None else 1, figsize=(16 if grid is not None else 10, 6))
    ax = axes[0] if grid is not None else axes
    for crop_id in CropId:
        curve = yield_curve(crop_id, elapsed, fertility, water)
        ax.plot(elapsed, curve, label=crop_id.label, linewidth=2)
        print(f"  {crop_id.label}: peak {int(curve.max())}, floor {int(curve.min())}")
    ax.set_title(f"Harvest yield after maturity (fertility {fertility}, water {water})")
    ax.set_xlabel("Seconds since maturity")
    ax.set_ylabel("Coins")
    ax.legend()
    ax.grid(True, alpha=0.2)

    if grid is not None:
        _draw_heatmap(axes[1], grid, player)

    output_path = str(Path(output_path))
    fig.tight_layout()
    fig.savefig(output_path, dpi=200)
    print(f"\nchart saved to {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
