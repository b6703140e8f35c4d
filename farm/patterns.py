"""Spatial synergy detection on the 5x5 farm grid.

Every check works on a snapshot that keeps only mature crops; empty, immature
and off-grid cells all read as None, so nothing near an edge can ever wrap
around to the opposite side.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from farm.crop_catalog import CROP_CATALOG, CropId
from farm.grid import GRID_SIZE, KING_MOVES, ORTHOGONAL, TILE_COUNT, coords_of, index_of, neighbors, window_starts
from farm.synergy import PatternType, get_companion_bonus

MIN_ROW_LENGTH = 3
BLOCK_SIZE = 2
CHECKER_SIZE = 3
ROTATION_LENGTH = 4

Snapshot = tuple[CropId | None, ...]


class PlotLike(Protocol):
    crop: int | None
    planted_at: int


@dataclass(frozen=True)
class PatternMatch:
    patterns: tuple[PatternType, ...]
    companion: CropId | None


def mature_snapshot(plots: Sequence[PlotLike], now: int) -> Snapshot:
    """Return a 25-tuple holding each tile's crop if mature at now, else None."""
    if len(plots) != TILE_COUNT:
        raise ValueError(f"expected {TILE_COUNT} plots, got {len(plots)}")
    cells = []
    for plot in plots:
        crop = plot.crop
        if not crop or crop not in CROP_CATALOG:
            cells.append(None)
            continue
        config = CROP_CATALOG[CropId(crop)]
        cells.append(config.crop_id if config.is_mature(plot.planted_at, now) else None)
    return tuple(cells)


def crop_at(snapshot: Snapshot, row: int, col: int) -> CropId | None:
    """Return the mature crop at (row, col), None when empty or off the grid."""
    idx = index_of(row, col)
    if idx is None:
        return None
    return snapshot[idx]


def _run_length(snapshot: Snapshot, row: int, col: int, d_row: int, d_col: int, crop: CropId) -> int:
    count = 0
    r, c = row + d_row, col + d_col
    while crop_at(snapshot, r, c) == crop:
        count += 1
        r, c = r + d_row, c + d_col
    return count


def check_monoculture_row(snapshot: Snapshot, row: int, col: int) -> bool:
    crop = crop_at(snapshot, row, col)
    if crop is None:
        return False
    horizontal = 1 + _run_length(snapshot, row, col, 0, -1, crop) + _run_length(snapshot, row, col, 0, 1, crop)
    if horizontal >= MIN_ROW_LENGTH:
        return True
    vertical = 1 + _run_length(snapshot, row, col, -1, 0, crop) + _run_length(snapshot, row, col, 1, 0, crop)
    return vertical >= MIN_ROW_LENGTH


def check_monoculture_block(snapshot: Snapshot, row: int, col: int) -> bool:
    crop = crop_at(snapshot, row, col)
    if crop is None:
        return False
    for top in (row - 1, row):
        for left in (col - 1, col):
            cells = [
                crop_at(snapshot, top + i, left + j)
                for i in range(BLOCK_SIZE)
                for j in range(BLOCK_SIZE)
            ]
            if all(cell == crop for cell in cells):
                return True
    return False


def _orthogonal_crops(snapshot: Snapshot, row: int, col: int) -> list[CropId | None]:
    return [crop_at(snapshot, row + d_row, col + d_col) for d_row, d_col in ORTHOGONAL]


def check_crop_diversity(snapshot: Snapshot, row: int, col: int) -> bool:
    center = crop_at(snapshot, row, col)
    if center is None:
        return False
    around = _orthogonal_crops(snapshot, row, col)
    if any(crop is None for crop in around):
        return False
    if center in around:
        return False
    return len(set(around)) == len(around)


def check_cross_pattern(snapshot: Snapshot, row: int, col: int) -> bool:
    center = crop_at(snapshot, row, col)
    if center is None:
        return False
    return all(crop == center for crop in _orthogonal_crops(snapshot, row, col))


def _is_checkerboard(snapshot: Snapshot, top: int, left: int) -> bool:
    even: CropId | None = None
    odd: CropId | None = None
    for i in range(CHECKER_SIZE):
        for j in range(CHECKER_SIZE):
            crop = crop_at(snapshot, top + i, left + j)
            if crop is None:
                return False
            if (i + j) % 2 == 0:
                if even is None:
                    even = crop
                elif crop != even:
                    return False
            else:
                if odd is None:
                    odd = crop
                elif crop != odd:
                    return False
    return even is not None and odd is not None and even != odd


def check_checkerboard(snapshot: Snapshot, row: int, col: int) -> bool:
    if crop_at(snapshot, row, col) is None:
        return False
    for top in window_starts(row, CHECKER_SIZE):
        for left in window_starts(col, CHECKER_SIZE):
            if _is_checkerboard(snapshot, top, left):
                return True
    return False


def check_perimeter_defense(snapshot: Snapshot, row: int, col: int) -> bool:
    center = crop_at(snapshot, row, col)
    if center is None:
        return False
    if not (1 <= row <= GRID_SIZE - 2 and 1 <= col <= GRID_SIZE - 2):
        return False
    for d_row, d_col in KING_MOVES:
        crop = crop_at(snapshot, row + d_row, col + d_col)
        # Border crops may repeat among themselves; they only have to differ from the center.
        if crop is None or crop == center:
            return False
    return True


def _all_distinct(crops: list[CropId | None]) -> bool:
    if any(crop is None for crop in crops):
        return False
    return len(set(crops)) == len(crops)


def check_rotation_sequence(snapshot: Snapshot, row: int, col: int) -> bool:
    if crop_at(snapshot, row, col) is None:
        return False
    for start in window_starts(col, ROTATION_LENGTH):
        if _all_distinct([crop_at(snapshot, row, c) for c in range(start, start + ROTATION_LENGTH)]):
            return True
    for start in window_starts(row, ROTATION_LENGTH):
        if _all_distinct([crop_at(snapshot, r, col) for r in range(start, start + ROTATION_LENGTH)]):
            return True
    return False


_CHECKS = (
    (PatternType.MONOCULTURE_ROW, check_monoculture_row),
    (PatternType.MONOCULTURE_BLOCK, check_monoculture_block),
    (PatternType.CROP_DIVERSITY, check_crop_diversity),
    (PatternType.CROSS_PATTERN, check_cross_pattern),
    (PatternType.CHECKERBOARD, check_checkerboard),
    (PatternType.PERIMETER_DEFENSE, check_perimeter_defense),
    (PatternType.ROTATION_SEQUENCE, check_rotation_sequence),
)


def detect_patterns(plots: Sequence[PlotLike], row: int, col: int, now: int) -> tuple[PatternType, ...]:
    """Return every grid pattern the cell at (row, col) takes part in, in enum order."""
    snapshot = mature_snapshot(plots, now)
    return detect_in_snapshot(snapshot, row, col)


def detect_in_snapshot(snapshot: Snapshot, row: int, col: int) -> tuple[PatternType, ...]:
    if crop_at(snapshot, row, col) is None:
        return ()
    return tuple(pattern for pattern, check in _CHECKS if check(snapshot, row, col))


def companion_in_snapshot(snapshot: Snapshot, row: int, col: int) -> CropId | None:
    center = crop_at(snapshot, row, col)
    if center is None:
        return None
    for cell in neighbors(row, col, ORTHOGONAL):
        if cell is None:
            continue
        neighbor = crop_at(snapshot, *cell)
        if neighbor is not None and get_companion_bonus(center, neighbor) is not None:
            return neighbor
    return None


def check_companion(plots: Sequence[PlotLike], row: int, col: int, now: int) -> CropId | None:
    """Return the first orthogonal neighbour (up, down, left, right) that is a companion crop."""
    return companion_in_snapshot(mature_snapshot(plots, now), row, col)


def detect_at_index(plots: Sequence[PlotLike], tile_index: int, now: int) -> PatternMatch:
    """Run pattern and companion detection for a tile index."""
    row, col = coords_of(tile_index)
    snapshot = mature_snapshot(plots, now)
    return PatternMatch(
        patterns=detect_in_snapshot(snapshot, row, col),
        companion=companion_in_snapshot(snapshot, row, col),
    )
