from __future__ import annotations

from typing import Iterator

from farm.errors import FarmValidationError, InvalidTileIndex

GRID_SIZE = 5
TILE_COUNT = GRID_SIZE * GRID_SIZE

# Orthogonal scan order matters for companion detection: up, down, left, right.
ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
KING_MOVES = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)


def in_bounds(row: int, col: int) -> bool:
    """Return True if (row, col) lies on the grid."""
    return 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE


def index_of(row: int, col: int) -> int | None:
    """Return the row-major tile index, or None when off the grid.

    Negative coordinates never wrap around to the far edge.
    """
    if not in_bounds(row, col):
        return None
    return row * GRID_SIZE + col


def coords_of(index: int) -> tuple[int, int]:
    """Return (row, col) for a validated tile index."""
    return divmod(index, GRID_SIZE)


def validate_index(index: int, error: type[FarmValidationError] = InvalidTileIndex) -> int:
    """Return index if it addresses a tile, else raise the given error."""
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < TILE_COUNT:
        raise error(f"{error.default_message} (got {index!r})")
    return index


def neighbors(row: int, col: int, offsets=ORTHOGONAL) -> Iterator[tuple[int, int] | None]:
    """Yield neighbour coordinates in offset order, None for off-grid cells."""
    for d_row, d_col in offsets:
        r, c = row + d_row, col + d_col
        yield (r, c) if in_bounds(r, c) else None


def window_starts(position: int, length: int) -> list[int]:
    """Return every in-bounds start of a 1-D window of `length` covering position."""
    first = max(0, position - length + 1)
    last = min(position, GRID_SIZE - length)
    return list(range(first, last + 1))
