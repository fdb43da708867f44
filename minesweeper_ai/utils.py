"""Utility functions and shared presets for the Minesweeper logic agent."""

from typing import Dict, List, Tuple

# A board position as (row, column).
Cell = Tuple[int, int]

# Standard difficulty levels: name -> (height, width, mines_count)
DIFFICULTY_LEVELS: Dict[str, Tuple[int, int, int]] = {
    "beginner": (9, 9, 10),
    "intermediate": (16, 16, 40),
    "expert": (16, 30, 99),
}

# Module-level cache: (height, width) -> {(row, col): ((nr, nc), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[Tuple[int, int], Dict[Cell, Tuple[Cell, ...]]] = {}


def get_neighborhoods(height: int, width: int) -> Dict[Cell, Tuple[Cell, ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for every cell in a grid.

    Args:
        height: Grid height (number of rows). Must be positive.
        width: Grid width (number of columns). Must be positive.

    Returns:
        Mapping from each cell (row, col) to a tuple of valid neighboring
        coordinates (nr, nc) under 8-connectivity.

    Raises:
        ValueError: If height or width is non-positive.
    """
    if height <= 0 or width <= 0:
        raise ValueError("height and width must be positive.")

    key = (height, width)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Cell, Tuple[Cell, ...]] = {}
    for row in range(height):
        for col in range(width):
            nbrs: List[Cell] = []
            for dr in (-1, 0, 1):
                for dc in (-1, 0, 1):
                    if dr == 0 and dc == 0:
                        continue
                    nr, nc = row + dr, col + dc
                    if 0 <= nr < height and 0 <= nc < width:
                        nbrs.append((nr, nc))
            neighborhoods[(row, col)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def in_bounds(cell: Cell, height: int, width: int) -> bool:
    """Return True if cell lies on a height x width board."""
    row, col = cell
    return 0 <= row < height and 0 <= col < width
