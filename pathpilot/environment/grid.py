"""
Tile grid storage for a single level.

A TileGrid holds the traversal value of every cell in a numpy float array
indexed ``values[x, y]``, the same (width, height) layout the rest of the
engine uses. ``math.inf`` marks a wall. Values are otherwise non-negative;
higher values are cheaper to cross (see ``config.MOVE_COST_SCALE``).

The grid is owned by the world collaborator. The search engine never reads
it directly: it is copied into a node array before every search.
"""

from __future__ import annotations

import math

import numpy as np

from pathpilot.types import TraversalValue, WorldTileCoord


class TileGrid:
    """Traversal values for a rectangular level."""

    def __init__(self, values: np.ndarray) -> None:
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 2:
            raise ValueError(f"Tile grid must be 2D, got shape {values.shape}")
        if np.isnan(values).any():
            raise ValueError("Tile grid contains NaN traversal values")
        if (values < 0).any():
            raise ValueError("Tile grid contains negative traversal values")
        self.values = values

    @classmethod
    def filled(
        cls, width: int, height: int, value: TraversalValue = 1.0
    ) -> TileGrid:
        """Create a grid where every cell has the same traversal value."""
        return cls(np.full((width, height), value, dtype=np.float64, order="F"))

    @property
    def width(self) -> int:
        return self.values.shape[0]

    @property
    def height(self) -> int:
        return self.values.shape[1]

    @property
    def cols(self) -> int:
        return self.width

    @property
    def rows(self) -> int:
        return self.height

    def in_bounds(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def value_at(self, x: WorldTileCoord, y: WorldTileCoord) -> TraversalValue:
        return float(self.values[x, y])

    def is_wall(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        return math.isinf(self.values[x, y])

    def is_passable(self, x: WorldTileCoord, y: WorldTileCoord) -> bool:
        """True if (x, y) is inside the grid and not a wall."""
        return self.in_bounds(x, y) and not self.is_wall(x, y)

    def passable_positions(self) -> list[tuple[int, int]]:
        """All non-wall cells in row-major (y, x) order."""
        xs, ys = np.nonzero(np.isfinite(self.values))
        positions = zip(xs.tolist(), ys.tolist(), strict=True)
        return sorted(positions, key=lambda p: (p[1], p[0]))

    def __repr__(self) -> str:
        return f"TileGrid(width={self.width}, height={self.height})"
