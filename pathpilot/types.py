from __future__ import annotations

from typing import Literal, TypeAlias

# =============================================================================
# SPATIAL TYPES
# =============================================================================

TileCoord: TypeAlias = int  # Always integer tile position

# World coordinates - absolute positions on the level grid
WorldTileCoord: TypeAlias = TileCoord  # Example: x=5, y=3
WorldTilePos: TypeAlias = tuple[
    WorldTileCoord, WorldTileCoord
]  # Example: (5, 3) = tile 5,3 on the grid

# Directions - discrete grid steps
UnitStep: TypeAlias = Literal[-1, 0, 1]
Direction: TypeAlias = tuple[UnitStep, UnitStep]  # Example: (-1, 0) = westward step

# Encoded 8-way move: 0=N, 1=NE, 2=E, 3=SE, 4=S, 5=SW, 6=W, 7=NW
MoveCode: TypeAlias = int

# A route as produced by the search engine, start cell excluded.
Path: TypeAlias = list[MoveCode]

# Traversal value of a single cell. math.inf marks a wall.
TraversalValue: TypeAlias = float

# =============================================================================
# GAME-RELATED TYPES
# =============================================================================

# Random seed for deterministic generation (teleport destinations, etc.)
# Can be an int for numeric seeds or a descriptive string like "burrito1".
RandomSeed = int | str | None
