from __future__ import annotations

import heapq
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np

from pathpilot.types import Direction, MoveCode, Path, WorldTilePos

logger = logging.getLogger(__name__)

# 8-way move encoding. The index into this table is the move code.
DIRECTIONS: tuple[Direction, ...] = (
    (0, -1),  # 0 N
    (1, -1),  # 1 NE
    (1, 0),  # 2 E
    (1, 1),  # 3 SE
    (0, 1),  # 4 S
    (-1, 1),  # 5 SW
    (-1, 0),  # 6 W
    (-1, -1),  # 7 NW
)

_CODE_FOR_DIRECTION: dict[Direction, MoveCode] = {
    direction: code for code, direction in enumerate(DIRECTIONS)
}


@dataclass(slots=True, eq=False)
class SearchNode:
    """Per-cell search bookkeeping.

    ``visited`` means the node has been opened (given a g value) during the
    current search, ``closed`` means it has been popped and finalized.
    ``prev`` is the predecessor on the best known route.
    """

    x: int
    y: int
    value: float
    g: float = 0.0
    h: float = 0.0
    f: float = 0.0
    visited: bool = False
    closed: bool = False
    prev: SearchNode | None = None

    def reset(self) -> None:
        self.g = self.h = self.f = 0.0
        self.visited = self.closed = False
        self.prev = None


CostFunction: TypeAlias = Callable[[SearchNode, SearchNode], float]
HeuristicFunction: TypeAlias = Callable[[SearchNode, SearchNode], float]


def make_nodes(values: np.ndarray) -> list[SearchNode]:
    """Build a node array from a ``values[x, y]`` grid.

    The returned list is row-major: cell (x, y) lives at ``y * cols + x``
    where ``cols = values.shape[0]``.
    """
    cols, rows = values.shape
    return [
        SearchNode(x, y, float(values[x, y]))
        for y in range(rows)
        for x in range(cols)
    ]


def reset_nodes(nodes: Sequence[SearchNode], values: np.ndarray | None = None) -> None:
    """Clear all search state. Must be called before every search.

    If ``values`` is given, each node's traversal value is refreshed from it
    as well, so terrain edits between searches are picked up.
    """
    for node in nodes:
        node.reset()
        if values is not None:
            node.value = float(values[node.x, node.y])


def euclidean(a: SearchNode, b: SearchNode) -> float:
    """Straight-line distance between two nodes, in tiles."""
    return math.hypot(a.x - b.x, a.y - b.y)


def direction_for(dx: int, dy: int) -> MoveCode:
    """Return the move code for a unit step. Raises KeyError if not a unit step."""
    return _CODE_FOR_DIRECTION[(dx, dy)]  # type: ignore[index]


def delta_for(code: MoveCode) -> Direction:
    """Return the (dx, dy) step for a move code."""
    return DIRECTIONS[code]


def path_to_positions(
    start: WorldTilePos, path: Sequence[MoveCode]
) -> list[WorldTilePos]:
    """Expand a move-code path into the tiles it visits, start excluded."""
    x, y = start
    positions: list[WorldTilePos] = []
    for code in path:
        dx, dy = DIRECTIONS[code]
        x += dx
        y += dy
        positions.append((x, y))
    return positions


def find_path(
    nodes: Sequence[SearchNode],
    start: WorldTilePos,
    goal: WorldTilePos,
    cols: int,
    cost: CostFunction,
    heuristic: HeuristicFunction = euclidean,
    weight: float = 1.0,
) -> Path:
    """A* search over a pre-reset node array with 8-way movement.

    The search engine knows nothing about walls, hostiles or items: every
    blocking rule lives in ``cost``, which returns ``math.inf`` for a move
    that is not allowed. ``heuristic`` is scaled by ``weight``; values above
    1.0 make the search greedier.

    The open set is a binary heap of ``(f, y, x)`` so nodes with equal f are
    popped in row-major order. Improved nodes are pushed again and stale
    heap entries are skipped when popped.

    Args:
        nodes: Row-major node array of length rows * cols, already reset.
        start: (x, y) starting cell.
        goal: (x, y) target cell.
        cols: Row width used for index arithmetic.
        cost: Edge cost ``cost(current, neighbor)``.
        heuristic: Estimate ``heuristic(node, goal)``.
        weight: Multiplier applied to the heuristic.

    Returns:
        Move codes from start to goal, excluding the start cell. Empty if
        the goal is unreachable, out of bounds, or equal to the start.
    """
    rows = len(nodes) // cols if cols > 0 else 0

    def in_bounds(x: int, y: int) -> bool:
        return 0 <= x < cols and 0 <= y < rows

    if not in_bounds(*start):
        logger.warning(f"A* start {start} is outside the {cols}x{rows} grid")
        return []
    if not in_bounds(*goal):
        return []

    start_node = nodes[start[1] * cols + start[0]]
    goal_node = nodes[goal[1] * cols + goal[0]]

    start_node.g = 0.0
    start_node.h = weight * heuristic(start_node, goal_node)
    start_node.f = start_node.h
    start_node.visited = True

    open_heap: list[tuple[float, int, int]] = [
        (start_node.f, start_node.y, start_node.x)
    ]
    expanded = 0

    while open_heap:
        f, y, x = heapq.heappop(open_heap)
        current = nodes[y * cols + x]
        if current.closed or f != current.f:
            continue
        current.closed = True
        expanded += 1

        if current is goal_node:
            path = _reconstruct(current)
            logger.debug(
                f"A* {start} -> {goal}: {len(path)} moves, {expanded} expanded"
            )
            return path

        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if not in_bounds(nx, ny):
                continue
            neighbor = nodes[ny * cols + nx]
            if neighbor.closed:
                continue
            step_cost = cost(current, neighbor)
            if math.isinf(step_cost):
                continue
            tentative_g = current.g + step_cost
            if neighbor.visited and tentative_g >= neighbor.g:
                continue
            neighbor.g = tentative_g
            neighbor.h = weight * heuristic(neighbor, goal_node)
            neighbor.f = neighbor.g + neighbor.h
            neighbor.prev = current
            neighbor.visited = True
            heapq.heappush(open_heap, (neighbor.f, ny, nx))

    logger.debug(f"A* {start} -> {goal}: unreachable after {expanded} expanded")
    return []


def _reconstruct(end: SearchNode) -> Path:
    """Walk back-pointers from ``end`` and emit move codes in travel order."""
    path: Path = []
    node = end
    while node.prev is not None:
        prev = node.prev
        path.append(direction_for(node.x - prev.x, node.y - prev.y))
        node = prev
    path.reverse()
    return path
