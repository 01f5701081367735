"""
Edge cost strategies for the search engine.

A cost model is built from a GridSnapshot for one search and then called as
``cost(current, neighbor)`` by ``find_path``. It owns every blocking rule so
the search engine stays generic:

- walls (traversal value inf) are never entered;
- a live hostile blocks its cell, unless it is the hostile being pursued;
- exits are sealed while any hostile is alive, unless the exit is the goal.

The recovery-aware variant additionally halves the cost of cells holding a
recovery item, so a wounded agent drifts through health packs on its way to
a threat without making them the goal.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from pathpilot import config

if TYPE_CHECKING:
    from pathpilot.game.entities import Hostile
    from pathpilot.game.game_world import GridSnapshot
    from pathpilot.types import WorldTilePos
    from pathpilot.util.pathfinding import SearchNode


def traversal_cost(value: float) -> float:
    """Cost of stepping onto a cell with the given traversal value.

    Also used as the energy drain of an actual move.
    """
    if math.isinf(value):
        return math.inf
    return 1.0 / (value + 1.0) * config.MOVE_COST_SCALE


class BaseCostModel:
    """Terrain cost plus hostile and exit blocking."""

    name = "base"

    def __init__(
        self,
        snapshot: GridSnapshot,
        *,
        target: Hostile | None = None,
        goal: WorldTilePos | None = None,
    ) -> None:
        """
        Args:
            snapshot: The view this search plans against.
            target: The hostile being pursued. It does not block its own cell.
            goal: The goal cell. An exit on this cell stays open even while
                hostiles are alive.
        """
        self.target = target
        self.goal = goal
        self._blocked: set[WorldTilePos] = {
            h.position for h in snapshot.live_hostiles() if h is not target
        }
        if snapshot.any_hostile_alive():
            self._blocked.update(
                pos for pos in snapshot.exit_positions() if pos != goal
            )

    def is_blocked(self, x: int, y: int) -> bool:
        return (x, y) in self._blocked

    def step_cost(self, node: SearchNode) -> float:
        return traversal_cost(node.value)

    def __call__(self, current: SearchNode, neighbor: SearchNode) -> float:
        if math.isinf(neighbor.value) or (neighbor.x, neighbor.y) in self._blocked:
            return math.inf
        return self.step_cost(neighbor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(goal={self.goal})"


class RecoveryAwareCostModel(BaseCostModel):
    """Base cost model that discounts cells holding a recovery item."""

    name = "recovery_aware"

    def __init__(
        self,
        snapshot: GridSnapshot,
        *,
        target: Hostile | None = None,
        goal: WorldTilePos | None = None,
    ) -> None:
        super().__init__(snapshot, target=target, goal=goal)
        self._discounted = snapshot.recovery_positions()

    def step_cost(self, node: SearchNode) -> float:
        cost = super().step_cost(node)
        if (node.x, node.y) in self._discounted:
            cost *= config.RECOVERY_DISCOUNT
        return cost
