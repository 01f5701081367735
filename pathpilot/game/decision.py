"""
Goal selection for the autonomous agent.

The DecisionPolicy answers one question: given the level right now, where
should the agent go and how should it weigh the route? Each call takes a
fresh GridSnapshot, picks a target through the targeting helpers, builds the
matching cost model and runs one A* search over the policy's node array
(two when an outmatched agent cannot reach its recovery item).

Rules, evaluated in order:

1. A live threat exists:
   a. health <= threat strength: head for the nearest recovery item
      (RECOVERY). With no recovery item on the level, or none reachable, go
      for the threat anyway (THREAT).
   b. health below WOUNDED_HEALTH_THRESHOLD: go for the threat, routing
      through recovery items where it is cheap (THREAT, recovery-aware cost).
   c. otherwise: go straight for the threat (THREAT).
2. No live threat: head for the exit (EXIT), or do nothing (NONE).

An empty path means the goal is either unreachable or already under the
agent's feet; ``Decision.reached`` tells the two apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING

from pathpilot import config
from pathpilot.game.cost_model import BaseCostModel, RecoveryAwareCostModel
from pathpilot.game.targeting import (
    exit_target,
    nearest_recovery_item,
    nearest_threat,
)
from pathpilot.util.pathfinding import (
    HeuristicFunction,
    euclidean,
    find_path,
    make_nodes,
    reset_nodes,
)

if TYPE_CHECKING:
    from pathpilot.game.entities import Locatable
    from pathpilot.game.game_world import GameWorld, GridSnapshot
    from pathpilot.types import Path, WorldTilePos

logger = logging.getLogger(__name__)


class DecisionState(Enum):
    """Which kind of goal the current path serves. Display only."""

    NONE = auto()
    THREAT = auto()
    RECOVERY = auto()
    EXIT = auto()


@dataclass
class Decision:
    """Result of one planning call.

    Attributes:
        state: Kind of goal being pursued.
        path: Move codes from the agent to the goal, start excluded.
        target: The entity chosen as goal, if any.
        goal: The goal cell, if any.
        cost_model: The cost model the search ran with, if a search ran.
        reached: True if the agent already stands on the goal.
    """

    state: DecisionState = DecisionState.NONE
    path: Path = field(default_factory=list)
    target: Locatable | None = None
    goal: WorldTilePos | None = None
    cost_model: BaseCostModel | None = None
    reached: bool = False


class DecisionPolicy:
    """Chooses a goal and plans a route to it on a GameWorld."""

    def __init__(
        self,
        world: GameWorld,
        *,
        heuristic: HeuristicFunction = euclidean,
        weight: float = config.HEURISTIC_WEIGHT,
    ) -> None:
        self.world = world
        self.heuristic = heuristic
        self.weight = weight
        self.nodes = make_nodes(world.grid.values)

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def decide_next_action(self) -> Decision:
        """Pick the next goal from the agent's vitals and plan a route to it."""
        snapshot = self.world.snapshot()
        agent = snapshot.agent
        threat = nearest_threat(snapshot)

        if threat is not None:
            if agent.health <= threat.strength:
                item = nearest_recovery_item(snapshot)
                recovery = None
                if item is not None:
                    recovery = self._plan(
                        snapshot,
                        DecisionState.RECOVERY,
                        item,
                        BaseCostModel(snapshot, goal=item.position),
                    )
                if recovery is not None and (recovery.path or recovery.reached):
                    decision = recovery
                else:
                    # No item, or none reachable: fight anyway.
                    decision = self._plan(
                        snapshot,
                        DecisionState.THREAT,
                        threat,
                        BaseCostModel(snapshot, target=threat, goal=threat.position),
                    )
            elif agent.health < config.WOUNDED_HEALTH_THRESHOLD:
                decision = self._plan(
                    snapshot,
                    DecisionState.THREAT,
                    threat,
                    RecoveryAwareCostModel(
                        snapshot, target=threat, goal=threat.position
                    ),
                )
            else:
                decision = self._plan(
                    snapshot,
                    DecisionState.THREAT,
                    threat,
                    BaseCostModel(snapshot, target=threat, goal=threat.position),
                )
        else:
            exit_point = exit_target(snapshot)
            if exit_point is not None:
                decision = self._plan(
                    snapshot,
                    DecisionState.EXIT,
                    exit_point,
                    BaseCostModel(snapshot, goal=exit_point.position),
                )
            else:
                decision = Decision()

        logger.debug(
            f"Decided {decision.state.name} -> {decision.goal} "
            f"({len(decision.path)} moves, health={agent.health:.1f})"
        )
        return decision

    # ------------------------------------------------------------------
    # Direct planning (one-shot commands)
    # ------------------------------------------------------------------

    def plan_path_to(self, x: int, y: int) -> Decision:
        """Plan a route to an arbitrary tile. Out-of-bounds yields an empty path."""
        snapshot = self.world.snapshot()
        if not snapshot.grid.in_bounds(x, y):
            logger.debug(f"Goal ({x}, {y}) is outside the grid")
            return Decision()
        return self._plan(
            snapshot, DecisionState.NONE, None, BaseCostModel(snapshot, goal=(x, y))
        )

    def plan_path_to_threat(self) -> Decision:
        """Plan straight to the nearest live threat, ignoring vitals."""
        snapshot = self.world.snapshot()
        threat = nearest_threat(snapshot)
        if threat is None:
            return Decision()
        return self._plan(
            snapshot,
            DecisionState.THREAT,
            threat,
            BaseCostModel(snapshot, target=threat, goal=threat.position),
        )

    def plan_path_to_recovery(self) -> Decision:
        """Plan to the nearest recovery item, ignoring vitals."""
        snapshot = self.world.snapshot()
        item = nearest_recovery_item(snapshot)
        if item is None:
            return Decision()
        return self._plan(
            snapshot,
            DecisionState.RECOVERY,
            item,
            BaseCostModel(snapshot, goal=item.position),
        )

    def plan_path_to_exit(self) -> Decision:
        """Plan to the exit. Sealed while hostiles live, unless it is the goal."""
        snapshot = self.world.snapshot()
        exit_point = exit_target(snapshot)
        if exit_point is None:
            return Decision()
        return self._plan(
            snapshot,
            DecisionState.EXIT,
            exit_point,
            BaseCostModel(snapshot, goal=exit_point.position),
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _plan(
        self,
        snapshot: GridSnapshot,
        state: DecisionState,
        target: Locatable | None,
        cost_model: BaseCostModel,
    ) -> Decision:
        goal = cost_model.goal
        assert goal is not None
        if len(self.nodes) != snapshot.rows * snapshot.cols:
            self.nodes = make_nodes(snapshot.grid.values)
        reset_nodes(self.nodes, snapshot.grid.values)
        path = find_path(
            self.nodes,
            snapshot.agent_pos,
            goal,
            snapshot.cols,
            cost_model,
            self.heuristic,
            self.weight,
        )
        return Decision(
            state=state,
            path=path,
            target=target,
            goal=goal,
            cost_model=cost_model,
            reached=snapshot.agent_pos == goal,
        )
