"""
Per-tick autoplay driver.

The driver turns the decision policy's path into one step per external tick.
It owns no clock: a caller-owned scheduler (a GUI timer, a game loop, a test)
calls ``tick()`` every ``config.AUTOPLAY_TICK_INTERVAL_MS`` or as it sees fit,
and inspects the returned TickResult.

Two modes:

- CONTINUOUS (``start()``): when the path runs out the driver asks the policy
  for a fresh decision and tries one more step straight away. It stops only
  when that new decision has nothing to walk either.
- ONE_SHOT (``goto()``, ``approach_nearest_threat()``,
  ``approach_nearest_recovery()``): the driver walks a single planned path
  and stops at its end.

Either way the driver halts as soon as the agent's health or energy hits
zero.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING

from pathpilot.events import (
    AutoplayStoppedEvent,
    DecisionEvent,
    MessageEvent,
    publish_event,
)
from pathpilot.game.decision import Decision, DecisionPolicy, DecisionState
from pathpilot.game.movement import MovementExecutor, MoveResult, WorldMoveExecutor
from pathpilot.util.pathfinding import delta_for

if TYPE_CHECKING:
    from pathpilot.game.game_world import GameWorld
    from pathpilot.types import Direction, Path

logger = logging.getLogger(__name__)


class AutoplayMode(Enum):
    CONTINUOUS = auto()
    ONE_SHOT = auto()


class TickStatus(Enum):
    MOVED = auto()  # A step was handed to the executor and succeeded.
    BLOCKED = auto()  # A step was handed to the executor and refused.
    STOPPED = auto()  # Nothing left to do, or the driver was not running.
    HALTED = auto()  # The agent is out of health or energy.


@dataclass
class TickResult:
    status: TickStatus
    move: Direction | None = None
    move_result: MoveResult | None = None
    replanned: bool = False

    @property
    def done(self) -> bool:
        return self.status in (TickStatus.STOPPED, TickStatus.HALTED)


class AutoplayDriver:
    """Walks the agent along planned paths, one move per tick."""

    def __init__(
        self,
        world: GameWorld,
        executor: MovementExecutor | None = None,
        policy: DecisionPolicy | None = None,
    ) -> None:
        self.world = world
        self.executor = executor if executor is not None else WorldMoveExecutor(world)
        self.policy = policy if policy is not None else DecisionPolicy(world)
        self.path: Path = []
        self.path_index = 0
        self.state = DecisionState.NONE
        self.mode = AutoplayMode.CONTINUOUS
        self.active = False
        self.last_decision: Decision | None = None

    @property
    def remaining_moves(self) -> int:
        return len(self.path) - self.path_index

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def decide_next_action(self) -> Decision:
        """Ask the policy for a new goal and adopt its path."""
        decision = self.policy.decide_next_action()
        self._adopt(decision)
        return decision

    def plan_path_to(self, x: int, y: int) -> Decision:
        """Plan to an arbitrary tile and adopt the path."""
        decision = self.policy.plan_path_to(x, y)
        self._adopt(decision)
        return decision

    def _adopt(self, decision: Decision) -> None:
        self.last_decision = decision
        self.path = list(decision.path)
        self.path_index = 0
        self.state = decision.state
        publish_event(DecisionEvent(decision.state, decision.goal, len(decision.path)))

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Begin continuous autoplay. Returns False if the agent cannot act."""
        self.stop()
        if not self.world.agent.is_active:
            publish_event(MessageEvent("The agent cannot move."))
            return False
        self.mode = AutoplayMode.CONTINUOUS
        self.active = True
        self.decide_next_action()
        logger.info(f"Autoplay started, heading for {self.state.name}")
        return True

    def goto(self, x: int, y: int) -> bool:
        """Walk once to (x, y). Returns False if there is no route."""
        self.stop()
        decision = self.plan_path_to(x, y)
        if not decision.path:
            publish_event(MessageEvent(f"Cannot reach ({x}, {y})."))
            return False
        return self._start_one_shot()

    def approach_nearest_threat(self) -> bool:
        """Walk once to the nearest live hostile."""
        self.stop()
        decision = self.policy.plan_path_to_threat()
        self._adopt(decision)
        if not decision.path:
            publish_event(MessageEvent("No enemies found."))
            return False
        publish_event(MessageEvent("Moving towards enemy..."))
        return self._start_one_shot()

    def approach_nearest_recovery(self) -> bool:
        """Walk once to the nearest recovery item."""
        self.stop()
        decision = self.policy.plan_path_to_recovery()
        self._adopt(decision)
        if not decision.path:
            publish_event(MessageEvent("No health packs found."))
            return False
        publish_event(MessageEvent("Moving towards health pack..."))
        return self._start_one_shot()

    def _start_one_shot(self) -> bool:
        if not self.world.agent.is_active:
            self.stop()
            return False
        self.mode = AutoplayMode.ONE_SHOT
        self.active = True
        return True

    def stop(self, reason: str = "stopped") -> None:
        """Drop the held path and go idle."""
        was_active = self.active
        self.path = []
        self.path_index = 0
        self.state = DecisionState.NONE
        self.mode = AutoplayMode.CONTINUOUS
        self.active = False
        if was_active:
            logger.info(f"Autoplay stopped: {reason}")
            publish_event(AutoplayStoppedEvent(reason))

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def next_step(self) -> Direction | None:
        """Pop the next move of the held path as a (dx, dy) delta.

        Returns None if the agent cannot act or the path is exhausted.
        """
        if not self.world.agent.is_active:
            return None
        if self.path_index >= len(self.path):
            return None
        code = self.path[self.path_index]
        self.path_index += 1
        return delta_for(code)

    def tick(self) -> TickResult:
        """Advance autoplay by at most one move and one replan."""
        if not self.active:
            return TickResult(TickStatus.STOPPED)

        agent = self.world.agent
        if not agent.is_active:
            self.stop("agent defeated")
            return TickResult(TickStatus.HALTED)

        replanned = False
        move = self.next_step()
        if move is None:
            if self.mode is AutoplayMode.ONE_SHOT:
                self.stop("path complete")
                return TickResult(TickStatus.STOPPED)
            self.decide_next_action()
            replanned = True
            move = self.next_step()
            if move is None:
                self.stop("nothing left to do")
                return TickResult(TickStatus.STOPPED, replanned=replanned)

        result = self.executor.move(*move)

        if not agent.is_active:
            self.stop("agent defeated")
            return TickResult(TickStatus.HALTED, move, result, replanned)

        if not result.succeeded:
            # The held path no longer matches the world.
            logger.debug(f"Move {move} refused: {result.block_reason}")
            self.path = []
            self.path_index = 0
            return TickResult(TickStatus.BLOCKED, move, result, replanned)

        return TickResult(TickStatus.MOVED, move, result, replanned)

    def run(self, max_ticks: int = 10_000) -> list[TickResult]:
        """Tick until the driver stops or ``max_ticks`` is reached."""
        results: list[TickResult] = []
        for _ in range(max_ticks):
            result = self.tick()
            results.append(result)
            if result.done:
                break
        return results
