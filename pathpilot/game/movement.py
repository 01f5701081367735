"""
Reference movement executor.

The autoplay driver only decides *which way* to step. Whatever applies the
step to the world (energy drain, pickups, fights) is a collaborator behind
the ``MovementExecutor`` protocol. ``WorldMoveExecutor`` is the stock
implementation over a GameWorld, applying effects in this order after a
successful step:

1. recovery item pickup (health capped at MAX_HEALTH);
2. hostile encounter, dispatched on the hostile's kind;
3. poison clouds damage the agent and decay;
4. exit arrival.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from pathpilot import config
from pathpilot.events import (
    AgentDefeatedEvent,
    ExitReachedEvent,
    HostileDefeatedEvent,
    MessageEvent,
    publish_event,
)
from pathpilot.game.cost_model import traversal_cost
from pathpilot.game.entities import Hostile, HostileKind, PoisonCloud, RecoveryItem
from pathpilot.util import rng

if TYPE_CHECKING:
    from pathpilot.game.game_world import GameWorld

logger = logging.getLogger(__name__)

_rng = rng.get("world.teleport")


@dataclass
class MoveResult:
    """Outcome of a single step.

    ``block_reason`` is one of "out_of_bounds", "wall" or "exhausted" when
    the step did not happen.
    """

    succeeded: bool = True
    block_reason: str | None = None
    picked_up: RecoveryItem | None = None
    encountered: Hostile | None = None
    reached_exit: bool = False


class MovementExecutor(Protocol):
    """Applies a single (dx, dy) step of the agent to the world."""

    def move(self, dx: int, dy: int) -> MoveResult: ...


class WorldMoveExecutor:
    """Moves the agent on a GameWorld and resolves what it steps into."""

    def __init__(self, world: GameWorld) -> None:
        self.world = world

    def move(self, dx: int, dy: int) -> MoveResult:
        world = self.world
        agent = world.agent
        new_x, new_y = agent.x + dx, agent.y + dy

        if not world.grid.in_bounds(new_x, new_y):
            return MoveResult(succeeded=False, block_reason="out_of_bounds")
        if world.grid.is_wall(new_x, new_y):
            return MoveResult(succeeded=False, block_reason="wall")

        energy_cost = traversal_cost(world.grid.value_at(new_x, new_y))
        new_energy = agent.energy - energy_cost
        if new_energy < 0:
            agent.energy = 0.0
            logger.info("Agent ran out of energy")
            publish_event(AgentDefeatedEvent(agent))
            return MoveResult(succeeded=False, block_reason="exhausted")

        agent.energy = new_energy
        agent.x, agent.y = new_x, new_y

        result = MoveResult(succeeded=True)
        result.picked_up = self._pick_up_recovery()
        result.encountered = self._resolve_encounter()
        self._apply_poison()

        if world.exit_at(new_x, new_y) is not None:
            result.reached_exit = True
            logger.info(f"Agent reached exit at ({new_x}, {new_y})")
            publish_event(ExitReachedEvent(new_x, new_y))

        if not agent.is_active:
            publish_event(AgentDefeatedEvent(agent))
        return result

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _pick_up_recovery(self) -> RecoveryItem | None:
        agent = self.world.agent
        item = self.world.recovery_item_at(agent.x, agent.y)
        if item is None:
            return None
        agent.heal(item.amount)
        item.consumed = True
        publish_event(MessageEvent(f"Recovered {item.amount:g} health."))
        return item

    def _resolve_encounter(self) -> Hostile | None:
        agent = self.world.agent
        hostile = self.world.hostile_at(agent.x, agent.y)
        if hostile is None:
            return None

        hostile.times_hit += 1
        match hostile.kind:
            case HostileKind.TELEPORT if hostile.times_hit == 1:
                self._teleport(hostile)
                publish_event(MessageEvent("The enemy vanishes!"))
            case _:
                new_health = agent.health - hostile.strength
                if new_health > 0:
                    agent.health = new_health
                    hostile.defeated = True
                    if hostile.kind is HostileKind.POISON:
                        self.world.poison_clouds.append(
                            PoisonCloud(hostile.x, hostile.y, hostile.poison_level)
                        )
                    publish_event(HostileDefeatedEvent(hostile))
                else:
                    agent.health = 0.0
                    logger.info(f"Agent fell to a {hostile.kind.name} hostile")
        return hostile

    def _teleport(self, hostile: Hostile) -> None:
        positions = self.world.free_positions()
        if not positions:
            return
        hostile.x, hostile.y = _rng.choice(positions)
        logger.debug(f"Hostile teleported to ({hostile.x}, {hostile.y})")

    def _apply_poison(self) -> None:
        agent = self.world.agent
        for cloud in self.world.poison_clouds:
            if cloud.covers(agent.x, agent.y):
                agent.health = max(0.0, agent.health - config.POISON_DAMAGE)
            cloud.level -= config.POISON_DECAY
        self.world.poison_clouds = [c for c in self.world.poison_clouds if c.is_active]
