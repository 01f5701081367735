"""
Level state owned by the caller, and the read-only snapshot the engine plans on.

GameWorld is the mutable collaborator: the movement executor moves the agent,
defeats hostiles and consumes recovery items on it. The decision policy never
touches it directly; it asks for a GridSnapshot once per decision and plans
entirely against that view.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pathpilot.environment.grid import TileGrid
from pathpilot.game.entities import (
    Agent,
    ExitPoint,
    Hostile,
    PoisonCloud,
    RecoveryItem,
)
from pathpilot.types import WorldTilePos


@dataclass(frozen=True)
class GridSnapshot:
    """Per-decision view of the level.

    Entity tuples hold references, so the snapshot must not outlive the
    decision it was taken for. Consumed recovery items are filtered out when
    the snapshot is taken; hostiles are kept with their ``defeated`` flag so
    callers can tell "cleared" from "never existed".
    """

    grid: TileGrid
    agent: Agent
    hostiles: tuple[Hostile, ...] = ()
    recovery_items: tuple[RecoveryItem, ...] = ()
    exits: tuple[ExitPoint, ...] = ()

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def agent_pos(self) -> WorldTilePos:
        return self.agent.position

    def live_hostiles(self) -> list[Hostile]:
        return [h for h in self.hostiles if h.is_active]

    def any_hostile_alive(self) -> bool:
        return any(h.is_active for h in self.hostiles)

    def exit_positions(self) -> set[WorldTilePos]:
        return {e.position for e in self.exits}

    def recovery_positions(self) -> set[WorldTilePos]:
        return {item.position for item in self.recovery_items if item.is_active}


@dataclass
class GameWorld:
    """Everything on one level: grid, agent and the entities around it."""

    grid: TileGrid
    agent: Agent
    hostiles: list[Hostile] = field(default_factory=list)
    recovery_items: list[RecoveryItem] = field(default_factory=list)
    exits: list[ExitPoint] = field(default_factory=list)
    poison_clouds: list[PoisonCloud] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._check_positions([self.agent])
        self._check_positions(self.hostiles)
        self._check_positions(self.recovery_items)
        self._check_positions(self.exits)

    def _check_positions(
        self, entities: Iterable[Agent | Hostile | RecoveryItem | ExitPoint]
    ) -> None:
        for entity in entities:
            if not self.grid.in_bounds(entity.x, entity.y):
                raise ValueError(
                    f"{type(entity).__name__} at ({entity.x}, {entity.y}) is "
                    f"outside the {self.grid.width}x{self.grid.height} grid"
                )

    @property
    def cols(self) -> int:
        return self.grid.cols

    @property
    def rows(self) -> int:
        return self.grid.rows

    def snapshot(self) -> GridSnapshot:
        """Take the read-only view the decision policy plans against."""
        return GridSnapshot(
            grid=self.grid,
            agent=self.agent,
            hostiles=tuple(self.hostiles),
            recovery_items=tuple(i for i in self.recovery_items if i.is_active),
            exits=tuple(self.exits),
        )

    def hostile_at(self, x: int, y: int) -> Hostile | None:
        """Return the first live hostile on (x, y), if any."""
        for hostile in self.hostiles:
            if hostile.is_active and hostile.x == x and hostile.y == y:
                return hostile
        return None

    def recovery_item_at(self, x: int, y: int) -> RecoveryItem | None:
        for item in self.recovery_items:
            if item.is_active and item.x == x and item.y == y:
                return item
        return None

    def exit_at(self, x: int, y: int) -> ExitPoint | None:
        for exit_point in self.exits:
            if exit_point.x == x and exit_point.y == y:
                return exit_point
        return None

    def is_occupied(self, x: int, y: int) -> bool:
        """True if any entity or the agent is on (x, y)."""
        if self.agent.position == (x, y):
            return True
        if self.hostile_at(x, y) is not None:
            return True
        if self.recovery_item_at(x, y) is not None:
            return True
        return self.exit_at(x, y) is not None

    def free_positions(self) -> Sequence[WorldTilePos]:
        """Passable cells with nothing on them, in row-major order."""
        return [
            pos
            for pos in self.grid.passable_positions()
            if not self.is_occupied(*pos)
        ]
