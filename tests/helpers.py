from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

import numpy as np

from pathpilot.environment.grid import TileGrid
from pathpilot.events import GameEvent, subscribe_to_event
from pathpilot.game.entities import (
    Agent,
    ExitPoint,
    Hostile,
    HostileKind,
    RecoveryItem,
)
from pathpilot.game.game_world import GameWorld

# Legend for ASCII test maps. Every non-wall tile has traversal value 1.0
# unless it is a digit, in which case the digit is the value.
#   .  floor          #  wall
#   @  agent          O  exit
#   E  plain hostile  P  poison hostile  X  teleport hostile
#   H  recovery item
_HOSTILE_KINDS = {
    "E": HostileKind.PLAIN,
    "P": HostileKind.POISON,
    "X": HostileKind.TELEPORT,
}


def make_world(
    rows: Sequence[str],
    *,
    health: float = 100.0,
    energy: float = 100.0,
    strength: float = 10.0,
    heal_amount: float = 20.0,
) -> GameWorld:
    """Build a GameWorld from an ASCII map, one string per row."""
    height = len(rows)
    width = len(rows[0])
    values = np.ones((width, height), dtype=np.float64, order="F")
    agent: Agent | None = None
    hostiles: list[Hostile] = []
    items: list[RecoveryItem] = []
    exits: list[ExitPoint] = []

    for y, row in enumerate(rows):
        assert len(row) == width, f"Row {y} has width {len(row)}, expected {width}"
        for x, char in enumerate(row):
            if char == "#":
                values[x, y] = math.inf
            elif char.isdigit():
                values[x, y] = float(char)
            elif char == "@":
                agent = Agent(x, y, health=health, energy=energy)
            elif char in _HOSTILE_KINDS:
                hostiles.append(Hostile(x, y, strength, kind=_HOSTILE_KINDS[char]))
            elif char == "H":
                items.append(RecoveryItem(x, y, heal_amount))
            elif char == "O":
                exits.append(ExitPoint(x, y))

    assert agent is not None, "Map needs an agent (@)"
    return GameWorld(
        grid=TileGrid(values),
        agent=agent,
        hostiles=hostiles,
        recovery_items=items,
        exits=exits,
    )


def open_values(width: int = 10, height: int = 10) -> np.ndarray:
    """A wall-free (width, height) grid of traversal value 1.0."""
    return np.ones((width, height), dtype=np.float64, order="F")


T = TypeVar("T", bound=GameEvent)


class EventRecorder:
    """Collects every published event of the given types."""

    def __init__(self, *event_types: type[GameEvent]) -> None:
        self.events: list[GameEvent] = []
        for event_type in event_types:
            subscribe_to_event(event_type, self.events.append)

    def of_type(self, event_type: type[T]) -> list[T]:
        return [e for e in self.events if isinstance(e, event_type)]
