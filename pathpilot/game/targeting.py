from __future__ import annotations

import math
from collections.abc import Iterable
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from pathpilot.game.entities import ExitPoint, Hostile, Locatable, RecoveryItem
    from pathpilot.game.game_world import GridSnapshot
    from pathpilot.types import WorldTilePos

T = TypeVar("T", bound="Locatable")


def nearest(origin: WorldTilePos, candidates: Iterable[T]) -> T | None:
    """Return the active candidate closest to ``origin`` by Euclidean distance.

    Ties go to whichever candidate comes first in iteration order.
    """
    ox, oy = origin
    best: T | None = None
    best_distance = math.inf
    for candidate in candidates:
        if not candidate.is_active:
            continue
        distance = math.hypot(candidate.x - ox, candidate.y - oy)
        if distance < best_distance:
            best_distance = distance
            best = candidate
    return best


def nearest_threat(snapshot: GridSnapshot) -> Hostile | None:
    """Nearest hostile that has not been defeated."""
    return nearest(snapshot.agent_pos, snapshot.hostiles)


def nearest_recovery_item(snapshot: GridSnapshot) -> RecoveryItem | None:
    """Nearest recovery item that has not been consumed."""
    return nearest(snapshot.agent_pos, snapshot.recovery_items)


def exit_target(snapshot: GridSnapshot) -> ExitPoint | None:
    """The level's designated exit: the first one listed."""
    return snapshot.exits[0] if snapshot.exits else None
