#!/usr/bin/env python3
"""Benchmark the pure-Python A* search against tcod's C implementation.

Runs both searches on identical maps and prints a timing table, followed by
a few correctness checks. tcod is only a yardstick here; it is not used by
the engine itself.

Usage:
    python scripts/benchmark_pathfinding.py
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import math
import sys
import timeit
from pathlib import Path

import numpy as np
import tcod.path

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from pathpilot.game.cost_model import traversal_cost
from pathpilot.util.pathfinding import (
    SearchNode,
    find_path,
    make_nodes,
    path_to_positions,
    reset_nodes,
)

# ---------------------------------------------------------------------------
# Map generators
# ---------------------------------------------------------------------------


def _make_open_field(width: int, height: int) -> np.ndarray:
    """All-walkable map (worst case - maximum search space)."""
    return np.ones((width, height), dtype=np.float64)


def _make_dungeon(
    width: int,
    height: int,
    wall_fraction: float,
    seed: int,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> np.ndarray:
    """Random walls to simulate a dungeon. ``inf`` = wall.

    Start and goal tiles are forced walkable so the benchmark actually
    measures search work rather than an instant "no path" return.
    """
    rng = np.random.default_rng(seed)
    values = np.ones((width, height), dtype=np.float64)
    values[rng.random((width, height)) < wall_fraction] = math.inf
    values[start] = 1.0
    values[goal] = 1.0
    return values


def _make_weighted(
    width: int,
    height: int,
    seed: int,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> np.ndarray:
    """Traversal values between 0 and 9, with ~15% walls."""
    rng = np.random.default_rng(seed)
    values = rng.integers(0, 10, size=(width, height)).astype(np.float64)
    values[rng.random((width, height)) < 0.15] = math.inf
    values[start] = 1.0
    values[goal] = 1.0
    return values


# ---------------------------------------------------------------------------
# Runners
# ---------------------------------------------------------------------------


def _terrain_cost(current: SearchNode, neighbor: SearchNode) -> float:
    return traversal_cost(neighbor.value)


def _run_tcod(
    values: np.ndarray,
    start: tuple[int, int],
    goal: tuple[int, int],
) -> list[tuple[int, int]]:
    """Run tcod A* on a walkable mask and return the path (excluding start)."""
    cost = np.isfinite(values).astype(np.int16)
    astar = tcod.path.AStar(cost=cost, diagonal=1)
    return astar.get_path(start[0], start[1], goal[0], goal[1])


def _run_python(
    values: np.ndarray,
    start: tuple[int, int],
    goal: tuple[int, int],
    weight: float = 1.0,
) -> list[tuple[int, int]]:
    """Run our A* and return the path as positions (excluding start)."""
    nodes = make_nodes(values)
    reset_nodes(nodes)
    path = find_path(nodes, start, goal, values.shape[0], _terrain_cost, weight=weight)
    return path_to_positions(start, path)


def _bench(fn: object, *args: object) -> float:
    """Time *fn(*args)* and return average ms per call."""
    # Warm up
    fn(*args)  # type: ignore[operator]
    timer = timeit.Timer(lambda: fn(*args))  # type: ignore[operator]
    number, total = timer.autorange()
    return (total / number) * 1000


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------


def main() -> None:
    scenarios: list[tuple[str, np.ndarray, tuple[int, int], tuple[int, int]]] = [
        ("Open 40x25", _make_open_field(40, 25), (2, 2), (37, 22)),
        (
            "Dungeon 40x25 (30%)",
            _make_dungeon(40, 25, 0.30, seed=42, start=(2, 2), goal=(37, 22)),
            (2, 2),
            (37, 22),
        ),
        ("Open 120x80", _make_open_field(120, 80), (5, 5), (115, 75)),
        (
            "Weighted 120x80",
            _make_weighted(120, 80, seed=7, start=(5, 5), goal=(115, 75)),
            (5, 5),
            (115, 75),
        ),
    ]

    print("A* Benchmark: pathpilot (Python) vs tcod (C)")
    print("=" * 78)
    print(f"{'Scenario':<28} {'tcod (C)':>10} {'python':>12} {'python/tcod':>12}")
    print("-" * 78)

    for name, values, start, goal in scenarios:
        tcod_ms = _bench(_run_tcod, values, start, goal)
        python_ms = _bench(_run_python, values, start, goal)
        ratio = python_ms / tcod_ms if tcod_ms > 0 else float("inf")
        print(f"{name:<28} {tcod_ms:>9.3f}ms {python_ms:>11.3f}ms {ratio:>11.2f}x")

    print("-" * 78)
    print()

    # ------------------------------------------------------------------
    # Correctness checks
    # ------------------------------------------------------------------
    print("Correctness checks...")
    start, goal = (5, 5), (115, 75)
    values = _make_dungeon(120, 80, 0.20, seed=42, start=start, goal=goal)

    # With weight 0 both searches minimise step count on uniform terrain.
    tcod_path = _run_tcod(values, start, goal)
    python_path = _run_python(values, start, goal, weight=0.0)

    if not tcod_path and not python_path:
        print("  Both agree: no path exists.")
    elif not tcod_path or not python_path:
        print(
            f"  MISMATCH: tcod found {'a' if tcod_path else 'no'} path, "
            f"python found {'a' if python_path else 'no'} path."
        )
    elif len(tcod_path) == len(python_path):
        print(f"  Path lengths agree: {len(python_path)} steps. OK!")
    else:
        print(
            f"  Length MISMATCH: tcod={len(tcod_path)}, python={len(python_path)}"
        )

    straight_path = _run_python(_make_open_field(120, 80), (5, 40), (115, 40))
    y_vals = {y for _, y in straight_path}
    if y_vals == {40}:
        print("  Straightness check: horizontal path stays on y=40. OK!")
    else:
        print(f"  Straightness FAIL: y values deviated to {y_vals}")

    blocked = np.full((10, 10), math.inf)
    blocked[0, 0] = 1.0
    blocked[9, 9] = 1.0
    tcod_none = _run_tcod(blocked, (0, 0), (9, 9))
    python_none = _run_python(blocked, (0, 0), (9, 9))
    if not tcod_none and not python_none:
        print("  Blocked-map check: both correctly return empty path.")
    else:
        print(
            f"  Blocked-map MISMATCH: tcod={len(tcod_none)}, python={len(python_none)}"
        )


if __name__ == "__main__":
    main()
