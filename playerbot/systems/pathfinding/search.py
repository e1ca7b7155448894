# playerbot/systems/pathfinding/search.py
"""Grid searches from the player's location.

Two searches share the same graph, with edges between orthogonally adjacent
cells:

* :func:`shortest_path` is a breadth-first search under a passability
  predicate and stops at the first cell that satisfies a target predicate.
* :func:`weighted_distances` is Dijkstra over :func:`cost_map` and always
  settles the whole reachable grid, since callers compare several goals.

Both are pure functions of the snapshot at call time.
"""

from __future__ import annotations

import heapq
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Final, Iterable, List, Optional

import numpy as np
import structlog

from playerbot.ai.perception import neighbors
from playerbot.config import BotConfig, DEFAULT_CONFIG
from playerbot.systems.pathfinding.cost_model import COST_DTYPE, cost_map
from playerbot.world.level_view import LevelView
from playerbot.world.primitives import Location

log = structlog.get_logger(__name__)

LocationPredicate = Callable[[Location], bool]
Path = List[Location]

# Distance of cells the weighted search never settled.
UNREACHED: Final[int] = int(np.iinfo(COST_DTYPE).max)


def reconstruct_path(
    predecessors: Dict[Location, Location], start: Location, goal: Location
) -> Path:
    """Walk ``predecessors`` back from ``goal`` to ``start``.

    The returned path excludes ``start`` and ends with ``goal``; it is empty
    when ``goal == start``.  A missing entry means the map does not belong to
    this search, which is a logic error rather than an unreachable goal.
    """
    path: Path = []
    current = goal
    while current != start:
        path.append(current)
        try:
            current = predecessors[current]
        except KeyError:
            log.error(
                "Path reconstruction hit a location without predecessor",
                start=start,
                goal=goal,
                missing=current,
            )
            raise RuntimeError(
                f"No predecessor recorded for {current} while reconstructing "
                f"path {start} -> {goal}"
            ) from None
        if len(path) > len(predecessors):
            raise RuntimeError(f"Predecessor map contains a cycle through {current}")
    path.reverse()
    return path


def shortest_path(
    level: LevelView,
    start: Location,
    is_passable: LocationPredicate,
    is_target: LocationPredicate,
) -> Optional[Path]:
    """Breadth-first path from ``start`` to the nearest target cell.

    The target predicate is tested when a cell is first discovered, before
    ``is_passable``, so a blocked cell (a monster, an item) can still end a
    path.  Returns ``[]`` when ``start`` itself is a target and ``None`` when
    no target is reachable.
    """
    if is_target(start):
        return []

    predecessors: Dict[Location, Location] = {}
    discovered = {start}
    frontier: Deque[Location] = deque([start])

    while frontier:
        current = frontier.popleft()
        for neighbor in neighbors(level, current):
            if neighbor in discovered:
                continue
            discovered.add(neighbor)
            if is_target(neighbor):
                predecessors[neighbor] = current
                return reconstruct_path(predecessors, start, neighbor)
            if not is_passable(neighbor):
                continue
            predecessors[neighbor] = current
            frontier.append(neighbor)

    log.debug("Shortest path search exhausted", start=start, explored=len(discovered))
    return None


@dataclass(frozen=True)
class WeightedSearch:
    """Result of :func:`weighted_distances`."""

    start: Location
    distances: np.ndarray
    predecessors: Dict[Location, Location]
    hard_block_cost: int

    def distance_to(self, location: Location) -> int:
        return int(self.distances[location.y, location.x])

    def is_reachable(self, location: Location) -> bool:
        """Reachable without stepping through a hard-blocked cell."""
        return self.distance_to(location) < self.hard_block_cost

    def path_to(self, location: Location) -> Path:
        return reconstruct_path(self.predecessors, self.start, location)

    def cheapest(self, locations: Iterable[Location]) -> Optional[Location]:
        """Lowest-distance location, ties broken by input order."""
        best: Optional[Location] = None
        best_distance = UNREACHED
        for location in locations:
            distance = self.distance_to(location)
            if distance < best_distance:
                best, best_distance = location, distance
        return best


def weighted_distances(
    level: LevelView,
    start: Location,
    config: BotConfig = DEFAULT_CONFIG,
) -> WeightedSearch:
    """Single-source Dijkstra from ``start`` under the danger cost model.

    Heap entries are ``(distance, y, x)`` so equal distances pop in row-major
    order and identical snapshots always produce identical trees.
    """
    if not level.field.in_bounds(start):
        raise ValueError(f"Search start {start} is outside the field")

    costs = cost_map(level, config)
    distances = np.full(costs.shape, UNREACHED, dtype=COST_DTYPE)
    distances[start.y, start.x] = 0
    predecessors: Dict[Location, Location] = {}

    pq = [(0, start.y, start.x)]
    settled = 0
    while pq:
        distance, y, x = heapq.heappop(pq)
        if distance > distances[y, x]:
            continue
        settled += 1
        current = Location(x, y)
        for neighbor in neighbors(level, current):
            new_distance = distance + int(costs[neighbor.y, neighbor.x])
            if new_distance < distances[neighbor.y, neighbor.x]:
                distances[neighbor.y, neighbor.x] = new_distance
                predecessors[neighbor] = current
                heapq.heappush(pq, (new_distance, neighbor.y, neighbor.x))

    log.debug("Weighted search finished", start=start, settled=settled)
    return WeightedSearch(
        start=start,
        distances=distances,
        predecessors=predecessors,
        hard_block_cost=config.hard_block_cost,
    )


__all__ = [
    "UNREACHED",
    "Path",
    "reconstruct_path",
    "shortest_path",
    "WeightedSearch",
    "weighted_distances",
]
