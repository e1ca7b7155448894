# playerbot/systems/pathfinding/cost_model.py
"""Danger-weighted traversal costs for the weighted search.

A cell costs ``base_cost`` plus two penalties:

* clutter: every wall found on the rings ``loc + r * attack_offset`` for
  ``r = 1 .. len(wall_ring_penalties)`` adds that ring's penalty, so routes
  through narrow corridors where the player could be pinned look expensive;
* threat: every monster within Chebyshev ``threat_radius`` adds
  ``2 ** (threat_peak_exponent - d)``, multiplied again for monsters sitting on
  a diagonal unit offset.  The field therefore decays exponentially with the
  number of turns a monster needs to reach the cell.

Walls, traps and cells holding a monster or an item cost exactly
``hard_block_cost``.  They stay in the graph so the search still reaches every
cell and callers can tell "only through a blocker" apart from "never seen".
"""

from typing import Final

import numpy as np
import structlog

from playerbot.config import BotConfig, DEFAULT_CONFIG
from playerbot.constants import CellKind
from playerbot.world.level_view import LevelView
from playerbot.world.primitives import ATTACK_OFFSETS, Location

log = structlog.get_logger(__name__)

COST_DTYPE: Final = np.int64


def is_hard_blocked(level: LevelView, location: Location) -> bool:
    if level.field[location] in (CellKind.WALL, CellKind.TRAP):
        return True
    return (
        level.get_monster_at(location) is not None
        or level.get_item_at(location) is not None
    )


def wall_clutter_penalty(
    level: LevelView, location: Location, config: BotConfig = DEFAULT_CONFIG
) -> int:
    penalty = 0
    field = level.field
    for radius, ring_penalty in enumerate(config.wall_ring_penalties, start=1):
        for offset in ATTACK_OFFSETS:
            probe = location + offset * radius
            if field.in_bounds(probe) and field[probe] is CellKind.WALL:
                penalty += ring_penalty
    return penalty


def threat_penalty(
    level: LevelView, location: Location, config: BotConfig = DEFAULT_CONFIG
) -> int:
    penalty = 0
    for monster in level.monsters:
        offset = monster.location - location
        distance = offset.size
        if distance > config.threat_radius:
            continue
        weight = 2 ** (config.threat_peak_exponent - distance)
        if offset.is_diagonal_unit():
            weight *= config.diagonal_threat_multiplier
        penalty += weight
    return penalty


def location_cost(
    level: LevelView, location: Location, config: BotConfig = DEFAULT_CONFIG
) -> int:
    """Cost of stepping onto ``location``."""
    if is_hard_blocked(level, location):
        return config.hard_block_cost
    return (
        config.base_cost
        + wall_clutter_penalty(level, location, config)
        + threat_penalty(level, location, config)
    )


def _shifted(mask: np.ndarray, dx: int, dy: int) -> np.ndarray:
    """``out[y, x] = mask[y + dy, x + dx]``; cells shifted in from outside are False."""
    height, width = mask.shape
    out = np.zeros_like(mask)
    if abs(dx) >= width or abs(dy) >= height:
        return out
    dst_y = slice(max(0, -dy), height - max(0, dy))
    src_y = slice(max(0, dy), height - max(0, -dy))
    dst_x = slice(max(0, -dx), width - max(0, dx))
    src_x = slice(max(0, dx), width - max(0, -dx))
    out[dst_y, dst_x] = mask[src_y, src_x]
    return out


def cost_map(level: LevelView, config: BotConfig = DEFAULT_CONFIG) -> np.ndarray:
    """Vectorised :func:`location_cost` for the whole field.

    Returns an ``int64`` array of shape ``(height, width)`` indexed ``[y, x]``.
    """
    field = level.field
    walls = field.mask(CellKind.WALL)
    costs = np.full(walls.shape, config.base_cost, dtype=COST_DTYPE)

    for radius, ring_penalty in enumerate(config.wall_ring_penalties, start=1):
        if ring_penalty == 0:
            continue
        for offset in ATTACK_OFFSETS:
            ring_walls = _shifted(walls, offset.dx * radius, offset.dy * radius)
            costs += ring_walls.astype(COST_DTYPE) * ring_penalty

    if level.monsters:
        ys, xs = np.indices(walls.shape)
        for monster in level.monsters:
            abs_dx = np.abs(xs - monster.location.x)
            abs_dy = np.abs(ys - monster.location.y)
            distance = np.maximum(abs_dx, abs_dy)
            near = distance <= config.threat_radius
            exponent = np.clip(config.threat_peak_exponent - distance, 0, None)
            weight = np.where(near, np.left_shift(1, exponent), 0).astype(COST_DTYPE)
            diagonal = (abs_dx == 1) & (abs_dy == 1)
            weight[diagonal] *= config.diagonal_threat_multiplier
            costs += weight

    blocked = field.mask(CellKind.WALL, CellKind.TRAP)
    for entity in (*level.monsters, *level.items):
        blocked[entity.location.y, entity.location.x] = True
    costs[blocked] = config.hard_block_cost

    log.debug(
        "Cost map computed",
        shape=costs.shape,
        blocked=int(blocked.sum()),
        monsters=len(level.monsters),
    )
    return costs


__all__ = [
    "is_hard_blocked",
    "wall_clutter_penalty",
    "threat_penalty",
    "location_cost",
    "cost_map",
]
