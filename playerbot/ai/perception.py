"""Spatial predicates over a level view.

Every helper here is a pure function of the snapshot it is given.  Nothing is
cached between calls because monsters move every turn.
"""

from __future__ import annotations

from typing import List, Optional, Set, Tuple

from playerbot.constants import CellKind
from playerbot.world.level_view import LevelView, PawnView
from playerbot.world.primitives import (
    ATTACK_OFFSETS,
    STEP_OFFSETS,
    AttackDirection,
    Location,
    attack_direction_for,
    attack_order,
)

_BLOCKING_CELLS = (CellKind.WALL, CellKind.TRAP)


def in_bounds(level: LevelView, location: Location) -> bool:
    return level.field.in_bounds(location)


def neighbors(level: LevelView, location: Location) -> List[Location]:
    """In-bounds orthogonal neighbours in North, East, South, West order."""
    return [
        candidate
        for candidate in (location + offset for offset in STEP_OFFSETS)
        if level.field.in_bounds(candidate)
    ]


def is_passable(level: LevelView, location: Location) -> bool:
    """True when the player could step onto ``location`` this turn."""
    if level.field[location] in _BLOCKING_CELLS:
        return False
    return not level.is_occupied(location)


def is_walkable(level: LevelView, location: Location) -> bool:
    """Relaxed passability used for last-resort routes: only walls block."""
    return level.field[location] is not CellKind.WALL


def threat_zone(level: LevelView) -> Set[Location]:
    """Cells from which some monster could land a melee hit next turn."""
    zone: Set[Location] = set()
    for monster in level.monsters:
        for offset in ATTACK_OFFSETS:
            candidate = monster.location + offset
            if level.field.in_bounds(candidate):
                zone.add(candidate)
    return zone


def is_safe(
    level: LevelView, location: Location, zone: Optional[Set[Location]] = None
) -> bool:
    """Passable and outside the threat zone.

    ``zone`` lets a search compute the threat zone once instead of per cell.
    """
    if not is_passable(level, location):
        return False
    if zone is None:
        zone = threat_zone(level)
    return location not in zone


def monsters_in_melee_range(level: LevelView) -> List[Tuple[PawnView, AttackDirection]]:
    """Monsters adjacent to the player, paired with the direction to hit them.

    Sorted by attack direction so the result does not depend on the order the
    host enumerated monsters in.
    """
    player = level.player.location
    engaged = [
        (monster, attack_direction_for(monster.location - player))
        for monster in level.monsters
        if (monster.location - player).size == 1
    ]
    engaged.sort(key=lambda pair: attack_order(pair[1]))
    return engaged


__all__ = [
    "in_bounds",
    "neighbors",
    "is_passable",
    "is_walkable",
    "threat_zone",
    "is_safe",
    "monsters_in_melee_range",
]
