# playerbot/world/primitives.py
"""Grid coordinates, offsets and the direction tables built on them.

Coordinates follow screen conventions: ``x`` grows to the east and ``y``
grows to the south, so North is ``Offset(0, -1)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Tuple


@dataclass(frozen=True)
class Offset:
    """Integer displacement between two grid cells."""

    dx: int
    dy: int

    def __mul__(self, factor: int) -> "Offset":
        return Offset(self.dx * factor, self.dy * factor)

    __rmul__ = __mul__

    @property
    def size(self) -> int:
        """Chebyshev length: number of king moves needed to cover it."""
        return max(abs(self.dx), abs(self.dy))

    @property
    def manhattan(self) -> int:
        return abs(self.dx) + abs(self.dy)

    def is_diagonal_unit(self) -> bool:
        return abs(self.dx) == 1 and abs(self.dy) == 1


@dataclass(frozen=True)
class Location:
    """Integer cell coordinate on the field."""

    x: int
    y: int

    def __add__(self, offset: Offset) -> "Location":
        if not isinstance(offset, Offset):
            return NotImplemented
        return Location(self.x + offset.dx, self.y + offset.dy)

    def __sub__(self, other: "Location") -> Offset:
        if not isinstance(other, Location):
            return NotImplemented
        return Offset(self.x - other.x, self.y - other.y)

    def row_major_key(self) -> Tuple[int, int]:
        return (self.y, self.x)


class StepDirection(Enum):
    """Directions the player can walk in."""

    NORTH = Offset(0, -1)
    EAST = Offset(1, 0)
    SOUTH = Offset(0, 1)
    WEST = Offset(-1, 0)

    @property
    def offset(self) -> Offset:
        return self.value


class AttackDirection(Enum):
    """Directions the player can strike in (all Chebyshev-1 neighbours)."""

    NORTH = Offset(0, -1)
    NORTH_EAST = Offset(1, -1)
    EAST = Offset(1, 0)
    SOUTH_EAST = Offset(1, 1)
    SOUTH = Offset(0, 1)
    SOUTH_WEST = Offset(-1, 1)
    WEST = Offset(-1, 0)
    NORTH_WEST = Offset(-1, -1)

    @property
    def offset(self) -> Offset:
        return self.value


# Enumeration order is the neighbour order used by every search.
STEP_OFFSETS: Final[Tuple[Offset, ...]] = tuple(d.offset for d in StepDirection)
ATTACK_OFFSETS: Final[Tuple[Offset, ...]] = tuple(d.offset for d in AttackDirection)

_STEP_DIRECTION_BY_OFFSET: Final[Dict[Offset, StepDirection]] = {
    d.offset: d for d in StepDirection
}
_ATTACK_DIRECTION_BY_OFFSET: Final[Dict[Offset, AttackDirection]] = {
    d.offset: d for d in AttackDirection
}
_ATTACK_ORDER: Final[Dict[AttackDirection, int]] = {
    d: i for i, d in enumerate(AttackDirection)
}


def step_direction_for(offset: Offset) -> StepDirection:
    """Return the walking direction matching a unit orthogonal ``offset``."""
    try:
        return _STEP_DIRECTION_BY_OFFSET[offset]
    except KeyError:
        raise ValueError(f"{offset} is not a unit step offset") from None


def attack_direction_for(offset: Offset) -> AttackDirection:
    """Return the attack direction matching a Chebyshev-1 ``offset``."""
    try:
        return _ATTACK_DIRECTION_BY_OFFSET[offset]
    except KeyError:
        raise ValueError(f"{offset} is not an attack offset") from None


def attack_order(direction: AttackDirection) -> int:
    """Stable rank of ``direction`` in :data:`ATTACK_OFFSETS` order."""
    return _ATTACK_ORDER[direction]


__all__ = [
    "Offset",
    "Location",
    "StepDirection",
    "AttackDirection",
    "STEP_OFFSETS",
    "ATTACK_OFFSETS",
    "step_direction_for",
    "attack_direction_for",
    "attack_order",
]
