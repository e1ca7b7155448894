from enum import IntEnum


class CellKind(IntEnum):
    """Static classification of a single field cell."""

    EMPTY = 0
    WALL = 1
    TRAP = 2
    EXIT = 3
    PLAYER_START = 4


class EntityKind(IntEnum):
    """Entity collections exposed by a level view."""

    MONSTER = 0
    ITEM = 1
    HEALTH_PACK = 2


MAX_HEALTH: int = 100

__all__ = ["CellKind", "EntityKind", "MAX_HEALTH"]
