"""Read-only per-turn snapshot of the level handed to the bot.

The host builds a fresh :class:`LevelView` every turn.  Entities carry no
identity between turns other than their location, so every view is a small
frozen value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

import structlog

from playerbot.constants import MAX_HEALTH, EntityKind
from playerbot.world.field import Field
from playerbot.world.primitives import Location

log = structlog.get_logger()


@dataclass(frozen=True)
class ItemView:
    location: Location
    attack_bonus: int = 0
    defence_bonus: int = 0

    def value(self, defence_weight: float) -> float:
        """Worth of the item when comparing equipment."""
        return self.attack_bonus + self.defence_bonus * defence_weight


@dataclass(frozen=True)
class PawnView:
    """A monster as seen this turn."""

    location: Location
    health: int


@dataclass(frozen=True)
class HealthPackView:
    location: Location


@dataclass(frozen=True)
class PlayerView:
    location: Location
    health: int
    equipped_item: Optional[ItemView] = None


EntityView = Union[PawnView, ItemView, HealthPackView]


class LevelView:
    """Snapshot of the field and every visible entity for a single turn."""

    def __init__(
        self,
        field: Field,
        player: PlayerView,
        monsters: Iterable[PawnView] = (),
        items: Iterable[ItemView] = (),
        health_packs: Iterable[HealthPackView] = (),
    ):
        self._field = field
        self._player = player
        self._monsters: Tuple[PawnView, ...] = tuple(monsters)
        self._items: Tuple[ItemView, ...] = tuple(items)
        self._health_packs: Tuple[HealthPackView, ...] = tuple(health_packs)

        if not 0 <= player.health <= MAX_HEALTH:
            raise ValueError(f"Player health {player.health} is outside 0..{MAX_HEALTH}")
        for location in self._all_locations():
            if not field.in_bounds(location):
                log.error("Entity outside field", location=location)
                raise ValueError(f"Entity location {location} is outside the field")

        self._index: Dict[EntityKind, Dict[Location, EntityView]] = {
            EntityKind.MONSTER: _index_by_location(self._monsters),
            EntityKind.ITEM: _index_by_location(self._items),
            EntityKind.HEALTH_PACK: _index_by_location(self._health_packs),
        }

    def _all_locations(self) -> Iterable[Location]:
        yield self._player.location
        for group in (self._monsters, self._items, self._health_packs):
            for entity in group:
                yield entity.location

    @property
    def field(self) -> Field:
        return self._field

    @property
    def player(self) -> PlayerView:
        return self._player

    @property
    def monsters(self) -> Tuple[PawnView, ...]:
        return self._monsters

    @property
    def items(self) -> Tuple[ItemView, ...]:
        return self._items

    @property
    def health_packs(self) -> Tuple[HealthPackView, ...]:
        return self._health_packs

    def get_entity_at(self, kind: EntityKind, location: Location) -> Optional[EntityView]:
        """Return the entity of ``kind`` standing on ``location``, if any."""
        return self._index[kind].get(location)

    def get_monster_at(self, location: Location) -> Optional[PawnView]:
        return self._index[EntityKind.MONSTER].get(location)

    def get_item_at(self, location: Location) -> Optional[ItemView]:
        return self._index[EntityKind.ITEM].get(location)

    def get_health_pack_at(self, location: Location) -> Optional[HealthPackView]:
        return self._index[EntityKind.HEALTH_PACK].get(location)

    def is_occupied(self, location: Location) -> bool:
        """True when a monster, item or health pack stands on ``location``."""
        return any(location in index for index in self._index.values())


def _index_by_location(entities: Iterable[EntityView]) -> Dict[Location, EntityView]:
    index: Dict[Location, EntityView] = {}
    for entity in entities:
        # First entity wins when two share a cell.
        index.setdefault(entity.location, entity)
    return index
