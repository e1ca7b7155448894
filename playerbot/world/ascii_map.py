"""Build :class:`LevelView` snapshots from ASCII drawings.

Legend::

    #  wall            .  empty           ^  trap
    E  exit            S  player start    @  player (on an empty cell)
    m  monster         i  item            h  health pack

Entities always stand on empty cells.  When the drawing has no ``@`` the
player is placed on the ``S`` cell.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Tuple

from playerbot.constants import MAX_HEALTH, CellKind
from playerbot.world.field import Field
from playerbot.world.level_view import (
    HealthPackView,
    ItemView,
    LevelView,
    PawnView,
    PlayerView,
)
from playerbot.world.primitives import Location

CELL_GLYPHS: Dict[str, CellKind] = {
    "#": CellKind.WALL,
    ".": CellKind.EMPTY,
    "^": CellKind.TRAP,
    "E": CellKind.EXIT,
    "S": CellKind.PLAYER_START,
}
ENTITY_GLYPHS = frozenset("@mih")

DEFAULT_MONSTER_HEALTH = 20


def parse_level(
    text: str,
    *,
    player_health: int = MAX_HEALTH,
    equipped_item: Optional[Tuple[int, int]] = None,
    monster_health: Optional[Mapping[Tuple[int, int], int]] = None,
    item_bonuses: Optional[Mapping[Tuple[int, int], Tuple[int, int]]] = None,
    default_monster_health: int = DEFAULT_MONSTER_HEALTH,
) -> LevelView:
    """Parse ``text`` into a level view.

    ``monster_health`` and ``item_bonuses`` are keyed by ``(x, y)`` and fall
    back to ``default_monster_health`` and ``(1, 1)`` respectively.
    ``equipped_item`` gives the player's equipped ``(attack, defence)`` bonuses.
    """
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise ValueError("Level drawing is empty")
    width = len(lines[0])
    if any(len(line) != width for line in lines):
        raise ValueError("Level drawing rows must all have the same width")

    monster_health = monster_health or {}
    item_bonuses = item_bonuses or {}

    rows: List[List[CellKind]] = []
    player_at: Optional[Location] = None
    start_at: Optional[Location] = None
    monsters: List[PawnView] = []
    items: List[ItemView] = []
    packs: List[HealthPackView] = []

    for y, line in enumerate(lines):
        row: List[CellKind] = []
        for x, glyph in enumerate(line):
            location = Location(x, y)
            if glyph in ENTITY_GLYPHS:
                row.append(CellKind.EMPTY)
                if glyph == "@":
                    if player_at is not None:
                        raise ValueError("Level drawing has more than one player")
                    player_at = location
                elif glyph == "m":
                    health = monster_health.get((x, y), default_monster_health)
                    monsters.append(PawnView(location, health))
                elif glyph == "i":
                    attack, defence = item_bonuses.get((x, y), (1, 1))
                    items.append(ItemView(location, attack, defence))
                else:
                    packs.append(HealthPackView(location))
                continue
            try:
                kind = CELL_GLYPHS[glyph]
            except KeyError:
                raise ValueError(f"Unknown level glyph {glyph!r} at ({x}, {y})") from None
            if kind is CellKind.PLAYER_START:
                start_at = location
            row.append(kind)
        rows.append(row)

    if player_at is None:
        player_at = start_at
    if player_at is None:
        raise ValueError("Level drawing has neither '@' nor 'S'")

    equipped = None
    if equipped_item is not None:
        equipped = ItemView(player_at, *equipped_item)

    return LevelView(
        field=Field.from_rows(rows),
        player=PlayerView(player_at, player_health, equipped),
        monsters=monsters,
        items=items,
        health_packs=packs,
    )


def render_level(level: LevelView) -> str:
    """Inverse of :func:`parse_level` for debugging output."""
    glyph_for = {kind: glyph for glyph, kind in CELL_GLYPHS.items()}
    grid = [
        [glyph_for[level.field[Location(x, y)]] for x in range(level.field.width)]
        for y in range(level.field.height)
    ]
    for glyph, group in (("h", level.health_packs), ("i", level.items), ("m", level.monsters)):
        for entity in group:
            grid[entity.location.y][entity.location.x] = glyph
    player = level.player.location
    if level.field[player] is not CellKind.PLAYER_START:
        grid[player.y][player.x] = "@"
    return "\n".join("".join(row) for row in grid)
