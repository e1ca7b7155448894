import numpy as np
import pytest

from playerbot.ai.perception import is_passable, is_walkable, neighbors
from playerbot.config import BotConfig
from playerbot.systems.pathfinding.cost_model import location_cost
from playerbot.systems.pathfinding.search import (
    UNREACHED,
    reconstruct_path,
    shortest_path,
    weighted_distances,
)
from playerbot.world.ascii_map import parse_level
from playerbot.world.field import Field
from playerbot.world.level_view import LevelView, PlayerView
from playerbot.world.primitives import Location

HARD_BLOCK = BotConfig().hard_block_cost

CORRIDOR = """
@#...
.#.#.
.#.#.
...#E
"""

# Two mirror-image routes around a block of walls; a monster watches the top one.
AMBUSH = """
..m..
.....
.###.
@###h
.###.
.....
.....
"""


def bfs(level, target, passable=is_passable):
    start = level.player.location
    return shortest_path(level, start, lambda loc: passable(level, loc), lambda loc: loc == target)


def assert_connected(start, path):
    previous = start
    for location in path:
        assert (location - previous).manhattan == 1
        previous = location


def test_bfs_open_field_manhattan_length():
    level = LevelView(Field.open(5, 5), PlayerView(Location(0, 0), 100))
    path = bfs(level, Location(4, 4))
    assert len(path) == 8
    assert path[-1] == Location(4, 4)
    assert_connected(Location(0, 0), path)


def test_bfs_follows_the_only_corridor():
    level = parse_level(CORRIDOR)
    path = bfs(level, Location(4, 3))
    assert len(path) == 13
    assert path[0] == Location(0, 1)
    assert_connected(level.player.location, path)
    assert all(is_passable(level, loc) for loc in path)


def test_bfs_returns_none_when_target_walled_off():
    level = parse_level(
        """
        @.#..
        ..#.E
        ..#..
        """
    )
    assert bfs(level, Location(4, 1)) is None
    # Walls block the dangerous variant too.
    assert bfs(level, Location(4, 1), passable=is_walkable) is None


def test_bfs_start_on_target_is_empty_path():
    level = parse_level("@..")
    assert bfs(level, Location(0, 0)) == []


def test_bfs_can_end_on_blocked_target():
    level = parse_level("@..m")
    path = bfs(level, Location(3, 0))
    assert path == [Location(1, 0), Location(2, 0), Location(3, 0)]


def test_bfs_dangerous_variant_crosses_traps():
    level = parse_level(
        """
        @^E
        #^#
        """
    )
    assert bfs(level, Location(2, 0)) is None
    assert bfs(level, Location(2, 0), passable=is_walkable) == [Location(1, 0), Location(2, 0)]


def test_weighted_open_field_matches_manhattan():
    level = LevelView(Field.open(5, 5), PlayerView(Location(0, 0), 100))
    search = weighted_distances(level, level.player.location)
    assert search.distance_to(Location(0, 0)) == 0
    assert search.distance_to(Location(4, 4)) == 8
    assert len(search.path_to(Location(4, 4))) == 8
    assert search.path_to(Location(0, 0)) == []


def test_weighted_route_avoids_monster():
    level = parse_level(AMBUSH)
    pack = level.health_packs[0].location
    search = weighted_distances(level, level.player.location)
    assert search.is_reachable(pack)
    path = search.path_to(pack)
    assert path[0] == Location(0, 4)
    assert path[-1] == pack
    assert all(loc.y >= 3 for loc in path)
    assert_connected(level.player.location, path)


def test_weighted_distances_grow_along_path():
    level = parse_level(AMBUSH)
    search = weighted_distances(level, level.player.location)
    for goal in level.field.all_locations():
        path = search.path_to(goal)
        distances = [search.distance_to(loc) for loc in path]
        assert distances == sorted(distances)
        if path:
            assert distances[-1] == search.distance_to(goal)


def test_weighted_neighbors_bounded_by_cost():
    level = parse_level(AMBUSH)
    start = level.player.location
    search = weighted_distances(level, start)
    for neighbor in neighbors(level, start):
        assert search.distance_to(neighbor) <= location_cost(level, neighbor)


def test_weighted_enclosed_goal_is_connected_but_unsafe():
    level = parse_level(
        """
        @....
        ...#.
        ..#h#
        ...#.
        """
    )
    pack = level.health_packs[0].location
    search = weighted_distances(level, level.player.location)
    assert search.distance_to(pack) >= HARD_BLOCK
    assert not search.is_reachable(pack)
    assert search.path_to(pack)[-1] == pack
    assert int(search.distances.max()) < UNREACHED


def test_weighted_search_is_repeatable():
    level = parse_level(AMBUSH)
    first = weighted_distances(level, level.player.location)
    second = weighted_distances(level, level.player.location)
    assert np.array_equal(first.distances, second.distances)
    assert first.predecessors == second.predecessors


def test_bfs_is_repeatable():
    level = parse_level(AMBUSH)
    pack = level.health_packs[0].location
    paths = [bfs(level, pack) for _ in range(3)]
    assert paths[0] is not None
    assert paths[0] == paths[1] == paths[2]


def test_cheapest_prefers_lower_distance_then_input_order():
    level = LevelView(Field.open(5, 5), PlayerView(Location(2, 2), 100))
    search = weighted_distances(level, level.player.location)
    assert search.cheapest([Location(0, 0), Location(2, 3)]) == Location(2, 3)
    assert search.cheapest([Location(2, 4), Location(4, 2)]) == Location(2, 4)
    assert search.cheapest([]) is None


def test_reconstruct_path_requires_predecessors():
    start, goal = Location(0, 0), Location(2, 0)
    with pytest.raises(RuntimeError):
        reconstruct_path({goal: Location(1, 0)}, start, goal)
    assert reconstruct_path({}, start, start) == []


def test_weighted_search_rejects_start_off_field():
    level = parse_level("@..")
    with pytest.raises(ValueError):
        weighted_distances(level, Location(3, 0))
