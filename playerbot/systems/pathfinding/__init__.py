"""Cost model and grid searches used by the bot."""

from playerbot.systems.pathfinding.cost_model import cost_map, location_cost
from playerbot.systems.pathfinding.search import (
    UNREACHED,
    WeightedSearch,
    reconstruct_path,
    shortest_path,
    weighted_distances,
)

__all__ = [
    "cost_map",
    "location_cost",
    "UNREACHED",
    "WeightedSearch",
    "reconstruct_path",
    "shortest_path",
    "weighted_distances",
]
