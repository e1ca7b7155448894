"""State-driven decision making for the player bot.

The bot is a small state machine.  Each :class:`BotState` has a behaviour
function that looks at the current :class:`TurnContext` and returns either a
:class:`Turn` (the turn is decided) or another :class:`BotState` (hand the
same turn over to that state's behaviour).  :func:`resolve_turn` runs these
hand-offs in a bounded loop so a transition cycle can never hang the host.

Transition precedence, checked at the top of every behaviour:

1. exactly one monster in melee range -> ATTACKING
2. two or more monsters in melee range -> COWERING
3. health below the panic threshold with a health pack on the level -> FLEEING
4. FLEEING once health is above the threshold or no pack is left -> IDLE
5. ATTACKING / COWERING with nobody adjacent -> IDLE
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum, auto
from functools import cached_property
from typing import Callable, Dict, List, Optional, Set, Tuple, Union

import structlog

from playerbot.ai.action_schema import Turn
from playerbot.ai.perception import (
    is_passable,
    is_safe,
    is_walkable,
    monsters_in_melee_range,
    neighbors,
    threat_zone,
)
from playerbot.config import BotConfig
from playerbot.constants import CellKind
from playerbot.systems.pathfinding.search import (
    Path,
    WeightedSearch,
    shortest_path,
    weighted_distances,
)
from playerbot.world.field import Field
from playerbot.world.level_view import LevelView, PawnView
from playerbot.world.primitives import (
    ATTACK_OFFSETS,
    AttackDirection,
    Location,
    attack_order,
    step_direction_for,
)

log = structlog.get_logger()


class BotState(Enum):
    IDLE = auto()
    ATTACKING = auto()
    COWERING = auto()
    FLEEING = auto()


@dataclass
class BotMemory:
    """Everything the bot remembers between turns."""

    state: BotState = BotState.IDLE
    idle_turns: int = 0
    exit: Optional[Location] = None
    level: int = 1
    final_level: bool = False
    panic_threshold: int = 70


class TurnContext:
    """One turn's snapshot together with the bot's memory.

    Derived queries are computed lazily and live only for this turn.
    """

    def __init__(
        self,
        level: LevelView,
        memory: BotMemory,
        config: BotConfig,
        rng: random.Random,
    ):
        self.level = level
        self.memory = memory
        self.config = config
        self.rng = rng

    @property
    def player_location(self) -> Location:
        return self.level.player.location

    @cached_property
    def melee(self) -> List[Tuple[PawnView, AttackDirection]]:
        return monsters_in_melee_range(self.level)

    @cached_property
    def threat_zone(self) -> Set[Location]:
        return threat_zone(self.level)

    @cached_property
    def weighted(self) -> WeightedSearch:
        return weighted_distances(self.level, self.player_location, self.config)

    @cached_property
    def health_pack_locations(self) -> List[Location]:
        return sorted(
            (pack.location for pack in self.level.health_packs),
            key=Location.row_major_key,
        )

    def should_panic(self) -> bool:
        return (
            self.level.player.health < self.memory.panic_threshold
            and bool(self.level.health_packs)
        )

    def passable(self, location: Location) -> bool:
        return is_passable(self.level, location)

    def walkable(self, location: Location) -> bool:
        return is_walkable(self.level, location)

    def safe(self, location: Location) -> bool:
        return is_safe(self.level, location, self.threat_zone)

    def path_to(
        self, is_target: Callable[[Location], bool], is_open: Callable[[Location], bool]
    ) -> Optional[Path]:
        return shortest_path(self.level, self.player_location, is_open, is_target)

    def step_along(self, path: Optional[Path]) -> Turn:
        """First step of ``path``; an empty path means we are already there."""
        if not path:
            return Turn.none()
        return Turn.step(step_direction_for(path[0] - self.player_location))


Outcome = Union[Turn, BotState]


def _engagement(ctx: TurnContext) -> Optional[BotState]:
    engaged = len(ctx.melee)
    if engaged == 1:
        return BotState.ATTACKING
    if engaged > 1:
        return BotState.COWERING
    return None


# --- Idle ---------------------------------------------------------------------


def _random_step(ctx: TurnContext) -> Optional[Turn]:
    options = [n for n in neighbors(ctx.level, ctx.player_location) if ctx.passable(n)]
    if not options:
        return None
    choice = options[ctx.rng.randint(0, len(options) - 1)]
    return Turn.step(step_direction_for(choice - ctx.player_location))


def _equip_better_item(ctx: TurnContext) -> Optional[Turn]:
    items = sorted(ctx.level.items, key=lambda item: item.location.row_major_key())
    if not items:
        return None
    weight = ctx.config.defence_weight
    best = max(items, key=lambda item: item.value(weight))
    equipped = ctx.level.player.equipped_item
    if equipped is not None and equipped.value(weight) >= best.value(weight):
        return None
    path = ctx.path_to(lambda loc: loc == best.location, ctx.passable)
    if path is None:
        log.debug("Best item unreachable", item=best.location)
        return None
    return ctx.step_along(path)


def _top_up_health(ctx: TurnContext) -> Optional[Turn]:
    if ctx.level.player.health >= ctx.config.max_health or ctx.memory.final_level:
        return None
    packs = set(ctx.health_pack_locations)
    if not packs:
        return None
    path = ctx.path_to(packs.__contains__, ctx.passable)
    if path is None:
        return None
    return ctx.step_along(path)


def _head_for_exit(ctx: TurnContext) -> Turn:
    exit_location = ctx.memory.exit
    if exit_location is None:
        log.debug("No exit known on this level")
        return Turn.none()
    path = ctx.path_to(lambda loc: loc == exit_location, ctx.passable)
    if path is None:
        log.debug("Exit unreachable", exit=exit_location)
        return Turn.none()
    if len(path) == 1:
        ctx.memory.level += 1
        ctx.memory.idle_turns = 0
        ctx.memory.exit = None
        log.info("Stepping onto exit", level=ctx.memory.level)
    return ctx.step_along(path)


def _hunt(ctx: TurnContext) -> Turn:
    zone = ctx.threat_zone
    exit_location = ctx.memory.exit

    def hunt_target(loc: Location) -> bool:
        return loc in zone and ctx.passable(loc)

    def rough_hunt_target(loc: Location) -> bool:
        return loc in zone and ctx.walkable(loc)

    def at_exit(loc: Location) -> bool:
        return loc == exit_location

    attempts = [(hunt_target, ctx.passable)]
    if exit_location is not None:
        attempts.append((at_exit, ctx.passable))
    attempts.append((rough_hunt_target, ctx.walkable))
    if exit_location is not None:
        attempts.append((at_exit, ctx.walkable))

    for is_target, is_open in attempts:
        path = ctx.path_to(is_target, is_open)
        if path is not None:
            return ctx.step_along(path)
    log.debug("Nothing to hunt and nowhere to go")
    return Turn.none()


def idle_behavior(ctx: TurnContext) -> Outcome:
    engaged = _engagement(ctx)
    if engaged is not None:
        return engaged
    if ctx.should_panic():
        return BotState.FLEEING

    ctx.memory.idle_turns += 1
    if ctx.memory.idle_turns >= ctx.config.idle_turn_limit:
        ctx.memory.idle_turns = 0
        turn = _random_step(ctx)
        if turn is not None:
            log.debug("Idle limit reached, taking a random step", turn=str(turn))
            return turn

    for policy in (_equip_better_item, _top_up_health):
        turn = policy(ctx)
        if turn is not None:
            return turn
    if not ctx.level.monsters:
        return _head_for_exit(ctx)
    return _hunt(ctx)


# --- Attacking ------------------------------------------------------------------


def attacking_behavior(ctx: TurnContext) -> Outcome:
    engaged = _engagement(ctx)
    if engaged is BotState.ATTACKING:
        _, direction = ctx.melee[0]
        return Turn.attack(direction)
    if engaged is not None:
        return engaged
    if ctx.should_panic():
        return BotState.FLEEING
    return BotState.IDLE


# --- Cowering -------------------------------------------------------------------


def _retreat_to_health(ctx: TurnContext) -> Optional[Turn]:
    search = ctx.weighted
    reachable = [loc for loc in ctx.health_pack_locations if search.is_reachable(loc)]
    best = search.cheapest(reachable)
    if best is None:
        return None
    return ctx.step_along(search.path_to(best))


def cowering_behavior(ctx: TurnContext) -> Outcome:
    engaged = _engagement(ctx)
    if engaged is BotState.ATTACKING:
        return engaged
    if engaged is None:
        return BotState.FLEEING if ctx.should_panic() else BotState.IDLE

    turn = _retreat_to_health(ctx)
    if turn is not None:
        return turn

    search = ctx.weighted
    escapes = [n for n in neighbors(ctx.level, ctx.player_location) if ctx.safe(n)]
    if escapes:
        # min() keeps neighbour order on equal distances.
        target = min(escapes, key=search.distance_to)
        return Turn.step(step_direction_for(target - ctx.player_location))

    weakest, direction = min(
        ctx.melee, key=lambda pair: (pair[0].health, attack_order(pair[1]))
    )
    log.debug("Cornered, attacking weakest monster", target=weakest.location, health=weakest.health)
    return Turn.attack(direction)


# --- Fleeing --------------------------------------------------------------------


def fleeing_behavior(ctx: TurnContext) -> Outcome:
    engaged = _engagement(ctx)
    if engaged is not None:
        return engaged
    health = ctx.level.player.health
    if health > ctx.memory.panic_threshold or not ctx.level.health_packs:
        return BotState.IDLE

    packs = set(ctx.health_pack_locations)
    if not ctx.memory.final_level:
        turn = _retreat_to_health(ctx)
        if turn is not None:
            return turn
        attempts = [ctx.passable]
    else:
        # Nowhere left to retreat to, so plain reachability decides.
        attempts = [ctx.safe, ctx.passable, ctx.walkable]

    for is_open in attempts:
        path = ctx.path_to(packs.__contains__, is_open)
        if path is not None:
            return ctx.step_along(path)
    log.debug("No route to any health pack", health=health)
    return Turn.none()


BEHAVIORS: Dict[BotState, Callable[[TurnContext], Outcome]] = {
    BotState.IDLE: idle_behavior,
    BotState.ATTACKING: attacking_behavior,
    BotState.COWERING: cowering_behavior,
    BotState.FLEEING: fleeing_behavior,
}


def step_state(state: BotState, ctx: TurnContext) -> Tuple[BotState, Optional[Turn]]:
    """Run one behaviour: ``(state, turn)`` when it acts, ``(next_state, None)`` otherwise."""
    outcome = BEHAVIORS[state](ctx)
    if isinstance(outcome, Turn):
        return state, outcome
    return outcome, None


def resolve_turn(state: BotState, ctx: TurnContext) -> Tuple[BotState, Turn]:
    """Follow hand-offs from ``state`` until some behaviour picks a turn."""
    for _ in range(ctx.config.max_state_transitions + 1):
        next_state, turn = step_state(state, ctx)
        if turn is not None:
            return state, turn
        log.debug("Bot state transition", from_state=state.name, to_state=next_state.name)
        state = next_state
    log.error(
        "Bot state transitions did not settle",
        state=state.name,
        limit=ctx.config.max_state_transitions,
    )
    return state, Turn.none()


def is_exit_sealed(field: Field, exit_location: Location) -> bool:
    """True when every cell around the exit is a wall or off the field."""
    for offset in ATTACK_OFFSETS:
        probe = exit_location + offset
        if field.in_bounds(probe) and field[probe] is not CellKind.WALL:
            return False
    return True


class PlayerBot:
    """Controller the host calls once per turn."""

    def __init__(self, config: Optional[BotConfig] = None, rng: Optional[random.Random] = None):
        self.config = config or BotConfig()
        self.rng = rng or random.Random(self.config.rng_seed)
        self.memory = BotMemory(panic_threshold=self.config.panic_health_threshold)

    @property
    def state(self) -> BotState:
        return self.memory.state

    @property
    def level(self) -> int:
        return self.memory.level

    def _observe_level(self, level: LevelView) -> None:
        field = level.field
        on_start = field[level.player.location] is CellKind.PLAYER_START
        if not on_start and self.memory.exit is not None:
            return
        exits = field.cells_of(CellKind.EXIT)
        exit_location = exits[0] if exits else None
        final = exit_location is not None and is_exit_sealed(field, exit_location)
        if exit_location != self.memory.exit or final != self.memory.final_level:
            log.info(
                "Level layout captured",
                exit=exit_location,
                level=self.memory.level,
                final_level=final,
            )
        self.memory.exit = exit_location
        self.memory.final_level = final
        self.memory.panic_threshold = (
            self.config.final_level_panic_threshold
            if final
            else self.config.panic_health_threshold
        )

    def make_turn(self, level: LevelView) -> Turn:
        """Decide this turn's action from a fresh snapshot."""
        self._observe_level(level)
        ctx = TurnContext(level, self.memory, self.config, self.rng)
        state, turn = resolve_turn(self.memory.state, ctx)
        self.memory.state = state
        if state is not BotState.IDLE:
            self.memory.idle_turns = 0
        log.debug(
            "Bot turn decided",
            state=state.name,
            turn=str(turn),
            health=level.player.health,
            location=level.player.location,
        )
        return turn


__all__ = [
    "BotState",
    "BotMemory",
    "TurnContext",
    "PlayerBot",
    "BEHAVIORS",
    "step_state",
    "resolve_turn",
    "is_exit_sealed",
]
