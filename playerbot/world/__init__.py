"""World snapshot types consumed by the bot."""

from playerbot.world.field import Field
from playerbot.world.level_view import (
    HealthPackView,
    ItemView,
    LevelView,
    PawnView,
    PlayerView,
)
from playerbot.world.primitives import (
    ATTACK_OFFSETS,
    STEP_OFFSETS,
    AttackDirection,
    Location,
    Offset,
    StepDirection,
)

__all__ = [
    "Field",
    "LevelView",
    "PlayerView",
    "PawnView",
    "ItemView",
    "HealthPackView",
    "Location",
    "Offset",
    "StepDirection",
    "AttackDirection",
    "STEP_OFFSETS",
    "ATTACK_OFFSETS",
]
