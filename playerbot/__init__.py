"""Decision engine for an autonomous dungeon-crawling player.

The host hands :class:`PlayerBot` a read-only :class:`LevelView` each turn and
gets back exactly one :class:`Turn`.
"""

from playerbot.ai.action_schema import ActionType, Turn
from playerbot.ai.strategy import BotState, PlayerBot
from playerbot.config import BotConfig, load_bot_config
from playerbot.world.level_view import LevelView

__all__ = [
    "PlayerBot",
    "BotState",
    "BotConfig",
    "load_bot_config",
    "LevelView",
    "Turn",
    "ActionType",
]
