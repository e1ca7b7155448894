# playerbot/main.py
"""Command line entry point: decide one turn for an ASCII level drawing."""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

import numpy as np
import structlog

from playerbot.ai.strategy import PlayerBot
from playerbot.config import BotConfig, load_bot_config
from playerbot.constants import MAX_HEALTH
from playerbot.systems.pathfinding.cost_model import cost_map
from playerbot.utils.logging_utils import setup_logging
from playerbot.world.ascii_map import parse_level, render_level
from playerbot.world.level_view import LevelView

log = structlog.get_logger()


def format_cost_section(
    level: LevelView, costs: np.ndarray, hard_block_cost: int, radius: int = 5
) -> str:
    """Danger costs around the player, ``###`` for hard-blocked cells."""
    center = level.player.location
    y_min = max(0, center.y - radius)
    y_max = min(level.field.height, center.y + radius + 1)
    x_min = max(0, center.x - radius)
    x_max = min(level.field.width, center.x + radius + 1)
    lines = ["    " + "".join(f"{x:>5}" for x in range(x_min, x_max))]
    for y in range(y_min, y_max):
        row = f"{y:>3}|"
        for x in range(x_min, x_max):
            cost = int(costs[y, x])
            cell = "###" if cost >= hard_block_cost else str(cost)
            if (x, y) == (center.x, center.y):
                cell = f"[{cell}]"
            row += f"{cell:>5}"
        lines.append(row)
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Decide the bot's turn for an ASCII level")
    parser.add_argument("level_file", type=Path, help="ASCII level drawing")
    parser.add_argument("--config", type=Path, default=None, help="Bot config YAML")
    parser.add_argument(
        "--health", type=int, default=MAX_HEALTH, help="Player health (0-100)"
    )
    parser.add_argument(
        "--costs", action="store_true", help="Print the danger cost map around the player"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
        help="Logging level",
    )
    parser.add_argument(
        "--json-logs", action="store_true", help="Emit log events as JSON lines"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not 0 <= args.health <= MAX_HEALTH:
        parser.error(f"--health must be within 0..{MAX_HEALTH}")
    setup_logging(getattr(logging, args.log_level), json_output=args.json_logs)

    config = load_bot_config(args.config) if args.config else BotConfig()
    try:
        text = args.level_file.read_text()
    except OSError as e:
        log.error("Could not read level file", path=str(args.level_file), error=str(e))
        return 1
    level = parse_level(text, player_health=args.health)

    bot = PlayerBot(config)
    turn = bot.make_turn(level)

    print(render_level(level))
    print(f"\nstate: {bot.state.name.lower()}")
    print(f"turn:  {turn}")
    if args.costs:
        costs = cost_map(level, config)
        print()
        print(format_cost_section(level, costs, config.hard_block_cost))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
