"""Tunable constants for the bot and the YAML loader that fills them in.

Every number the controller and cost model depend on lives here so that one
consistent, documented set is used per run.  ``config/bot.yaml`` mirrors the
defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import structlog
import yaml

from playerbot.constants import MAX_HEALTH

log = structlog.get_logger()

__all__ = ["BotConfig", "load_bot_config", "DEFAULT_CONFIG"]


@dataclass(frozen=True)
class BotConfig:
    """Behaviour thresholds and cost model weights."""

    # Controller
    panic_health_threshold: int = 70
    final_level_panic_threshold: int = 50
    max_health: int = MAX_HEALTH
    idle_turn_limit: int = 60
    max_state_transitions: int = 8
    defence_weight: float = 1.2
    # None draws a fresh seed from the OS.
    rng_seed: Optional[int] = 1

    # Cost model
    hard_block_cost: int = 100000
    base_cost: int = 1
    wall_ring_penalties: Tuple[int, ...] = (4, 2, 1)
    threat_radius: int = 5
    threat_peak_exponent: int = 6
    diagonal_threat_multiplier: int = 2

    def __post_init__(self) -> None:
        # YAML hands sequences over as lists.
        object.__setattr__(self, "wall_ring_penalties", tuple(self.wall_ring_penalties))
        for name in ("panic_health_threshold", "final_level_panic_threshold"):
            value = getattr(self, name)
            if not 0 <= value <= self.max_health:
                raise ValueError(f"{name} must be within 0..{self.max_health}")
        if self.final_level_panic_threshold > self.panic_health_threshold:
            raise ValueError(
                "final_level_panic_threshold must not exceed panic_health_threshold"
            )
        if self.idle_turn_limit < 1:
            raise ValueError("idle_turn_limit must be >= 1")
        if self.max_state_transitions < 1:
            raise ValueError("max_state_transitions must be >= 1")
        if self.base_cost < 1:
            raise ValueError("base_cost must be >= 1")
        if self.hard_block_cost <= self.base_cost:
            raise ValueError("hard_block_cost must exceed base_cost")
        if any(p < 0 for p in self.wall_ring_penalties):
            raise ValueError("wall_ring_penalties must be non-negative")
        if self.threat_radius < 0:
            raise ValueError("threat_radius must be >= 0")
        if self.threat_peak_exponent < self.threat_radius:
            raise ValueError("threat_peak_exponent must be >= threat_radius")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BotConfig":
        """Build a config from a flat or sectioned mapping.

        Keys may be given at the top level or under ``controller:`` and
        ``cost_model:`` sections.  Unknown keys are rejected.
        """
        flat: Dict[str, Any] = {}
        for key, value in data.items():
            if key in ("controller", "cost_model") and isinstance(value, dict):
                flat.update(value)
            else:
                flat[key] = value
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(flat) - known)
        if unknown:
            raise ValueError(f"Unknown bot config keys: {', '.join(unknown)}")
        return cls(**flat)


DEFAULT_CONFIG = BotConfig()


def load_bot_config(config_path: Union[str, Path]) -> BotConfig:
    """Load a :class:`BotConfig` from a YAML file."""
    config_path = Path(config_path)
    if not config_path.is_file():
        log.error("Bot config file not found", path=str(config_path))
        raise FileNotFoundError(f"Bot configuration file not found: {config_path}")
    try:
        with config_path.open("r") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error("Error parsing YAML for bot config", path=str(config_path), error=str(e))
        raise
    if config_data is None:
        log.warning("Bot config file is empty, using defaults", path=str(config_path))
        return BotConfig()
    if not isinstance(config_data, dict):
        raise ValueError(f"Bot config must be a mapping: {config_path}")
    config = BotConfig.from_dict(config_data)
    log.info("Bot config loaded", path=str(config_path))
    return config
