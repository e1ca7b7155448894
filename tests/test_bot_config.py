from pathlib import Path

import pytest

from playerbot.config import BotConfig, load_bot_config

CONFIG_FILE = Path(__file__).resolve().parent.parent / "config" / "bot.yaml"


def test_shipped_config_matches_defaults():
    config = load_bot_config(CONFIG_FILE)
    assert config == BotConfig()
    assert config.wall_ring_penalties == (4, 2, 1)
    assert config.rng_seed == 1


def test_flat_keys_are_accepted(tmp_path):
    path = tmp_path / "bot.yaml"
    path.write_text("panic_health_threshold: 60\nthreat_radius: 4\n")
    config = load_bot_config(path)
    assert config.panic_health_threshold == 60
    assert config.threat_radius == 4


def test_empty_config_uses_defaults(tmp_path):
    path = tmp_path / "bot.yaml"
    path.write_text("")
    assert load_bot_config(path) == BotConfig()


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "bot.yaml"
    path.write_text("cost_model:\n  wall_penalty: 3\n")
    with pytest.raises(ValueError):
        load_bot_config(path)


def test_missing_config_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_bot_config(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "overrides",
    [
        {"panic_health_threshold": 120},
        {"panic_health_threshold": 40, "final_level_panic_threshold": 50},
        {"hard_block_cost": 1},
        {"wall_ring_penalties": (1, -1)},
        {"idle_turn_limit": 0},
        {"threat_radius": 7},
    ],
)
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ValueError):
        BotConfig(**overrides)
