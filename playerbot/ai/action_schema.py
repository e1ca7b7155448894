"""Turn values returned by the bot, plus the dict form hosts can consume.

A :class:`Turn` is the one action the bot takes per game turn.  ``to_dict``
renders it in the lightweight action-dict schema (``actor``, ``type``,
``priority``, ``payload``) and :func:`validate_action` checks such dicts.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from playerbot.world.primitives import AttackDirection, StepDirection


class ActionType(str, Enum):
    MOVE = "move"
    ATTACK = "attack"
    WAIT = "wait"


@dataclass(frozen=True)
class Turn:
    type: ActionType
    direction: Optional[Union[StepDirection, AttackDirection]] = None

    @classmethod
    def step(cls, direction: StepDirection) -> "Turn":
        return cls(ActionType.MOVE, direction)

    @classmethod
    def attack(cls, direction: AttackDirection) -> "Turn":
        return cls(ActionType.ATTACK, direction)

    @classmethod
    def none(cls) -> "Turn":
        return cls(ActionType.WAIT)

    @property
    def is_pass(self) -> bool:
        return self.type is ActionType.WAIT

    def to_dict(self, actor: int = 0, priority: int = 0) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.direction is not None:
            offset = self.direction.offset
            payload = {"direction": self.direction.name, "dx": offset.dx, "dy": offset.dy}
        return {"actor": actor, "type": self.type.value, "priority": priority, "payload": payload}

    def __str__(self) -> str:
        if self.direction is None:
            return self.type.value
        return f"{self.type.value} {self.direction.name.lower()}"


def validate_action(action: Dict[str, Any]) -> bool:
    if not isinstance(action, dict):
        return False
    if "actor" not in action or not isinstance(action["actor"], int):
        return False
    if action.get("type") not in {t.value for t in ActionType}:
        return False
    payload = action.get("payload", {})
    if not isinstance(payload, dict):
        return False
    if action["type"] == ActionType.MOVE.value:
        return payload.get("direction") in StepDirection.__members__
    if action["type"] == ActionType.ATTACK.value:
        return payload.get("direction") in AttackDirection.__members__
    return True
