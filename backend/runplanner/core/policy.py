from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TypeVar

from .nlu import is_greeting
from .types import ResponseCategory, Slot, SlotSet


PLAN_REQUIRED_SLOTS = (
    Slot.experience_level,
    Slot.target_distance,
    Slot.date_time,
    Slot.intensity,
)
GOAL_SLOTS = (Slot.target_time, Slot.target_pace)

T = TypeVar("T")


@dataclass(frozen=True)
class PolicyInput:
    slots: SlotSet
    last_user_message: str


@dataclass(frozen=True)
class Rule:
    name: str
    when: Callable[[PolicyInput], bool]
    category: ResponseCategory


def first_match(rules: Sequence[Rule], value: PolicyInput, default: T) -> ResponseCategory | T:
    for rule in rules:
        if rule.when(value):
            return rule.category
    return default


def _plan_ready(p: PolicyInput) -> bool:
    return p.slots.has_all(*PLAN_REQUIRED_SLOTS) and p.slots.has_any(*GOAL_SLOTS)


# Priority order matters: earlier rules shadow later ones.
RULES: Sequence[Rule] = (
    Rule("restart", lambda p: Slot.restart_requested in p.slots, ResponseCategory.restart_acknowledgement),
    Rule("plan_ready", _plan_ready, ResponseCategory.plan_ready),
    Rule("distance", lambda p: Slot.target_distance not in p.slots, ResponseCategory.ask_distance),
    Rule("experience", lambda p: Slot.experience_level not in p.slots, ResponseCategory.ask_experience),
    Rule("date", lambda p: Slot.date_time not in p.slots, ResponseCategory.ask_date),
    Rule("intensity", lambda p: Slot.intensity not in p.slots, ResponseCategory.ask_intensity),
    Rule("time_goal", lambda p: not p.slots.has_any(*GOAL_SLOTS), ResponseCategory.ask_time_goal),
    Rule("greeting", lambda p: is_greeting(p.last_user_message), ResponseCategory.greeting),
)


def decide(slots: SlotSet, last_user_message: Optional[str] = None) -> ResponseCategory:
    return first_match(RULES, PolicyInput(slots, last_user_message or ""), ResponseCategory.default)
