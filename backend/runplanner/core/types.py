from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Slot(str, Enum):
    experience_level = "experience_level"
    target_distance = "target_distance"
    weekly_frequency = "weekly_frequency"
    target_time = "target_time"
    target_pace = "target_pace"
    date_time = "date_time"
    intensity = "intensity"
    motivational_goal = "motivational_goal"
    restart_requested = "restart_requested"


# Labels used when the slots are shown to the coaching model.
SLOT_LABELS: Dict[Slot, str] = {
    Slot.experience_level: "경험 수준",
    Slot.target_distance: "목표 거리",
    Slot.weekly_frequency: "주간 빈도",
    Slot.target_time: "목표 시간",
    Slot.target_pace: "목표 페이스",
    Slot.date_time: "날짜 시간",
    Slot.intensity: "강도",
    Slot.motivational_goal: "목표",
    Slot.restart_requested: "새 계획 요청",
}


class Intensity(str, Enum):
    light = "가벼움"
    medium = "중간"
    high = "높음"


class ResponseCategory(str, Enum):
    restart_acknowledgement = "restart_acknowledgement"
    plan_ready = "plan_ready"
    ask_distance = "ask_distance"
    ask_experience = "ask_experience"
    ask_date = "ask_date"
    ask_intensity = "ask_intensity"
    ask_time_goal = "ask_time_goal"
    greeting = "greeting"
    default = "default"


class SlotSet:
    """Single-valued slots recognised in one conversation.

    Keys are coerced through ``Slot`` so a misspelled slot name raises
    ``ValueError`` instead of silently creating a new entry. The first value
    written for a slot is kept; later writes are ignored.
    """

    def __init__(self, values: Optional[Mapping[str, str]] = None) -> None:
        self._values: Dict[Slot, str] = {}
        for key, value in (values or {}).items():
            self.fill(key, value)

    def fill(self, slot: Slot | str, value: str) -> bool:
        slot = Slot(slot)
        if slot in self._values:
            return False
        self._values[slot] = value
        return True

    def get(self, slot: Slot | str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(Slot(slot), default)

    def has_any(self, *slots: Slot) -> bool:
        return any(s in self._values for s in slots)

    def has_all(self, *slots: Slot) -> bool:
        return all(s in self._values for s in slots)

    def items(self) -> List[Tuple[Slot, str]]:
        return sorted(self._values.items(), key=lambda kv: list(Slot).index(kv[0]))

    def as_dict(self) -> Dict[str, str]:
        return {slot.value: value for slot, value in self.items()}

    def __contains__(self, slot: object) -> bool:
        try:
            return Slot(slot) in self._values
        except ValueError:
            return False

    def __iter__(self) -> Iterator[Slot]:
        return iter(slot for slot, _ in self.items())

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SlotSet):
            return self._values == other._values
        return NotImplemented

    def __repr__(self) -> str:
        return f"SlotSet({self.as_dict()!r})"


class ConversationTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    text: str


class RunPlan(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    title: str
    date: str
    distance: str
    duration: str
    intensity: str
    details: str


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Type-checked by the /chat handler.
    message: Any = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    id: str
    plan_data: Optional[RunPlan] = Field(default=None, alias="planData")
    session_id: Optional[str] = Field(default=None, alias="sessionId")


class CalendarRequest(BaseModel):
    title: Optional[str] = None
    date: Optional[str] = None
    duration: Optional[str] = None
    details: Optional[str] = None
