from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence, Tuple

from .types import ConversationTurn, Intensity, Slot, SlotSet


DEFAULT_USER_MESSAGE = "러닝 계획에 대해 알려주세요"

EXPERIENCE_RE = re.compile(r"(초보자|초보|입문자|beginner|중급자|중급|intermediate|고급자|고급|advanced)", re.I)
DISTANCE_RE = re.compile(r"(\d+)\s*(km|킬로미터|kilometer|k|킬로)", re.I)
FREQUENCY_RE = re.compile(r"(주|week)\s*(\d+)\s*(회|번|times|time)", re.I)
TIME_RE = re.compile(r"(\d+)\s*(분|시간|hours?|minutes?|mins?)", re.I)
PACE_RE = re.compile(r"(페이스|pace|킬로[당미]|km[당미])\s*(\d+)\s*(분|초)?", re.I)
DATE_RE = re.compile(
    r"(오늘|내일|모레|다음주|weekend|주말|월요일|화요일|수요일|목요일|금요일|토요일|일요일|아침|점심|저녁|오전|오후|새벽)",
    re.I,
)
INTENSITY_RE = re.compile(r"(가볍|낮|쉽|편안|중간|보통|높|강한?|hard|moderate|easy|light|intense)", re.I)
GOAL_RE = re.compile(
    r"(체중\s*감량|다이어트|대회|마라톤|체력|건강|health|weight|diet|race|competition|marathon)", re.I
)

LIGHT_CUES = ("가볍", "낮", "쉽", "편안", "easy", "light")
MEDIUM_CUES = ("중간", "보통", "moderate")

RESTART_TOKENS = (
    "새로운",
    "새 계획",
    "다시",
    "바꿔",
    "변경",
    "삭제",
    "지워",
    "없애",
    "취소",
    "restart",
    "new plan",
    "cancel",
)
GREETING_TOKENS = ("안녕", "hi", "hello")


def _experience(text: str) -> Optional[str]:
    m = EXPERIENCE_RE.search(text)
    return m.group(0) if m else None


def _distance(text: str) -> Optional[str]:
    m = DISTANCE_RE.search(text)
    return f"{m.group(1)}km" if m else None


def _frequency(text: str) -> Optional[str]:
    m = FREQUENCY_RE.search(text)
    return f"주 {m.group(2)}회" if m else None


def _time(text: str) -> Optional[str]:
    m = TIME_RE.search(text)
    if not m:
        return None
    unit = m.group(2)
    label = "시간" if ("시" in unit or "hour" in unit) else "분"
    return f"{m.group(1)}{label}"


def _pace(text: str) -> Optional[str]:
    m = PACE_RE.search(text)
    return f"킬로당 {m.group(2)}분" if m else None


def _date(text: str) -> Optional[str]:
    m = DATE_RE.search(text)
    return m.group(0) if m else None


def classify_intensity(word: str) -> Intensity:
    if any(cue in word for cue in LIGHT_CUES):
        return Intensity.light
    if any(cue in word for cue in MEDIUM_CUES):
        return Intensity.medium
    return Intensity.high


def _intensity(text: str) -> Optional[str]:
    m = INTENSITY_RE.search(text)
    return classify_intensity(m.group(0)).value if m else None


def _goal(text: str) -> Optional[str]:
    m = GOAL_RE.search(text)
    return m.group(0) if m else None


def is_restart_request(text: str) -> bool:
    t = text.lower()
    return any(token in t for token in RESTART_TOKENS)


def _restart(text: str) -> Optional[str]:
    return "true" if is_restart_request(text) else None


# Evaluated in order against every user turn.
MATCHERS: List[Tuple[Slot, Callable[[str], Optional[str]]]] = [
    (Slot.experience_level, _experience),
    (Slot.target_distance, _distance),
    (Slot.weekly_frequency, _frequency),
    (Slot.target_time, _time),
    (Slot.target_pace, _pace),
    (Slot.date_time, _date),
    (Slot.intensity, _intensity),
    (Slot.motivational_goal, _goal),
    (Slot.restart_requested, _restart),
]


def extract_slots(history: Sequence[ConversationTurn]) -> SlotSet:
    slots = SlotSet()
    for turn in history:
        if turn.role != "user":
            continue
        text = turn.text.lower()
        for slot, matcher in MATCHERS:
            if slot in slots:
                continue
            value = matcher(text)
            if value is not None:
                slots.fill(slot, value)
    return slots


def last_user_message(history: Sequence[ConversationTurn], default: str = DEFAULT_USER_MESSAGE) -> str:
    for turn in reversed(history):
        if turn.role == "user":
            return turn.text
    return default


def is_greeting(text: str) -> bool:
    t = text.lower()
    return any(token in t for token in GREETING_TOKENS)
