from __future__ import annotations

import random
import re
from datetime import date, datetime, time, timedelta
from typing import Callable, Dict, Optional

from runplanner.core.logger import SessionLogger
from runplanner.core.types import Intensity, RunPlan, Slot, SlotSet


KOREAN_WEEKDAYS = ["월", "화", "수", "목", "금", "토", "일"]

DAY_OFFSETS: Dict[str, int] = {"오늘": 0, "내일": 1, "모레": 2, "다음주": 7}
WEEKDAY_TOKENS: Dict[str, int] = {f"{d}요일": i for i, d in enumerate(KOREAN_WEEKDAYS)}
WEEKEND_TOKENS = ("주말", "weekend")

BEGINNER_TOKENS = ("초보", "beginner")
INTERMEDIATE_TOKENS = ("중급", "intermediate")
ADVANCED_TOKENS = ("고급", "advanced")

DEFAULT_EXPERIENCE = "초보자"
DEFAULT_DISTANCE = "5km"
DEFAULT_FREQUENCY = "주 3회"


def distance_km(target_distance: Optional[str], default: int = 5) -> int:
    m = re.search(r"(\d+)", target_distance or "")
    return int(m.group(1)) if m else default


def format_korean_datetime(when: datetime) -> str:
    weekday = KOREAN_WEEKDAYS[when.weekday()]
    return f"{when.year}년 {when.month}월 {when.day}일 ({weekday}) 오전 {when.hour}:{when.minute:02d}"


def _days_until(today: date, weekday: int) -> int:
    # Strictly in the future: the same weekday means next week.
    return (weekday - today.weekday() - 1) % 7 + 1


def resolve_day_offset(date_time: Optional[str], today: date) -> Optional[int]:
    if not date_time:
        return None
    for token, offset in DAY_OFFSETS.items():
        if token in date_time:
            return offset
    for token, weekday in WEEKDAY_TOKENS.items():
        if token in date_time:
            return _days_until(today, weekday)
    if any(token in date_time for token in WEEKEND_TOKENS):
        return _days_until(today, 5)
    return None


class PlanSynthesizer:
    def __init__(
        self,
        logger: Optional[SessionLogger] = None,
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.logger = logger
        self.rng = rng or random.Random()
        self.today = today or date.today

    def _r(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def plan_datetime(self, slots: SlotSet) -> str:
        today = self.today()
        offset = resolve_day_offset(slots.get(Slot.date_time), today)
        if offset is None:
            offset = self._r(1, 7)
        start = time(hour=self._r(6, 9), minute=self._r(0, 5) * 10)
        return format_korean_datetime(datetime.combine(today + timedelta(days=offset), start))

    def synthesize(self, slots: SlotSet) -> RunPlan:
        experience = slots.get(Slot.experience_level, DEFAULT_EXPERIENCE)
        target = slots.get(Slot.target_distance, DEFAULT_DISTANCE)
        frequency = slots.get(Slot.weekly_frequency, DEFAULT_FREQUENCY)
        goal = slots.get(Slot.motivational_goal, "")
        km = distance_km(target)
        when = self.plan_datetime(slots)

        if any(t in experience for t in BEGINNER_TOKENS):
            plan = RunPlan(
                title=f"{target} 초보자 러닝 플랜",
                date=when,
                distance=target,
                duration=f"약 {km * 7 + self._r(0, 9)}분",
                intensity=Intensity.light.value,
                details=(
                    f"준비운동 5분 → {self._r(2, 3)}분 걷기/{self._r(1, 2)}분 달리기 반복"
                    f"(총 {km * 5}분) → 정리운동 5분"
                ),
            )
        elif any(t in experience for t in INTERMEDIATE_TOKENS):
            plan = RunPlan(
                title=f"{target} 중급자 러닝 플랜",
                date=when,
                distance=target,
                duration=f"약 {km * 6 + self._r(0, 9)}분",
                intensity=Intensity.medium.value,
                details=(
                    f"준비운동 8분 → {target} 일정 페이스로 달리기"
                    f"({self._r(5, 6)}:{self._r(0, 5)}0/km) → 정리운동 5분"
                ),
            )
        elif any(t in experience for t in ADVANCED_TOKENS):
            plan = RunPlan(
                title=f"{target} 고급자 인터벌 훈련",
                date=when,
                distance=target,
                duration=f"약 {km * 5 + self._r(0, 9)}분",
                intensity=Intensity.high.value,
                details=(
                    f"준비운동 10분 → {self._r(3, 4)}00m 인터벌 x {self._r(6, 8)}회(빠른 페이스)"
                    " → 정리운동 8분"
                ),
            )
        else:
            plan = RunPlan(
                title=f"{target} {frequency} 러닝 플랜" + (f" ({goal})" if goal else ""),
                date=when,
                distance=target,
                duration=f"약 {km * 6 + self._r(0, 14)}분",
                intensity=Intensity.medium.value,
                details=(
                    f"준비운동 {self._r(5, 9)}분 → {self._r(5, 6)}:{self._r(0, 5)}0/km 페이스로 "
                    f"{target} 달리기 → 정리운동 {self._r(5, 7)}분"
                ),
            )

        if self.logger:
            self.logger.step("plan_synthesizer", {"slots": slots.as_dict()}, plan.model_dump())
        return plan
