from __future__ import annotations

import random
from typing import Dict, List, Optional

from runplanner.core.logger import SessionLogger
from runplanner.core.types import ResponseCategory, Slot, SlotSet


EMOJIS = ["😊", "👍", "🏃‍♀️", "🏃", "💪", "✨", "🌟"]

TEMPLATES: Dict[ResponseCategory, List[str]] = {
    ResponseCategory.restart_acknowledgement: [
        "새로운 러닝 계획을 원하시는군요! 😊 어떤 거리와 난이도로 새롭게 만들어드릴까요?",
        "기존 계획을 변경해드릴게요! 어떤 거리로 달리고 싶으신가요? 그리고 언제 달리실 계획인지도 알려주세요~",
        "새 러닝 플랜을 만들어 드릴게요! 목표 거리와 달리고 싶은 날짜를 알려주시면 바로 준비해드릴게요 👍",
    ],
    ResponseCategory.plan_ready: [
        "{date}에 {distance} 달리기 플랜이 준비됐어요! {emoji} {goal_phrase}{intensity} 강도로 시작해보세요. 아래 위젯에서 세부 계획을 확인하실 수 있어요~",
        "{experience} 수준에 맞는 {distance} 플랜을 만들었어요! {emoji} {date}에 {intensity} 강도로 진행하시면 좋을 것 같아요. 세부 계획은 아래 카드에서 확인하세요!",
        "{date} {distance} 러닝 계획이 완성됐어요! {emoji} {goal}{intensity} 강도로 달리는 맞춤 플랜이니 참고하세요. 즐거운 러닝 되세요~",
    ],
    ResponseCategory.ask_distance: [
        "안녕하세요! 뉴런 러닝 코치예요~ 😊 어떤 거리를 목표로 하고 계신가요? 5km, 10km 등 알려주시면 맞춤 플랜을 만들어 드릴게요!",
        "반가워요! 러닝 플랜을 위해 목표 거리부터 알려주세요~ 5km, 10km 등 달리고 싶은 거리가 있으신가요? 🏃‍♀️",
        "안녕하세요! 뉴런 러닝 코치입니다~ 어떤 거리로 러닝 계획을 세워드릴까요? 목표 거리를 알려주세요! 😊",
    ],
    ResponseCategory.ask_experience: [
        "{distance} 러닝 플랜이군요! 👍 혹시 달리기 경험은 어느 정도인가요? 초보자, 중급자, 고급자 중에 골라주시면 맞춤 플랜을 만들어 드릴게요~",
        "{distance} 좋아요! 😊 달리기는 얼마나 해보셨나요? 초보자, 중급자, 고급자 중 어디에 가까우신지 알려주세요!",
    ],
    ResponseCategory.ask_date: [
        "{experience}를 위한 {distance} 플랜이군요! 😊 언제 달리실 계획인가요? 내일, 주말 등 알려주시면 더 구체적인 계획을 세워드릴게요~",
        "{experience} 러너의 {distance} 도전이네요! 🏃 언제 달리고 싶으세요? 오늘, 내일 아침, 주말처럼 알려주세요~",
    ],
    ResponseCategory.ask_intensity: [
        "{date}에 {distance} 달리실 계획이군요! 어느 정도 강도로 달리고 싶으신가요? 가벼움, 중간, 높음 중에 알려주세요~ 💪",
        "{date} {distance} 러닝 좋아요! 👍 강도는 어떻게 할까요? 가볍게, 중간 정도, 또는 높게 중에 골라주세요~",
    ],
    ResponseCategory.ask_time_goal: [
        "거의 다 왔어요! 👍 {distance}를 완주하는데 목표 시간이나, 페이스가 있으신가요? 예를 들어 \"30분 안에\" 또는 \"킬로당 6분\" 같은 목표요!",
        "마지막으로 하나만 더요! 😊 {distance} 목표 시간이나 페이스가 있으신가요? \"40분\"이나 \"페이스 7분\"처럼 알려주세요~",
    ],
    ResponseCategory.greeting: [
        "안녕하세요! 뉴런 러닝 코치예요~ 😊 오늘은 어떤 달리기 계획을 도와드릴까요?",
        "반가워요! 뉴런 러닝 코치입니다. 어떤 달리기 목표를 갖고 계신가요? 도와드릴게요! 👋",
        "안녕하세요! 달리기 계획을 함께 세워볼까요? 어떤 거리를 목표로 하고 계신지 알려주세요~ 🏃‍♀️",
    ],
    ResponseCategory.default: [
        "뉴런 러닝 코치예요~ 💪 맞춤 러닝 플랜을 위해 목표 거리와 달리기 경험을 알려주세요!",
        "즐거운 러닝을 위한 맞춤 플랜을 만들어 드릴게요! 😊 목표 거리, 경험 수준, 그리고 언제 달리실 건지 알려주세요~",
        "안녕하세요! 뉴런과 함께 달려볼까요? 🏃‍♀️ 어떤 거리를 목표로 하시는지, 그리고 달리기 경험은 어느 정도인지 알려주세요!",
    ],
}


class Responder:
    def __init__(self, logger: Optional[SessionLogger] = None, rng: Optional[random.Random] = None) -> None:
        self.logger = logger
        self.rng = rng or random.Random()

    def _values(self, slots: SlotSet) -> Dict[str, str]:
        goal = slots.get(Slot.target_time) or slots.get(Slot.target_pace) or ""
        return {
            "experience": slots.get(Slot.experience_level, "초보자"),
            "distance": slots.get(Slot.target_distance, "5km"),
            "date": slots.get(Slot.date_time, "내일 아침"),
            "intensity": slots.get(Slot.intensity, "중간"),
            "goal": goal,
            "goal_phrase": f"{goal} 목표로 " if goal else "",
            "emoji": self.rng.choice(EMOJIS),
        }

    def render(self, category: ResponseCategory, slots: SlotSet) -> str:
        template = self.rng.choice(TEMPLATES[category])
        return template.format(**self._values(slots))

    def run(self, category: ResponseCategory, slots: SlotSet) -> str:
        content = self.render(category, slots)
        if self.logger:
            self.logger.step("responder", {"category": category.value, "slots": slots.as_dict()}, {"content": content})
        return content
