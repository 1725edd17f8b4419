from __future__ import annotations

import json
import os
import re
from typing import Optional, Sequence

from pydantic import ValidationError

from runplanner.core.logger import SessionLogger
from runplanner.core.nlu import last_user_message
from runplanner.core.types import SLOT_LABELS, ConversationTurn, RunPlan, SlotSet


HISTORY_PROMPT_TURNS = int(os.getenv("HISTORY_PROMPT_TURNS", "8"))

COACH_PERSONA = (
    "당신은 '뉴런 러닝 코치'입니다. 친근하고 긍정적인 말투로, 짧고 명확하게 한국어로 답하세요.\n"
    "사용자의 러닝 목표를 대화로 파악하세요: 경험 수준(초보자/중급자/고급자), 목표 거리, "
    "달리는 날짜와 시간, 강도(가벼움/중간/높음), 목표 시간 또는 페이스.\n"
    "빠진 정보가 있으면 한 번에 하나씩만 물어보세요.\n"
    "정보가 모두 모이면 한두 문장으로 플랜을 소개하고, 답변 마지막에 아래 형식의 JSON 코드 블록을 붙이세요.\n"
    "```json\n"
    '{"title": "플랜 제목", "date": "2024년 3월 10일 (일) 오전 7:00", "distance": "5km", '
    '"duration": "약 35분", "intensity": "가벼움", "details": "준비운동 5분 → 본운동 → 정리운동 5분"}\n'
    "```\n"
    "사용자가 계획을 바꾸거나 새로 만들고 싶어하면 새 정보를 다시 물어보세요."
)

PLAN_JSON_RE = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```")

SPEAKERS = {"user": "사용자", "assistant": "코치"}


def build_prompt(history: Sequence[ConversationTurn], slots: SlotSet, turns: int = HISTORY_PROMPT_TURNS) -> str:
    context = ""
    recent = list(history)[-turns:]
    if len(recent) > 1:
        context = "이전 대화 내용:\n\n"
        for turn in recent:
            context += f"{SPEAKERS[turn.role]}: {turn.text}\n\n"

    if len(slots):
        context += "\n사용자 정보:\n"
        for slot, value in slots.items():
            context += f"{SLOT_LABELS[slot]}: {value}\n"
        context += "\n"

    return f"{COACH_PERSONA}\n\n{context}\n\n사용자의 메시지: {last_user_message(history)}"


def parse_plan(text: str, logger: Optional[SessionLogger] = None) -> Optional[RunPlan]:
    m = PLAN_JSON_RE.search(text)
    if not m:
        return None
    try:
        return RunPlan.model_validate(json.loads(m.group(1)))
    except (ValueError, ValidationError) as ex:
        if logger:
            logger.info("Plan JSON block could not be used", error=str(ex), snippet=m.group(1)[:500])
        return None
