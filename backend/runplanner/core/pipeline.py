from __future__ import annotations

import os
import random
import uuid
from datetime import date
from typing import Callable, Dict, Optional, Sequence, Tuple

from runplanner.agents.planner import PlanSynthesizer
from runplanner.agents.responder import Responder
from runplanner.agents_llm.coach_llm import build_prompt, parse_plan
from runplanner.core.logger import SessionLogger
from runplanner.core.nlu import extract_slots, last_user_message
from runplanner.core.policy import decide
from runplanner.core.session_store import DEFAULT_SESSION_ID, InMemorySessionStore, SessionStore
from runplanner.core.types import ChatResponse, ConversationTurn, RunPlan, SlotSet
from runplanner.graph.turn_graph import build_turn_graph
from runplanner.llm.bedrock import call_llm_text


USE_LLM = os.getenv("USE_LLM", "true").lower() in {"1", "true", "yes"}

MINIMAL_FALLBACK_TEXT = (
    "러닝 계획을 도와드릴게요! 😊 목표 거리, 달리기 경험, 그리고 언제 달리실 건지 알려주세요~"
)


class ChatPipeline:
    def __init__(
        self,
        store: Optional[SessionStore] = None,
        generate: Optional[Callable[[str], str]] = None,
        rng: Optional[random.Random] = None,
        today: Optional[Callable[[], date]] = None,
        use_llm: bool = USE_LLM,
    ) -> None:
        self.store = store or InMemorySessionStore()
        self.generate = generate or call_llm_text
        self.rng = rng or random.Random()
        self.today = today
        self.use_llm = use_llm
        self._loggers: Dict[str, SessionLogger] = {}

    def _get_logger(self, session_id: str) -> SessionLogger:
        if session_id not in self._loggers:
            self._loggers[session_id] = SessionLogger(session_id)
        return self._loggers[session_id]

    def _fallback(
        self, logger: SessionLogger, history: Sequence[ConversationTurn], slots: SlotSet
    ) -> Tuple[str, RunPlan]:
        category = decide(slots, last_user_message(history))
        text = Responder(logger, self.rng).run(category, slots)
        plan = PlanSynthesizer(logger, self.rng, self.today).synthesize(slots)
        return text, plan

    def _extract(self, logger: SessionLogger, history: Sequence[ConversationTurn]) -> SlotSet:
        slots = extract_slots(history)
        logger.step("slot_extractor", {"turns": len(history)}, slots.as_dict())
        return slots

    def _run_turn(self, logger: SessionLogger, history: Sequence[ConversationTurn]) -> Tuple[str, Optional[RunPlan], str]:
        graph = build_turn_graph(
            extract=lambda h: self._extract(logger, h),
            build_prompt=build_prompt,
            generate=lambda prompt: self.generate(prompt),
            parse_plan=lambda raw: parse_plan(raw, logger),
            fallback=lambda h, slots: self._fallback(logger, h, slots),
            on_llm_error=lambda ex: logger.llm_error("LLM call failed; using local fallback", error=f"{type(ex).__name__}: {ex}"),
            use_llm=lambda: self.use_llm,
        )
        try:
            state = graph.invoke({"history": list(history)})
        except Exception as ex:
            logger.error("Turn processing failed; using minimal fallback", ex)
            plan = PlanSynthesizer(logger, self.rng, self.today).synthesize(SlotSet())
            return MINIMAL_FALLBACK_TEXT, plan, "minimal"
        return state["text"], state.get("plan"), state.get("source", "llm")

    def process(self, user_message: str, session_id: str | None = None) -> ChatResponse:
        sid = session_id or DEFAULT_SESSION_ID
        logger = self._get_logger(sid)
        logger.user_message(user_message)

        self.store.append(sid, ConversationTurn(role="user", text=user_message))
        history = self.store.history(sid)

        text, plan, source = self._run_turn(logger, history)

        self.store.append(sid, ConversationTurn(role="assistant", text=text))
        logger.assistant_message(text)
        response = ChatResponse(text=text, id=uuid.uuid4().hex, plan_data=plan, session_id=sid)
        logger.write("chat_response", {"source": source, **response.model_dump(by_alias=True)})
        return response
