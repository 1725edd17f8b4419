from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple, TypedDict

from langgraph.graph import END, START, StateGraph

from runplanner.core.types import ConversationTurn, RunPlan, SlotSet


class TurnState(TypedDict, total=False):
    history: List[ConversationTurn]
    slots: SlotSet
    prompt: str
    raw_text: str
    error: Optional[str]
    text: str
    plan: Optional[RunPlan]
    source: str


def build_turn_graph(
    *,
    extract: Callable[[Sequence[ConversationTurn]], SlotSet],
    build_prompt: Callable[[Sequence[ConversationTurn], SlotSet], str],
    generate: Callable[[str], str],
    parse_plan: Callable[[str], Optional[RunPlan]],
    fallback: Callable[[Sequence[ConversationTurn], SlotSet], Tuple[str, RunPlan]],
    on_llm_error: Callable[[Exception], None],
    use_llm: Callable[[], bool],
):
    """Wire one chat turn: extract -> prompt -> LLM -> parse, or local fallback.

    Errors raised by ``extract`` or ``build_prompt`` propagate to the caller;
    errors from ``generate`` are reported through ``on_llm_error`` and routed to
    the local fallback.
    """
    g = StateGraph(TurnState)

    def extract_node(state: TurnState) -> TurnState:
        return {"slots": extract(state["history"])}

    def prompt_node(state: TurnState) -> TurnState:
        return {"prompt": build_prompt(state["history"], state["slots"])}

    def generate_node(state: TurnState) -> TurnState:
        try:
            raw = generate(state["prompt"])
        except Exception as ex:
            on_llm_error(ex)
            return {"error": f"{type(ex).__name__}: {ex}"}
        return {"raw_text": raw, "error": None}

    def parse_node(state: TurnState) -> TurnState:
        raw = state["raw_text"]
        return {"text": raw, "plan": parse_plan(raw), "source": "llm"}

    def fallback_node(state: TurnState) -> TurnState:
        text, plan = fallback(state["history"], state["slots"])
        return {"text": text, "plan": plan, "source": "fallback"}

    # Node names must not collide with state keys.
    g.add_node("extract_slots", extract_node)
    g.add_node("build_prompt", prompt_node)
    g.add_node("call_llm", generate_node)
    g.add_node("parse_reply", parse_node)
    g.add_node("local_fallback", fallback_node)

    g.add_edge(START, "extract_slots")
    g.add_edge("extract_slots", "build_prompt")
    g.add_conditional_edges(
        "build_prompt",
        lambda state: "call_llm" if use_llm() else "local_fallback",
        {"call_llm": "call_llm", "local_fallback": "local_fallback"},
    )
    g.add_conditional_edges(
        "call_llm",
        lambda state: "local_fallback" if state.get("error") else "parse_reply",
        {"local_fallback": "local_fallback", "parse_reply": "parse_reply"},
    )
    g.add_edge("parse_reply", END)
    g.add_edge("local_fallback", END)
    return g.compile()
