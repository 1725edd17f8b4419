from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Dict, List

from .types import ConversationTurn


SESSION_MAX_TURNS = int(os.getenv("SESSION_MAX_TURNS", "20"))
DEFAULT_SESSION_ID = "default"


class SessionStore(ABC):
    """Conversation histories keyed by an opaque session id."""

    @abstractmethod
    def history(self, session_id: str) -> List[ConversationTurn]:
        """Return a copy of the history, creating an empty session if needed."""

    @abstractmethod
    def append(self, session_id: str, turn: ConversationTurn) -> None:
        ...

    @abstractmethod
    def reset(self, session_id: str) -> None:
        ...


class InMemorySessionStore(SessionStore):
    # Lives as long as the process; distinct session ids are never evicted.

    def __init__(self, max_turns: int = SESSION_MAX_TURNS, keep_recent: int | None = None) -> None:
        self.max_turns = max_turns
        self.keep_recent = keep_recent if keep_recent is not None else max(1, max_turns // 2 - 1)
        self._sessions: Dict[str, List[ConversationTurn]] = {}

    def _get(self, session_id: str) -> List[ConversationTurn]:
        turns = self._sessions.get(session_id)
        if turns is None:
            turns = []
            self._sessions[session_id] = turns
        return turns

    def history(self, session_id: str) -> List[ConversationTurn]:
        return list(self._get(session_id))

    def append(self, session_id: str, turn: ConversationTurn) -> None:
        turns = self._get(session_id)
        turns.append(turn)
        if len(turns) >= self.max_turns:
            # The opening turn is kept; it usually carries the initial request.
            self._sessions[session_id] = [turns[0], *turns[-self.keep_recent:]]

    def reset(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
