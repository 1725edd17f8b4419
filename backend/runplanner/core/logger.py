from __future__ import annotations

import hashlib
import json
import os
import re
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict


def default_logs_dir() -> str:
    return os.getenv("LOGS_DIR") or os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "..", "logs"
    )


UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]")
MAX_STEM_LEN = 100


def file_stem(session_id: str) -> str:
    """Filesystem-safe stem for a session id; altered ids get a short hash suffix."""
    stem = UNSAFE_NAME_RE.sub("_", session_id)[:MAX_STEM_LEN]
    if stem != session_id:
        stem += "-" + hashlib.sha1(session_id.encode("utf-8")).hexdigest()[:10]
    return stem


class SessionLogger:
    def __init__(self, session_id: str, base_dir: str | None = None) -> None:
        self.session_id = session_id
        self.logs_dir = os.path.abspath(base_dir or default_logs_dir())
        Path(self.logs_dir).mkdir(parents=True, exist_ok=True)
        self.file_path = os.path.join(self.logs_dir, f"session_{file_stem(self.session_id)}.jsonl")

    def write(self, event_type: str, payload: Dict[str, Any]) -> None:
        record = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
            "session_id": self.session_id,
            "event": event_type,
            "payload": payload,
        }
        with open(self.file_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")

    def step(self, name: str, input_data: Dict[str, Any], output_data: Dict[str, Any]) -> None:
        self.write(
            "agent_step",
            {"name": name, "input": input_data, "output": output_data},
        )

    def user_message(self, message: str) -> None:
        self.write("user_message", {"message": message})

    def assistant_message(self, message: str) -> None:
        self.write("assistant_message", {"message": message})

    def llm_error(self, reason: str, **kwargs: Any) -> None:
        self.write("llm_error", {"reason": reason, **kwargs})

    def error(self, message: str, exc: BaseException) -> None:
        self.write(
            "error",
            {
                "message": message,
                "error": f"{type(exc).__name__}: {exc}",
                "traceback": "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
            },
        )

    def info(self, message: str, **kwargs: Any) -> None:
        payload = {"message": message, **kwargs}
        self.write("info", payload)
