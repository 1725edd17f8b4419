from __future__ import annotations

import os
import uuid

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse, Response

from runplanner.core.logger import SessionLogger
from runplanner.core.pipeline import ChatPipeline
from runplanner.core.types import CalendarRequest, ChatRequest, ChatResponse
from runplanner.export.ics import FILENAME, build_calendar
from runplanner.llm.bedrock import has_llm_credentials


INVALID_MESSAGE_TEXT = "메시지가 올바르지 않습니다."
MISSING_KEY_TEXT = "API 키가 필요합니다. 앱 설정을 확인해주세요."
SERVER_ERROR_TEXT = "서버 오류가 발생했습니다. 잠시 후 다시 시도해주세요."
MISSING_FIELDS_TEXT = "필수 정보가 누락되었습니다."
CALENDAR_ERROR_TEXT = "일정 파일 생성 중 오류가 발생했습니다."


app = FastAPI(title="Run Planner API", default_response_class=ORJSONResponse)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

pipeline = ChatPipeline()


def _api_logger() -> SessionLogger:
    return SessionLogger("api")


def _reply(status_code: int, text: str) -> ORJSONResponse:
    return ORJSONResponse({"text": text, "id": uuid.uuid4().hex}, status_code=status_code)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest):
    if not isinstance(req.message, str) or not req.message.strip():
        return _reply(400, INVALID_MESSAGE_TEXT)
    if pipeline.use_llm and not has_llm_credentials():
        return _reply(400, MISSING_KEY_TEXT)
    try:
        return pipeline.process(req.message, session_id=req.session_id)
    except Exception as ex:
        _api_logger().error("Chat request failed", ex)
        return _reply(500, SERVER_ERROR_TEXT)


@app.post("/ical")
def ical(req: CalendarRequest):
    if not all([req.title, req.date, req.duration, req.details]):
        return ORJSONResponse({"error": MISSING_FIELDS_TEXT}, status_code=400)
    try:
        content = build_calendar(req.title, req.date, req.duration, req.details)
    except Exception as ex:
        _api_logger().error("Calendar export failed", ex)
        return ORJSONResponse({"error": CALENDAR_ERROR_TEXT}, status_code=500)
    return Response(
        content=content,
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{FILENAME}"'},
    )


# Local dev convenience: uvicorn entry point
if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    uvicorn.run("runplanner.main:app", host="0.0.0.0", port=port, reload=True)
