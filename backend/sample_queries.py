import json
import uuid
from typing import Optional

import requests

API = 'http://127.0.0.1:8000'

def call(msg: str, sid: Optional[str] = None) -> dict:
  r = requests.post(f"{API}/chat", json={"message": msg, "sessionId": sid}, timeout=60)
  r.raise_for_status()
  data = r.json()
  print(json.dumps(data, indent=2, ensure_ascii=False))
  return data

def export(plan: dict) -> None:
  r = requests.post(f"{API}/ical", json={k: plan[k] for k in ("title", "date", "duration", "details")}, timeout=30)
  r.raise_for_status()
  print(r.headers.get("content-type"))
  print(r.text)

if __name__ == '__main__':
  sid = uuid.uuid4().hex
  call("안녕하세요", sid)
  call("5km 달리고 싶어요", sid)
  call("초보자예요", sid)
  call("내일 아침에 가볍게 뛸래요", sid)
  data = call("30분 안에 완주하는 게 목표예요", sid)
  if data.get("planData"):
    export(data["planData"])
