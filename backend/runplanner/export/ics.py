"""Calendar export for a plan card.

The plan card carries display strings such as ``2024년 3월 10일 (일) 오전 7:00``
and ``약 35분``; they are parsed back into a start time and a length before the
event is handed to ``icalendar``. Unparseable input never fails the export: the
start falls back to the current local time and the length to one hour.
"""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from icalendar import Calendar, Event


PRODUCT_ID = "-//run-planner//ics//KO"
CATEGORIES = ["러닝", "운동"]
DEFAULT_DURATION_MINUTES = 60
FILENAME = "running_plan.ics"

YEAR_RE = re.compile(r"(\d{4})년")
MONTH_RE = re.compile(r"(\d{1,2})월")
DAY_RE = re.compile(r"(\d{1,2})일")
CLOCK_RE = re.compile(r"(오전|오후)\s*(\d{1,2}):(\d{2})")
DURATION_PART_RE = re.compile(r"(\d+)\s*(시간|분)")


def parse_korean_datetime(text: str, now: Optional[datetime] = None) -> datetime:
    fallback = (now or datetime.now()).replace(second=0, microsecond=0)
    year, month, day = YEAR_RE.search(text), MONTH_RE.search(text), DAY_RE.search(text)
    if not (year and month and day):
        return fallback

    hours = minutes = 0
    clock = CLOCK_RE.search(text)
    if clock:
        hours, minutes = int(clock.group(2)), int(clock.group(3))
        if clock.group(1) == "오후" and hours < 12:
            hours += 12
        elif clock.group(1) == "오전" and hours == 12:
            hours = 0

    try:
        return datetime(int(year.group(1)), int(month.group(1)), int(day.group(1)), hours, minutes)
    except ValueError:
        return fallback


def parse_duration_minutes(text: str) -> int:
    parts = DURATION_PART_RE.findall(text)
    if not parts:
        return DEFAULT_DURATION_MINUTES
    return sum(int(n) * 60 if unit == "시간" else int(n) for n, unit in parts)


def event_window(date_text: str, duration_text: str, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    start = parse_korean_datetime(date_text, now)
    return start, start + timedelta(minutes=parse_duration_minutes(duration_text))


def build_calendar(title: str, date_text: str, duration_text: str, details: str, now: Optional[datetime] = None) -> bytes:
    start, end = event_window(date_text, duration_text, now)

    event = Event()
    event.add("uid", f"{uuid.uuid4()}@run-planner")
    event.add("dtstamp", datetime.now(timezone.utc))
    event.add("summary", title)
    event.add("description", details)
    event.add("dtstart", start)
    event.add("dtend", end)
    event.add("categories", CATEGORIES)
    event.add("status", "CONFIRMED")
    event.add("transp", "OPAQUE")

    cal = Calendar()
    cal.add("prodid", PRODUCT_ID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add_component(event)
    return cal.to_ical()
