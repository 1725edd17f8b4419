from datetime import datetime

from icalendar import Calendar

from runplanner.export.ics import build_calendar, event_window, parse_duration_minutes, parse_korean_datetime


NOW = datetime(2024, 1, 1, 8, 0)


def test_end_is_start_plus_duration():
    start, end = event_window("2024년 3월 10일 (일) 오전 7:00", "30분")
    assert start == datetime(2024, 3, 10, 7, 0)
    assert end == datetime(2024, 3, 10, 7, 30)


def test_afternoon_and_midnight_hours():
    assert parse_korean_datetime("2024년 5월 13일 (월) 오후 3:15") == datetime(2024, 5, 13, 15, 15)
    assert parse_korean_datetime("2024년 5월 13일 (월) 오후 12:30") == datetime(2024, 5, 13, 12, 30)
    assert parse_korean_datetime("2024년 5월 13일 (월) 오전 12:05") == datetime(2024, 5, 13, 0, 5)


def test_missing_clock_is_midnight():
    assert parse_korean_datetime("2024년 5월 13일") == datetime(2024, 5, 13, 0, 0)


def test_unparseable_dates_fall_back_to_now():
    assert parse_korean_datetime("내일 아침", now=NOW) == NOW
    assert parse_korean_datetime("2024년 2월 30일 오전 7:00", now=NOW) == NOW


def test_duration_parsing():
    assert parse_duration_minutes("약 35분") == 35
    assert parse_duration_minutes("약 1시간 30분") == 90
    assert parse_duration_minutes("2시간") == 120
    assert parse_duration_minutes("금방") == 60


def test_build_calendar_event():
    body = build_calendar("5km 초보자 러닝 플랜", "2024년 3월 10일 (일) 오전 7:00", "약 1시간", "준비운동 5분")
    cal = Calendar.from_ical(body)
    events = list(cal.walk("VEVENT"))
    assert len(events) == 1
    event = events[0]
    assert str(event.get("summary")) == "5km 초보자 러닝 플랜"
    assert str(event.get("description")) == "준비운동 5분"
    assert event.decoded("dtstart") == datetime(2024, 3, 10, 7, 0)
    assert event.decoded("dtend") == datetime(2024, 3, 10, 8, 0)
    assert str(event.get("status")) == "CONFIRMED"
    assert b"-//run-planner//ics//KO" in body
