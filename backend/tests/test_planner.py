import random
import re
from datetime import date, datetime

import pytest

from runplanner.agents.planner import PlanSynthesizer, distance_km, resolve_day_offset
from runplanner.core.types import Intensity, SlotSet
from runplanner.export.ics import parse_korean_datetime


FRIDAY = date(2024, 3, 8)


def synth(seed=0, today=FRIDAY):
    return PlanSynthesizer(rng=random.Random(seed), today=lambda: today)


def minutes(duration):
    return int(re.search(r"약 (\d+)분", duration).group(1))


@pytest.mark.parametrize("intensity", ["가벼움", "중간", "높음"])
def test_beginner_plan_is_always_light(intensity):
    slots = SlotSet({"experience_level": "초보자", "target_distance": "5km", "intensity": intensity})
    for seed in range(5):
        plan = synth(seed).synthesize(slots)
        assert plan.intensity == Intensity.light
        assert plan.title == "5km 초보자 러닝 플랜"
        assert 35 <= minutes(plan.duration) <= 44
        assert "(총 25분)" in plan.details


def test_intermediate_and_advanced_branches():
    mid = synth().synthesize(SlotSet({"experience_level": "intermediate", "target_distance": "10km"}))
    assert mid.intensity == Intensity.medium
    assert mid.title == "10km 중급자 러닝 플랜"
    assert 60 <= minutes(mid.duration) <= 69
    assert re.search(r"\(([56]):[0-5]0/km\)", mid.details)

    adv = synth().synthesize(SlotSet({"experience_level": "고급", "target_distance": "8km", "intensity": "가벼움"}))
    assert adv.intensity == Intensity.high
    assert adv.title == "8km 고급자 인터벌 훈련"
    assert 40 <= minutes(adv.duration) <= 49
    assert re.search(r"[34]00m 인터벌 x [678]회", adv.details)


def test_generic_branch_uses_frequency_and_goal():
    slots = SlotSet(
        {
            "experience_level": "입문자",
            "target_distance": "7km",
            "weekly_frequency": "주 4회",
            "motivational_goal": "다이어트",
        }
    )
    plan = synth().synthesize(slots)
    assert plan.title == "7km 주 4회 러닝 플랜 (다이어트)"
    assert plan.intensity == Intensity.medium
    assert 42 <= minutes(plan.duration) <= 56


def test_defaults_without_slots():
    plan = synth().synthesize(SlotSet())
    assert plan.distance == "5km"
    assert plan.intensity == Intensity.light


def test_distance_km():
    assert distance_km("12km") == 12
    assert distance_km("abc") == 5
    assert distance_km(None) == 5


@pytest.mark.parametrize(
    "token,offset",
    [("오늘", 0), ("내일", 1), ("모레", 2), ("다음주", 7), ("주말", 1), ("월요일", 3), ("금요일", 7), ("아침", None)],
)
def test_resolve_day_offset(token, offset):
    assert resolve_day_offset(token, FRIDAY) == offset


def test_date_for_tomorrow_is_formatted_in_korean():
    plan = synth().synthesize(SlotSet({"date_time": "내일"}))
    assert plan.date.startswith("2024년 3월 9일 (토) 오전 ")
    assert re.fullmatch(r".* 오전 [6-9]:[0-5]0", plan.date)


def test_unresolved_date_is_one_to_seven_days_ahead():
    for seed in range(20):
        plan = synth(seed).synthesize(SlotSet({"date_time": "아침"}))
        when = parse_korean_datetime(plan.date)
        assert datetime(2024, 3, 9) <= when < datetime(2024, 3, 16)
        assert 6 <= when.hour <= 9
        assert when.minute % 10 == 0


def test_seeded_plans_are_repeatable():
    slots = SlotSet({"experience_level": "고급자", "target_distance": "10km"})
    assert synth(11).synthesize(slots) == synth(11).synthesize(slots)
