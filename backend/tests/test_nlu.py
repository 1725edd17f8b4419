import pytest

from runplanner.core.nlu import classify_intensity, extract_slots, is_greeting, last_user_message
from runplanner.core.types import ConversationTurn, Intensity, Slot, SlotSet


def user(text):
    return ConversationTurn(role="user", text=text)


def coach(text):
    return ConversationTurn(role="assistant", text=text)


def test_no_user_turns_gives_empty_slots():
    assert len(extract_slots([])) == 0
    assert len(extract_slots([coach("5km 초보자 내일 가볍게 30분")])) == 0


@pytest.mark.parametrize("text", ["5km 달릴래요", "5 km 달릴래요", "5KM", "5k 도전"])
def test_distance_normalizes_to_km(text):
    assert extract_slots([user(text)]).get(Slot.target_distance) == "5km"


def test_distance_korean_unit():
    assert extract_slots([user("10 킬로미터")]).get(Slot.target_distance) == "10km"


def test_first_occurrence_wins():
    slots = extract_slots([user("초보자입니다"), coach("좋아요"), user("고급자입니다")])
    assert slots.get(Slot.experience_level) == "초보자"


def test_correction_is_not_picked_up():
    slots = extract_slots([user("5km"), user("사실 10km입니다")])
    assert slots.get(Slot.target_distance) == "5km"


def test_one_message_fills_several_slots():
    slots = extract_slots([user("5km 초보자 내일")])
    assert slots.get(Slot.target_distance) == "5km"
    assert slots.get(Slot.experience_level) == "초보자"
    assert slots.get(Slot.date_time) == "내일"


def test_frequency():
    assert extract_slots([user("주 3회 정도")]).get(Slot.weekly_frequency) == "주 3회"
    assert extract_slots([user("week 4 times")]).get(Slot.weekly_frequency) == "주 4회"


@pytest.mark.parametrize(
    "text,expected",
    [("30분 안에", "30분"), ("1시간 목표", "1시간"), ("45 minutes", "45분"), ("2 hours", "2시간")],
)
def test_time_goal_unit_label(text, expected):
    assert extract_slots([user(text)]).get(Slot.target_time) == expected


def test_pace_and_time_are_separate_slots():
    slots = extract_slots([user("킬로당 6분")])
    assert slots.get(Slot.target_pace) == "킬로당 6분"
    assert slots.get(Slot.target_time) == "6분"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("가볍게 뛸래요", Intensity.light),
        ("easy run", Intensity.light),
        ("보통으로", Intensity.medium),
        ("moderate", Intensity.medium),
        ("강하게", Intensity.high),
        ("hard", Intensity.high),
    ],
)
def test_intensity_buckets(text, expected):
    assert extract_slots([user(text)]).get(Slot.intensity) == expected.value


def test_intensity_defaults_to_high_without_light_or_medium_cue():
    assert classify_intensity("intense") == Intensity.high


def test_goal_literal():
    assert extract_slots([user("체중 감량이 목표")]).get(Slot.motivational_goal) == "체중 감량"
    assert extract_slots([user("Marathon prep")]).get(Slot.motivational_goal) == "marathon"


def test_restart_flag():
    slots = extract_slots([user("5km"), user("계획 취소해주세요")])
    assert slots.get(Slot.restart_requested) == "true"


def test_extraction_is_deterministic():
    history = [user("5km 초보자"), coach("언제요?"), user("내일 아침 가볍게 30분")]
    assert extract_slots(history) == extract_slots(history)


def test_slot_set_rejects_unknown_names():
    with pytest.raises(ValueError):
        SlotSet({"distance": "5km"})


def test_slot_set_first_write_wins():
    slots = SlotSet()
    assert slots.fill(Slot.target_distance, "5km") is True
    assert slots.fill("target_distance", "10km") is False
    assert slots.as_dict() == {"target_distance": "5km"}


def test_last_user_message_and_greeting():
    history = [user("hello"), coach("안녕하세요!")]
    assert last_user_message(history) == "hello"
    assert last_user_message([]) == "러닝 계획에 대해 알려주세요"
    assert is_greeting("안녕하세요")
    assert not is_greeting("5km")
