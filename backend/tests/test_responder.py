import random

import pytest

from runplanner.agents.responder import TEMPLATES, Responder
from runplanner.core.types import ResponseCategory, SlotSet


SLOTS = SlotSet(
    {
        "experience_level": "중급자",
        "target_distance": "10km",
        "date_time": "주말",
        "intensity": "중간",
        "target_time": "50분",
    }
)


def test_every_category_has_a_pool():
    for category in ResponseCategory:
        assert len(TEMPLATES[category]) >= 2


@pytest.mark.parametrize("category", list(ResponseCategory))
def test_render_interpolates_without_leftover_fields(category):
    for seed in range(10):
        text = Responder(rng=random.Random(seed)).render(category, SLOTS)
        assert text
        assert "{" not in text and "}" not in text


def test_plan_ready_mentions_distance_and_date():
    for seed in range(10):
        text = Responder(rng=random.Random(seed)).render(ResponseCategory.plan_ready, SLOTS)
        assert "10km" in text
        assert "주말" in text


def test_ask_experience_mentions_distance():
    text = Responder(rng=random.Random(1)).render(ResponseCategory.ask_experience, SLOTS)
    assert "10km" in text
    assert "초보자" in text


def test_seeded_selection_is_repeatable():
    a = Responder(rng=random.Random(42)).render(ResponseCategory.greeting, SLOTS)
    b = Responder(rng=random.Random(42)).render(ResponseCategory.greeting, SLOTS)
    assert a == b
    assert a in TEMPLATES[ResponseCategory.greeting]
