import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import DataStore, KeyValueStorage
from recommendation_service import RecommendationService


@pytest.fixture
def service(tmp_path):
    store = DataStore(KeyValueStorage(str(tmp_path / "rec.db")))
    return RecommendationService(store)


def test_recommend_without_history(service):
    assert not service.has_history("1")
    result = service.recommend("1")
    assert result["sets"] == [{"weight": 0, "reps": 10}] * 3


def test_recommend_uses_latest_session(service):
    store = service.store
    for reps in (10, 10):
        store.log_set("1", 90, reps, date="2024-01-01")
    for reps in (12, 10, 10):
        store.log_set("1", 100, reps, date="2024-01-08")
    assert service.has_history("1")
    result = service.recommend("1")
    assert [s["reps"] for s in result["sets"]] == [12, 11, 10]
    assert {s["weight"] for s in result["sets"]} == {100}


def test_recommend_unknown_exercise(service):
    with pytest.raises(ValueError):
        service.recommend("missing")


def test_starting_values(service):
    assert service.starting_values("1") == {"weight": None, "reps": 10, "is_per_hand": False}
    service.store.log_set("1", 60, 8, date="2024-01-01")
    assert service.starting_values("1") == {"weight": 60, "reps": 9, "is_per_hand": False}


def test_describe_per_hand_exercise(service):
    store = service.store
    exercise = store.create_exercise("DB Press", default_per_hand=True)
    store.log_set(exercise["id"], 20, 10, is_per_hand=True, date="2024-01-01")
    store.log_set(exercise["id"], 20, 8, is_per_hand=True, date="2024-01-01")
    assert service.describe(exercise["id"]) == "10, 9 reps @ 40 lb (20x2)"
    assert service.describe(exercise["id"], "kg") == "10, 9 reps @ 40 kg (20x2)"
