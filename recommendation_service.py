from __future__ import annotations

from algorithms.progression import recommend
from algorithms.weight_converter import WeightConverter
from db import DataStore


class RecommendationService:
    """Generate next-session targets from logged history."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def _exercise(self, exercise_id: str) -> dict:
        exercise = self.store.get_exercise(exercise_id)
        if exercise is None:
            raise ValueError(f"exercise {exercise_id} not found")
        return exercise

    def has_history(self, exercise_id: str) -> bool:
        return len(self.store.get_workout_history_for_exercise(exercise_id)) > 0

    def recommend(self, exercise_id: str) -> dict:
        exercise = self._exercise(exercise_id)
        history = self.store.get_workout_history_for_exercise(exercise_id)
        return recommend(exercise, history)

    def starting_values(self, exercise_id: str) -> dict:
        """Return the values a set logging form should start with."""
        exercise = self._exercise(exercise_id)
        first = self.recommend(exercise_id)["sets"][0]
        return {
            "weight": first["weight"] if first["weight"] > 0 else None,
            "reps": first["reps"],
            "is_per_hand": bool(exercise.get("defaultPerHand", False)),
        }

    def describe(self, exercise_id: str, unit: str | None = None) -> str:
        """Summarize the target, e.g. ``12, 11, 10 reps @ 40 lb (20x2)``."""
        exercise = self._exercise(exercise_id)
        unit = unit or self.store.get_settings()["preferredUnit"]
        sets = self.recommend(exercise_id)["sets"]
        reps = ", ".join(str(s["reps"]) for s in sets)
        weight = WeightConverter.display(
            sets[0]["weight"], bool(exercise.get("defaultPerHand", False)), unit
        )
        return f"{reps} reps @ {weight}"
