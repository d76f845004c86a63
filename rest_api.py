import logging
from typing import Any, Optional

from fastapi import Body, FastAPI, HTTPException, Query, Response

from config import APP_VERSION, load_app_config
from db import DataStore, KeyValueStorage
from models import Exercise, InvalidBackupError, InvalidSetError, Routine, WorkoutInput
from recommendation_service import RecommendationService
from tools import DateTools

logger = logging.getLogger(__name__)


class LiftLogAPI:
    """Provides REST endpoints for workout logging."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        yaml_path: str = "settings.yaml",
    ) -> None:
        config = load_app_config(yaml_path)
        self.db_path = db_path or config.db_path
        self.store = DataStore(KeyValueStorage(self.db_path), config.storage_key)
        self.recommender = RecommendationService(self.store)
        self.app = FastAPI(
            title="LiftLog API",
            description="REST API for workout logging and rep progression",
            version=APP_VERSION,
        )
        self._setup_routes()

    def _require_exercise(self, exercise_id: str) -> dict:
        exercise = self.store.get_exercise(exercise_id)
        if exercise is None:
            raise HTTPException(status_code=404, detail="exercise not found")
        return exercise

    def _setup_routes(self) -> None:
        @self.app.get("/health", summary="Health check")
        def health():
            """Return API and storage status."""
            try:
                self.store.load()
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - storage failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/exercises")
        def list_exercises():
            return self.store.get_exercises()

        @self.app.post("/exercises")
        def create_exercise(
            name: str,
            category: Optional[str] = None,
            default_per_hand: Optional[bool] = None,
            notes: Optional[str] = None,
        ):
            exercise = self.store.create_exercise(
                name,
                default_per_hand=default_per_hand,
                notes=notes,
                category=category,
            )
            return {"id": exercise["id"]}

        @self.app.get("/exercises/{exercise_id}")
        def get_exercise(exercise_id: str):
            return self._require_exercise(exercise_id)

        @self.app.put("/exercises/{exercise_id}")
        def update_exercise(exercise_id: str, exercise: Exercise):
            if exercise.id != exercise_id:
                raise HTTPException(status_code=400, detail="id mismatch")
            self.store.update_exercise(exercise.to_document())
            return {"status": "updated"}

        @self.app.delete("/exercises/{exercise_id}")
        def delete_exercise(exercise_id: str):
            self.store.delete_exercise(exercise_id)
            return {"status": "deleted"}

        @self.app.post("/exercises/{exercise_id}/cues")
        def add_cue(exercise_id: str, cue: str):
            self._require_exercise(exercise_id)
            self.store.add_cue(exercise_id, cue)
            return self.store.get_exercise(exercise_id)["cues"]

        @self.app.delete("/exercises/{exercise_id}/cues/{index}")
        def remove_cue(exercise_id: str, index: int):
            self._require_exercise(exercise_id)
            self.store.remove_cue(exercise_id, index)
            return self.store.get_exercise(exercise_id)["cues"]

        @self.app.get("/exercises/{exercise_id}/history")
        def exercise_history(exercise_id: str):
            return self.store.get_workout_history_for_exercise(exercise_id)

        @self.app.get("/exercises/{exercise_id}/recommendation")
        def exercise_recommendation(exercise_id: str):
            try:
                return self.recommender.recommend(exercise_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.get("/exercises/{exercise_id}/recommendation/start")
        def exercise_starting_values(exercise_id: str):
            """Weight, reps and per-hand flag a new set should start from."""
            try:
                return self.recommender.starting_values(exercise_id)
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.get("/exercises/{exercise_id}/target")
        def exercise_target(exercise_id: str, unit: Optional[str] = None):
            try:
                return {"summary": self.recommender.describe(exercise_id, unit)}
            except ValueError as e:
                raise HTTPException(status_code=404, detail=str(e))

        @self.app.post("/exercises/{exercise_id}/sets")
        def log_set(
            exercise_id: str,
            weight: float = Query(..., gt=0),
            reps: int = Query(..., gt=0),
            is_per_hand: bool = False,
            date: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}-\d{2}$"),
            notes: Optional[str] = None,
        ):
            self._require_exercise(exercise_id)
            try:
                workout_id, lift_set = self.store.log_set(
                    exercise_id, weight, reps, is_per_hand, date, notes
                )
            except InvalidSetError as e:
                raise HTTPException(status_code=400, detail=str(e))
            return {"workout_id": workout_id, "set": lift_set}

        @self.app.get("/workouts")
        def list_workouts():
            return self.store.get_workouts()

        @self.app.post("/workouts")
        def add_workout(workout: WorkoutInput):
            self.store.add_workout(workout.to_document())
            return {"id": workout.id}

        @self.app.get("/workouts/recent")
        def recent_workouts(limit: int = Query(3, gt=0)):
            return self.store.get_workouts_by_date(limit)

        @self.app.get("/workouts/{workout_id}")
        def get_workout(workout_id: str):
            workout = self.store.get_workout(workout_id)
            if workout is None:
                raise HTTPException(status_code=404, detail="workout not found")
            return workout

        @self.app.put("/workouts/{workout_id}")
        def update_workout(workout_id: str, workout: WorkoutInput):
            if workout.id != workout_id:
                raise HTTPException(status_code=400, detail="id mismatch")
            self.store.update_workout(workout.to_document())
            return {"status": "updated"}

        @self.app.delete("/workouts/{workout_id}")
        def delete_workout(workout_id: str):
            self.store.delete_workout(workout_id)
            return {"status": "deleted"}

        @self.app.delete("/workouts/{workout_id}/exercises/{exercise_id}/sets/{set_id}")
        def delete_set(workout_id: str, exercise_id: str, set_id: str):
            self.store.delete_set(workout_id, exercise_id, set_id)
            return {"status": "deleted"}

        @self.app.get("/routines")
        def list_routines():
            return self.store.get_routines()

        @self.app.post("/routines")
        def create_routine(
            name: str,
            exercise_ids: Optional[list[str]] = Query(None),
            notes: Optional[str] = None,
        ):
            routine = self.store.create_routine(name, exercise_ids, notes)
            return {"id": routine["id"]}

        @self.app.get("/routines/{routine_id}")
        def get_routine(routine_id: str):
            routine = self.store.get_routine(routine_id)
            if routine is None:
                raise HTTPException(status_code=404, detail="routine not found")
            return routine

        @self.app.put("/routines/{routine_id}")
        def update_routine(routine_id: str, routine: Routine):
            if routine.id != routine_id:
                raise HTTPException(status_code=400, detail="id mismatch")
            self.store.update_routine(routine.to_document())
            return {"status": "updated"}

        @self.app.delete("/routines/{routine_id}")
        def delete_routine(routine_id: str):
            self.store.delete_routine(routine_id)
            return {"status": "deleted"}

        @self.app.get("/settings")
        def get_settings():
            return self.store.get_settings()

        @self.app.put("/settings")
        def update_settings(
            preferred_unit: Optional[str] = None, theme: Optional[str] = None
        ):
            try:
                return self.store.update_settings(preferred_unit, theme)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=str(e))

        @self.app.get("/export")
        def export_data():
            filename = f"liftlog_backup_{DateTools.today()}.json"
            return Response(
                content=self.store.export_json(),
                media_type="application/json",
                headers={"Content-Disposition": f'attachment; filename="{filename}"'},
            )

        @self.app.post("/import")
        def import_data(data: Any = Body(...)):
            try:
                imported = self.store.import_document(data)
            except InvalidBackupError as e:
                logger.warning("Rejected backup import: %s", e)
                raise HTTPException(status_code=400, detail=str(e))
            return {
                "status": "imported",
                "exercises": len(imported["exercises"]),
                "workouts": len(imported["workouts"]),
            }

        @self.app.post("/reset")
        def reset_data():
            self.store.reset()
            return {"status": "reset"}


def create_app(yaml_path: str = "settings.yaml") -> FastAPI:
    return LiftLogAPI(yaml_path=yaml_path).app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app())
