import copy
import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import List, Optional, Tuple

from pydantic import ValidationError

from models import InvalidBackupError, LiftSet, check_document, check_entity
from settings_schema import DEFAULT_SETTINGS, validate_settings
from tools import (
    DateTools,
    new_id,
    timestamp_ms,
    validate_set_input,
    validate_workout_date,
)

logger = logging.getLogger(__name__)

STORAGE_KEY = "fitapp_data_v1"

DEFAULT_DATA = {
    "exercises": [
        {
            "id": "1",
            "name": "Hip Thrusts",
            "cues": ["Brace core", "Tuck hips", "Lock out at top"],
        },
        {
            "id": "2",
            "name": "RDLs",
            "cues": ["Hinge at hips", "Keep back flat", "Feel stretch in hamstrings"],
        },
    ],
    "workouts": [],
    "routines": [],
    "settings": DEFAULT_SETTINGS,
}


def default_document() -> dict:
    return copy.deepcopy(DEFAULT_DATA)


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "storage": """CREATE TABLE IF NOT EXISTS storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );""",
    }

    def __init__(self, db_path: str = "liftlog.db") -> None:
        self._db_path = db_path
        self._ensure_schema()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for sql in self._TABLE_DEFINITIONS.values():
                conn.execute(sql)

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class KeyValueStorage(Database):
    """String values stored under string keys."""

    def get_item(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM storage WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set_item(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO storage (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )

    def remove_item(self, key: str) -> None:
        self.execute("DELETE FROM storage WHERE key = ?;", (key,))


class DataStore:
    """Whole-document store for exercises, workouts, routines and settings.

    Every operation loads the full document, changes it in memory and saves
    it back in a single write. Mutations are serialized by a lock so that
    concurrent callers keep last-write-wins semantics at document level.
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self._lock = threading.RLock()

    @staticmethod
    def _backfill(data: dict) -> dict:
        for field in ("exercises", "workouts", "routines"):
            if data.get(field) is None:
                data[field] = []
        settings = data.get("settings")
        if not isinstance(settings, dict):
            settings = {}
        data["settings"] = {**DEFAULT_SETTINGS, **settings}
        return data

    def load(self) -> dict:
        raw = self.storage.get_item(self.key)
        if not raw:
            return default_document()
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Stored document is not valid JSON; using defaults")
            return default_document()
        if not isinstance(data, dict):
            logger.warning("Stored document is not an object; using defaults")
            return default_document()
        data = self._backfill(data)
        try:
            check_document(data)
        except ValidationError:
            logger.warning("Stored document has malformed entries; using defaults")
            return default_document()
        return data

    def save(self, data: dict) -> None:
        self.storage.set_item(self.key, json.dumps(data))

    @contextmanager
    def _mutate(self):
        with self._lock:
            data = self.load()
            yield data
            self.save(data)

    # Projections

    def get_exercises(self) -> list[dict]:
        return self.load()["exercises"]

    def get_workouts(self) -> list[dict]:
        return self.load()["workouts"]

    def get_routines(self) -> list[dict]:
        return self.load()["routines"]

    def get_settings(self) -> dict:
        return self.load()["settings"]

    @staticmethod
    def _find(items: list[dict], item_id: str) -> Optional[dict]:
        return next((i for i in items if i.get("id") == item_id), None)

    @staticmethod
    def _find_index(items: list[dict], item_id: str) -> int:
        for index, item in enumerate(items):
            if item.get("id") == item_id:
                return index
        return -1

    def _upsert(self, field: str, item: dict) -> None:
        check_entity(field, item)
        with self._mutate() as data:
            items = data[field]
            index = self._find_index(items, item["id"])
            if index >= 0:
                items[index] = item
            else:
                items.append(item)
        logger.debug("Upserted %s %s", field, item["id"])

    def get_exercise(self, exercise_id: str) -> Optional[dict]:
        return self._find(self.get_exercises(), exercise_id)

    def get_workout(self, workout_id: str) -> Optional[dict]:
        return self._find(self.get_workouts(), workout_id)

    def get_routine(self, routine_id: str) -> Optional[dict]:
        return self._find(self.get_routines(), routine_id)

    # Workouts

    def add_workout(self, workout: dict) -> None:
        check_entity("workouts", workout)
        with self._mutate() as data:
            data["workouts"].insert(0, workout)

    def update_workout(self, workout: dict) -> None:
        self._upsert("workouts", workout)

    def get_workouts_by_date(self, limit: Optional[int] = None) -> list[dict]:
        """Return workouts newest date first, optionally only the first ``limit``."""
        workouts = sorted(self.get_workouts(), key=lambda w: w["date"], reverse=True)
        return workouts if limit is None else workouts[:limit]

    def delete_workout(self, workout_id: str) -> None:
        with self._mutate() as data:
            data["workouts"] = [w for w in data["workouts"] if w["id"] != workout_id]

    def log_set(
        self,
        exercise_id: str,
        weight,
        reps,
        is_per_hand: bool = False,
        date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> tuple[str, dict]:
        """Record one set, merging into the workout already on ``date``.

        Returns the id of the workout that holds the set and the set itself.
        """
        weight, reps = validate_set_input(weight, reps)
        date = validate_workout_date(date) if date is not None else DateTools.today()
        lift_set = LiftSet(
            id=new_id(),
            weight=weight,
            reps=reps,
            is_per_hand=is_per_hand,
            timestamp=timestamp_ms(),
            notes=notes or None,
        ).to_document()

        with self._mutate() as data:
            workouts = data["workouts"]
            same_day = [w for w in workouts if w["date"] == date]
            target = next(
                (
                    w
                    for w in same_day
                    if any(ex["exerciseId"] == exercise_id for ex in w["exercises"])
                ),
                same_day[0] if same_day else None,
            )
            if target is None:
                target = {
                    "id": new_id(),
                    "date": date,
                    "exercises": [{"exerciseId": exercise_id, "sets": [lift_set]}],
                }
                workouts.insert(0, target)
            else:
                entry = next(
                    (ex for ex in target["exercises"] if ex["exerciseId"] == exercise_id),
                    None,
                )
                if entry is None:
                    target["exercises"].append({"exerciseId": exercise_id, "sets": [lift_set]})
                else:
                    entry["sets"].append(lift_set)
        logger.debug("Logged set %s for exercise %s on %s", lift_set["id"], exercise_id, date)
        return target["id"], lift_set

    def delete_set(self, workout_id: str, exercise_id: str, set_id: str) -> None:
        with self._mutate() as data:
            workout = self._find(data["workouts"], workout_id)
            if workout is None:
                return
            for entry in workout["exercises"]:
                if entry["exerciseId"] == exercise_id:
                    entry["sets"] = [s for s in entry["sets"] if s["id"] != set_id]
            workout["exercises"] = [ex for ex in workout["exercises"] if ex["sets"]]
            if not workout["exercises"]:
                data["workouts"] = [w for w in data["workouts"] if w["id"] != workout_id]

    def get_workout_history_for_exercise(self, exercise_id: str) -> list[dict]:
        """Return ``[{"date", "sets"}]`` for the exercise, newest date first."""
        history = []
        for workout in self.get_workouts():
            entry = next(
                (ex for ex in workout["exercises"] if ex["exerciseId"] == exercise_id),
                None,
            )
            sets = entry["sets"] if entry else []
            if sets:
                history.append({"date": workout["date"], "sets": sets})
        history.sort(key=lambda h: h["date"], reverse=True)
        return history

    # Exercises

    def create_exercise(
        self,
        name: str,
        cues: Optional[list[str]] = None,
        default_per_hand: Optional[bool] = None,
        notes: Optional[str] = None,
        category: Optional[str] = None,
    ) -> dict:
        exercise = {"id": new_id(), "name": name, "cues": list(cues or [])}
        if category is not None:
            exercise["category"] = category
        if default_per_hand is not None:
            exercise["defaultPerHand"] = default_per_hand
        if notes is not None:
            exercise["notes"] = notes
        self.update_exercise(exercise)
        return exercise

    def update_exercise(self, exercise: dict) -> None:
        self._upsert("exercises", exercise)

    def delete_exercise(self, exercise_id: str) -> None:
        with self._mutate() as data:
            data["exercises"] = [e for e in data["exercises"] if e["id"] != exercise_id]
            for routine in data["routines"]:
                routine["exerciseIds"] = [
                    rid for rid in routine.get("exerciseIds", []) if rid != exercise_id
                ]
        logger.debug("Deleted exercise %s", exercise_id)

    def add_cue(self, exercise_id: str, cue: str) -> None:
        cue = cue.strip()
        if not cue:
            return
        with self._mutate() as data:
            exercise = self._find(data["exercises"], exercise_id)
            if exercise is not None:
                exercise.setdefault("cues", []).append(cue)

    def remove_cue(self, exercise_id: str, index: int) -> None:
        with self._mutate() as data:
            exercise = self._find(data["exercises"], exercise_id)
            if exercise is not None and 0 <= index < len(exercise.get("cues", [])):
                del exercise["cues"][index]

    # Routines

    def create_routine(
        self,
        name: str,
        exercise_ids: Optional[list[str]] = None,
        notes: Optional[str] = None,
    ) -> dict:
        routine = {"id": new_id(), "name": name, "exerciseIds": list(exercise_ids or [])}
        if notes is not None:
            routine["notes"] = notes
        self.add_routine(routine)
        return routine

    def add_routine(self, routine: dict) -> None:
        check_entity("routines", routine)
        with self._mutate() as data:
            data["routines"].append(routine)

    def update_routine(self, routine: dict) -> None:
        self._upsert("routines", routine)

    def delete_routine(self, routine_id: str) -> None:
        with self._mutate() as data:
            data["routines"] = [r for r in data["routines"] if r["id"] != routine_id]

    # Settings

    def update_settings(
        self, preferred_unit: Optional[str] = None, theme: Optional[str] = None
    ) -> dict:
        changes = {}
        if preferred_unit is not None:
            changes["preferredUnit"] = preferred_unit
        if theme is not None:
            changes["theme"] = theme
        with self._mutate() as data:
            data["settings"] = validate_settings({**data["settings"], **changes})
            settings = data["settings"]
        return settings

    # Backups

    def export_json(self) -> str:
        return json.dumps(self.load(), indent=2)

    def import_document(self, data) -> dict:
        if (
            not isinstance(data, dict)
            or data.get("exercises") is None
            or data.get("workouts") is None
        ):
            raise InvalidBackupError("Invalid backup file.")
        data = self._backfill(dict(data))
        try:
            check_document(data)
        except ValidationError as e:
            raise InvalidBackupError("Invalid backup file.") from e
        with self._lock:
            self.save(data)
        logger.info(
            "Imported backup with %d exercises and %d workouts",
            len(data["exercises"]),
            len(data["workouts"]),
        )
        return data

    def import_json(self, text: str) -> dict:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise InvalidBackupError("Error parsing backup file.") from e
        return self.import_document(data)

    def reset(self) -> dict:
        """Drop the stored document so the next load starts from defaults."""
        with self._lock:
            self.storage.remove_item(self.key)
        logger.info("Store reset to default data")
        return self.load()
