import requests
from typing import Optional


class LiftLogClient:
    """Simple REST client for the LiftLog API.

    ``session`` defaults to the ``requests`` module; anything exposing the
    same ``get``/``post``/``put``/``delete`` calls can be passed instead.
    """

    def __init__(self, base_url: str = "http://localhost:8000", session=requests) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def list_exercises(self) -> list[dict]:
        resp = self.session.get(self._url("/exercises"))
        resp.raise_for_status()
        return resp.json()

    def create_exercise(self, name: str, **params) -> str:
        resp = self.session.post(self._url("/exercises"), params={"name": name, **params})
        resp.raise_for_status()
        return resp.json()["id"]

    def log_set(
        self,
        exercise_id: str,
        weight: float,
        reps: int,
        is_per_hand: bool = False,
        date: Optional[str] = None,
    ) -> dict:
        params = {"weight": weight, "reps": reps, "is_per_hand": is_per_hand}
        if date is not None:
            params["date"] = date
        resp = self.session.post(self._url(f"/exercises/{exercise_id}/sets"), params=params)
        resp.raise_for_status()
        return resp.json()

    def history(self, exercise_id: str) -> list[dict]:
        resp = self.session.get(self._url(f"/exercises/{exercise_id}/history"))
        resp.raise_for_status()
        return resp.json()

    def recommendation(self, exercise_id: str) -> dict:
        resp = self.session.get(self._url(f"/exercises/{exercise_id}/recommendation"))
        resp.raise_for_status()
        return resp.json()

    def target(self, exercise_id: str) -> str:
        resp = self.session.get(self._url(f"/exercises/{exercise_id}/target"))
        resp.raise_for_status()
        return resp.json()["summary"]

    def recent_workouts(self, limit: int = 3) -> list[dict]:
        resp = self.session.get(self._url("/workouts/recent"), params={"limit": limit})
        resp.raise_for_status()
        return resp.json()

    def list_routines(self) -> list[dict]:
        resp = self.session.get(self._url("/routines"))
        resp.raise_for_status()
        return resp.json()

    def create_routine(self, name: str, exercise_ids: list[str]) -> str:
        resp = self.session.post(
            self._url("/routines"),
            params={"name": name, "exercise_ids": exercise_ids},
        )
        resp.raise_for_status()
        return resp.json()["id"]

    def export_data(self) -> dict:
        resp = self.session.get(self._url("/export"))
        resp.raise_for_status()
        return resp.json()

    def import_data(self, data: dict) -> dict:
        resp = self.session.post(self._url("/import"), json=data)
        resp.raise_for_status()
        return resp.json()
