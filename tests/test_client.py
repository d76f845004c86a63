import os
import sys
import unittest
from fastapi.testclient import TestClient

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from client import LiftLogClient
from rest_api import LiftLogAPI


class ClientTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_client.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.api = LiftLogAPI(db_path=self.db_path, yaml_path="test_client.yaml")
        # TestClient exposes the requests-style call signatures the client uses
        self.client = LiftLogClient(
            base_url="http://testserver", session=TestClient(self.api.app)
        )

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_log_and_recommend(self) -> None:
        exercise_id = self.client.create_exercise("Bench Press")
        self.assertIn(exercise_id, [e["id"] for e in self.client.list_exercises()])
        for reps in (8, 8):
            self.client.log_set(exercise_id, 60, reps, date="2024-06-01")
        self.assertEqual(len(self.client.history(exercise_id)), 1)
        rec = self.client.recommendation(exercise_id)
        self.assertEqual([s["reps"] for s in rec["sets"]], [9, 8])
        self.assertEqual(self.client.target(exercise_id), "9, 8 reps @ 60 lb")
        self.assertEqual(
            [w["date"] for w in self.client.recent_workouts()], ["2024-06-01"]
        )

    def test_routines_and_backup(self) -> None:
        routine_id = self.client.create_routine("Full body", ["1", "2"])
        self.assertEqual(self.client.list_routines()[0]["id"], routine_id)
        backup = self.client.export_data()
        self.assertEqual(backup["routines"][0]["exerciseIds"], ["1", "2"])
        result = self.client.import_data(backup)
        self.assertEqual(result["status"], "imported")


if __name__ == "__main__":
    unittest.main()
