import argparse
import logging
import os
import sys
from typing import Optional

from config import load_app_config
from db import DataStore, KeyValueStorage
from models import InvalidBackupError, InvalidSetError
from recommendation_service import RecommendationService
from tools import DateTools, WeightConverter

logger = logging.getLogger(__name__)


def open_store(db_path: Optional[str], yaml_path: str) -> DataStore:
    config = load_app_config(yaml_path)
    return DataStore(KeyValueStorage(db_path or config.db_path), config.storage_key)


def export_data(db_path: Optional[str], yaml_path: str, output_dir: str = ".") -> str:
    """Write a JSON backup and return its path."""
    store = open_store(db_path, yaml_path)
    out_path = os.path.join(output_dir, f"liftlog_backup_{DateTools.today()}.json")
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(store.export_json())
    logger.info("Wrote backup to %s", out_path)
    return out_path


def import_data(
    db_path: Optional[str],
    yaml_path: str,
    src: Optional[str] = None,
    text: Optional[str] = None,
) -> dict:
    """Replace the stored document with a backup file or pasted JSON."""
    if src is not None:
        with open(src, "r", encoding="utf-8") as f:
            text = f.read()
    if text is None:
        raise InvalidBackupError("No backup data provided.")
    return open_store(db_path, yaml_path).import_json(text)


def demo_data(db_path: Optional[str], yaml_path: str) -> None:
    """Populate the store with a demo session if it has no workouts."""
    store = open_store(db_path, yaml_path)
    if store.get_workouts():
        print("Store already contains workouts")
        return
    exercise_id = store.get_exercises()[0]["id"]
    for reps in (12, 10, 10):
        store.log_set(exercise_id, 100, reps)
    print("Demo data inserted")


def print_history(store: DataStore, limit: Optional[int] = None) -> None:
    """Print logged sessions, newest first."""
    workouts = store.get_workouts_by_date(limit)
    if not workouts:
        print("No workouts logged yet")
        return
    names = {e["id"]: e["name"] for e in store.get_exercises()}
    unit = store.get_settings()["preferredUnit"]
    for workout in workouts:
        print(DateTools.format_local_date(workout["date"]))
        for entry in workout["exercises"]:
            name = names.get(entry["exerciseId"], "Unknown exercise")
            sets = ", ".join(
                f"{s['reps']} @ {WeightConverter.display(s['weight'], s.get('isPerHand', False), unit)}"
                for s in entry["sets"]
            )
            print(f"  {name}: {sets}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="LiftLog utility commands")
    parser.add_argument("--db", default=None)
    parser.add_argument("--yaml", default="settings.yaml")
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--out", default=".")

    imp = sub.add_parser("import")
    source = imp.add_mutually_exclusive_group(required=True)
    source.add_argument("--in", dest="src")
    source.add_argument("--text")

    sub.add_parser("reset")
    sub.add_parser("demo")

    rec = sub.add_parser("recommend")
    rec.add_argument("--exercise", required=True)

    hist = sub.add_parser("history")
    hist.add_argument("--limit", type=int, default=None)

    log = sub.add_parser("log")
    log.add_argument("--exercise", required=True)
    log.add_argument("--weight", required=True)
    log.add_argument("--reps", required=True)
    log.add_argument("--per-hand", action="store_true")
    log.add_argument("--date", default=None)

    conv = sub.add_parser("convert")
    conv.add_argument("--weight", type=float, required=True)
    conv.add_argument("--unit", choices=["kg", "lb"], required=True)

    serve = sub.add_parser("serve")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args(argv)
    config = load_app_config(args.yaml)
    logging.basicConfig(level=config.log_level)

    if args.cmd == "export":
        print(export_data(args.db, args.yaml, args.out))
    elif args.cmd == "import":
        try:
            data = import_data(args.db, args.yaml, args.src, args.text)
        except (InvalidBackupError, OSError) as e:
            print(e, file=sys.stderr)
            return 1
        print(
            f"Imported {len(data['exercises'])} exercises and "
            f"{len(data['workouts'])} workouts"
        )
    elif args.cmd == "reset":
        open_store(args.db, args.yaml).reset()
        print("All data cleared.")
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "recommend":
        store = open_store(args.db, args.yaml)
        try:
            service = RecommendationService(store)
            result = service.recommend(args.exercise)
        except ValueError as e:
            print(e, file=sys.stderr)
            return 1
        print(result["message"])
        print(f"Target: {service.describe(args.exercise)}")
    elif args.cmd == "history":
        print_history(open_store(args.db, args.yaml), args.limit)
    elif args.cmd == "log":
        store = open_store(args.db, args.yaml)
        if store.get_exercise(args.exercise) is None:
            print(f"exercise {args.exercise} not found", file=sys.stderr)
            return 1
        try:
            workout_id, lift_set = store.log_set(
                args.exercise, args.weight, args.reps, args.per_hand, args.date
            )
        except InvalidSetError as e:
            print(e, file=sys.stderr)
            return 1
        print(f"Logged {lift_set['reps']} reps in workout {workout_id}")
    elif args.cmd == "convert":
        if args.unit == "kg":
            print(f"{args.weight} kg = {WeightConverter.kg_to_lb(args.weight)} lb")
        else:
            print(f"{args.weight} lb = {WeightConverter.lb_to_kg(args.weight)} kg")
    elif args.cmd == "serve":
        import uvicorn
        from rest_api import LiftLogAPI

        uvicorn.run(LiftLogAPI(args.db, args.yaml).app, host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
