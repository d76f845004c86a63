from typing import List

PLACEHOLDER_SETS = 3
PLACEHOLDER_REPS = 10


def _rep_scheme(sets: List[dict]) -> str:
    return ", ".join(str(s["reps"]) for s in sets)


def recommend(exercise: dict, history: List[dict]) -> dict:
    """Suggest the next session's sets from the most recent one.

    ``history`` is the per-date list returned by
    ``DataStore.get_workout_history_for_exercise``, newest first. Weights are
    carried over unchanged and exactly one set gains a rep: the first set
    that has fewer reps than the set before it, or the first set when reps
    never drop.
    """
    if not history:
        return {
            "sets": [
                {"weight": 0, "reps": PLACEHOLDER_REPS}
                for _ in range(PLACEHOLDER_SETS)
            ],
            "message": "Set your starting weight and reps for today.",
        }

    last_sets = history[0]["sets"]
    recommended = [{"weight": s["weight"], "reps": s["reps"]} for s in last_sets]

    for i in range(1, len(recommended)):
        if recommended[i]["reps"] < recommended[i - 1]["reps"]:
            recommended[i]["reps"] += 1
            break
    else:
        recommended[0]["reps"] += 1

    return {
        "sets": recommended,
        "message": (
            f"Last time: {_rep_scheme(last_sets)}. "
            f"Today's goal: {_rep_scheme(recommended)}."
        ),
    }
