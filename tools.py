import datetime
import re
import time
import uuid

from pydantic import ValidationError

from algorithms.weight_converter import WeightConverter
from models import InvalidSetError, SetInput


class DateTools:
    """Helpers for the plain ``YYYY-MM-DD`` dates used by workouts."""

    @staticmethod
    def today() -> str:
        """Return today's local date as ``YYYY-MM-DD``."""
        return datetime.date.today().isoformat()

    @staticmethod
    def date_part(date_string: str) -> str:
        """Strip a time component from older ISO timestamps."""
        return date_string.split("T")[0] if "T" in date_string else date_string

    @classmethod
    def format_local_date(cls, date_string: str, fmt: str = "%A, %B %d, %Y") -> str:
        year, month, day = (int(p) for p in cls.date_part(date_string).split("-"))
        return datetime.date(year, month, day).strftime(fmt)


def validate_set_input(weight, reps) -> tuple[float, int]:
    """Return ``(weight, reps)`` or raise :class:`InvalidSetError`."""
    if isinstance(weight, bool) or isinstance(reps, bool):
        raise InvalidSetError("Please enter valid weight and reps")
    try:
        data = SetInput(weight=weight, reps=reps)
    except ValidationError as e:
        raise InvalidSetError("Please enter valid weight and reps") from e
    return data.weight, data.reps


def validate_workout_date(date) -> str:
    """Return ``date`` if it is a real ``YYYY-MM-DD`` calendar date."""
    if not isinstance(date, str) or not re.fullmatch(r"\d{4}-\d{2}-\d{2}", date):
        raise InvalidSetError("Please enter a date as YYYY-MM-DD")
    try:
        datetime.datetime.strptime(date, "%Y-%m-%d")
    except ValueError as e:
        raise InvalidSetError("Please enter a date as YYYY-MM-DD") from e
    return date


def new_id() -> str:
    return str(uuid.uuid4())


def timestamp_ms() -> int:
    return int(time.time() * 1000)


__all__ = [
    "DateTools",
    "WeightConverter",
    "validate_set_input",
    "validate_workout_date",
    "new_id",
    "timestamp_ms",
]
