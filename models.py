"""Pydantic models for the workout document.

The document itself is stored as plain JSON; these models validate data at
the input boundary (REST bodies, logged sets, imported backups) and convert
to the camelCase shape written to storage.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class InvalidSetError(ValueError):
    """Raised when a logged set has non-numeric or non-positive values."""


class InvalidBackupError(ValueError):
    """Raised when an imported backup cannot be accepted."""


class DocumentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Exercise(DocumentModel):
    id: str
    name: str
    cues: List[str] = Field(default_factory=list)
    category: Optional[str] = None
    default_per_hand: Optional[bool] = Field(None, alias="defaultPerHand")
    notes: Optional[str] = None


class LiftSet(DocumentModel):
    id: str
    weight: float
    reps: int
    is_per_hand: bool = Field(False, alias="isPerHand")
    timestamp: int
    notes: Optional[str] = None


class WorkoutExercise(DocumentModel):
    exercise_id: str = Field(alias="exerciseId")
    sets: List[LiftSet]


class Workout(DocumentModel):
    # older documents may hold full ISO timestamps here
    id: str
    date: str
    exercises: List[WorkoutExercise]
    notes: Optional[str] = None


class WorkoutInput(Workout):
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")


class Routine(DocumentModel):
    id: str
    name: str
    exercise_ids: List[str] = Field(alias="exerciseIds")
    notes: Optional[str] = None


class SetInput(BaseModel):
    """Weight and reps as entered by the user."""

    weight: float = Field(gt=0, allow_inf_nan=False)
    reps: int = Field(gt=0)


ENTITY_MODELS = {
    "exercises": Exercise,
    "workouts": Workout,
    "routines": Routine,
}

DOCUMENT_FIELDS = {
    field: TypeAdapter(List[model]) for field, model in ENTITY_MODELS.items()
}


def check_entity(field: str, item: dict) -> None:
    """Raise ``ValidationError`` unless ``item`` has the stored shape."""
    ENTITY_MODELS[field].model_validate(item)


def check_document(data: dict) -> None:
    for field, adapter in DOCUMENT_FIELDS.items():
        adapter.validate_python(data.get(field))
