from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

WeightUnit = Literal["lb", "kg"]
ThemeMode = Literal[
    "default",
    "sparkle",
    "minimal",
    "elegant",
    "light",
    "sunset",
    "ocean",
    "forest",
]

DEFAULT_SETTINGS = {"preferredUnit": "lb", "theme": "default"}


class SettingsSchema(BaseModel):
    """Presentation settings stored inside the workout document."""

    model_config = ConfigDict(populate_by_name=True)

    preferred_unit: WeightUnit = Field("lb", alias="preferredUnit")
    theme: ThemeMode = "default"


class AppConfigSchema(BaseModel):
    db_path: str = "liftlog.db"
    storage_key: str = "fitapp_data_v1"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def validate_settings(data: dict) -> dict:
    """Validate document settings and return them with camelCase keys."""
    try:
        settings = SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
    return settings.model_dump(by_alias=True)


def validate_app_config(data: dict) -> AppConfigSchema:
    try:
        return AppConfigSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
