import os
import yaml

from settings_schema import AppConfigSchema, validate_app_config

APP_VERSION = "1.0.0"


class YamlConfig:
    """Load and save application config to a YAML file."""

    ENV_OVERRIDES = {
        "LIFTLOG_DB": "db_path",
    }

    def __init__(self, path: str = "settings.yaml") -> None:
        self.path = path

    def load(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} must contain a mapping")
        return data

    def save(self, data: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(dict(data), f)


def load_app_config(path: str = "settings.yaml") -> AppConfigSchema:
    """Return the validated config, with environment overrides applied."""
    data = YamlConfig(path).load()
    for env_key, key in YamlConfig.ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            data[key] = value
    return validate_app_config(data)
