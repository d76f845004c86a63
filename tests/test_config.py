import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from config import YamlConfig, load_app_config
from settings_schema import validate_settings


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("LIFTLOG_DB", raising=False)
    config = load_app_config(str(tmp_path / "absent.yaml"))
    assert config.db_path == "liftlog.db"
    assert config.storage_key == "fitapp_data_v1"
    assert config.log_level == "INFO"


def test_save_and_load(tmp_path, monkeypatch):
    monkeypatch.delenv("LIFTLOG_DB", raising=False)
    path = str(tmp_path / "settings.yaml")
    YamlConfig(path).save({"db_path": "gym.db", "log_level": "DEBUG"})
    assert YamlConfig(path).load() == {"db_path": "gym.db", "log_level": "DEBUG"}
    config = load_app_config(path)
    assert config.db_path == "gym.db"
    assert config.log_level == "DEBUG"


def test_environment_overrides_db_path(tmp_path, monkeypatch):
    path = str(tmp_path / "settings.yaml")
    YamlConfig(path).save({"db_path": "gym.db"})
    monkeypatch.setenv("LIFTLOG_DB", "other.db")
    assert load_app_config(path).db_path == "other.db"


def test_invalid_config_rejected(tmp_path):
    path = str(tmp_path / "settings.yaml")
    YamlConfig(path).save({"log_level": "LOUD"})
    with pytest.raises(ValueError):
        load_app_config(path)


def test_validate_settings():
    assert validate_settings({"theme": "sparkle"}) == {
        "preferredUnit": "lb",
        "theme": "sparkle",
    }
    with pytest.raises(ValueError):
        validate_settings({"preferredUnit": "stone"})
