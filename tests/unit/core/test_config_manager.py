"""Tests for the config manager (load_config + env overrides)."""

import json

import pytest
from pydantic import ValidationError

from controlio.config.config_manager import load_config
from controlio.core.models.config import ControlIoConfig
from controlio.core.models.state import WeekdayFilter


class TestLoadConfig:
    def test_load_default_config(self):
        """The shipped controlio_config.json should load without errors."""
        cfg = load_config()
        assert isinstance(cfg, ControlIoConfig)
        assert cfg.hardware.display_pin == 12
        assert len(cfg.schedule.entries) == 3
        assert cfg.schedule.entries[0].weekdays is WeekdayFilter.WEEKDAYS

    def test_load_custom_config(self, tmp_path):
        config_file = tmp_path / "test_config.json"
        config_file.write_text(
            json.dumps(
                {
                    "hardware": {"brightness_pin": 13},
                    "panel": {"initial_brightness": 120},
                    "system": {"log_level": "DEBUG"},
                }
            )
        )
        cfg = load_config(config_file)
        assert cfg.hardware.brightness_pin == 13
        assert cfg.panel.initial_brightness == 120
        assert cfg.system.log_level == "DEBUG"

    def test_env_config_file(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({"mqtt": {"host": "broker.lan"}}))
        monkeypatch.setenv("CONTROL_IO_CONFIG_FILE", str(config_file))
        cfg = load_config()
        assert cfg.mqtt.host == "broker.lan"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.json")

    def test_invalid_content_raises(self, tmp_path):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(
            json.dumps({"schedule": {"entries": [{"hour": 25, "command": "display"}]}})
        )
        with pytest.raises(ValidationError):
            load_config(config_file)

    def test_env_override_log_level(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({"system": {"log_level": "INFO"}}))
        monkeypatch.setenv("CONTROL_IO_LOG_LEVEL", "DEBUG")
        cfg = load_config(config_file)
        assert cfg.system.log_level == "DEBUG"

    def test_env_override_dev_mode(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({"system": {}}))
        monkeypatch.setenv("CONTROL_IO_DEV_MODE", "1")
        cfg = load_config(config_file)
        assert cfg.system.dev_mode is True

    def test_env_override_mqtt(self, tmp_path, monkeypatch):
        config_file = tmp_path / "cfg.json"
        config_file.write_text(json.dumps({}))
        monkeypatch.setenv("CONTROL_IO_MQTT_HOST", "10.0.0.5")
        monkeypatch.setenv("CONTROL_IO_MQTT_PORT", "1884")
        cfg = load_config(config_file)
        assert cfg.mqtt.host == "10.0.0.5"
        assert cfg.mqtt.port == 1884
