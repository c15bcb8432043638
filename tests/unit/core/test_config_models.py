"""Tests for ControlIoConfig and its section models."""

import pytest
from pydantic import ValidationError

from controlio.core.models.config import (
    ControlIoConfig,
    HardwareConfig,
    MqttConfig,
    PanelConfig,
    SystemConfig,
)
from controlio.core.models.state import DisplayState


class TestHardwareConfig:
    def test_defaults(self):
        cfg = HardwareConfig()
        assert cfg.display_pin == 12
        assert cfg.brightness_pin == 18
        assert cfg.led_red_pin == 24
        assert cfg.led_white_pin == 23
        assert cfg.beeper_pin == 27
        assert cfg.button_upper_pin == 2
        assert cfg.button_lower_pin == 4
        assert cfg.button_bounce_time == pytest.approx(0.01)

    def test_extra_field_rejected(self):
        with pytest.raises(ValidationError, match="extra_field"):
            HardwareConfig(extra_field="boom")


class TestPanelConfig:
    def test_defaults(self):
        cfg = PanelConfig()
        assert cfg.initial_brightness == 70
        assert (cfg.brightness_min, cfg.brightness_max, cfg.brightness_step) == (0, 190, 10)
        assert cfg.hold_seconds == pytest.approx(1.0)
        assert cfg.suppress_seconds == pytest.approx(0.5)
        assert cfg.beep_seconds == pytest.approx(0.1)

    def test_initial_brightness_bounded(self):
        with pytest.raises(ValidationError):
            PanelConfig(initial_brightness=191)

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError, match="brightness_min"):
            PanelConfig(brightness_min=100, brightness_max=50)

    def test_hold_must_be_positive(self):
        with pytest.raises(ValidationError):
            PanelConfig(hold_seconds=0)


class TestMqttAndSystem:
    def test_mqtt_defaults(self):
        cfg = MqttConfig()
        assert cfg.enabled is True
        assert cfg.port == 1883
        assert cfg.topic_prefix == "control-io"

    def test_keepalive_floor(self):
        with pytest.raises(ValidationError):
            MqttConfig(keepalive=1)

    def test_system_defaults(self):
        cfg = SystemConfig()
        assert cfg.log_level == "INFO"
        assert cfg.dev_mode is False
        assert cfg.event_bus_queue_size == 1000
        assert cfg.stale_lock_file == "/var/run/pigpio.pid"


class TestControlIoConfig:
    def test_round_trip(self):
        cfg = ControlIoConfig()
        cfg2 = ControlIoConfig(**cfg.model_dump())
        assert cfg == cfg2

    def test_extra_top_level_rejected(self):
        with pytest.raises(ValidationError):
            ControlIoConfig(unknown_section={})


class TestDisplayState:
    def test_assignment_validated(self):
        state = DisplayState()
        with pytest.raises(ValidationError):
            state.brightness = 300

    def test_defaults(self):
        state = DisplayState()
        assert state.is_on is True
        assert state.brightness == 70
