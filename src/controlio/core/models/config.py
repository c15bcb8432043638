"""Configuration Pydantic models: ControlIoConfig and its sections."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from controlio.core.models.state import WeekdayFilter

#: Command names the router dispatches.
CommandName = Literal["beep", "brightness", "display", "ledRed", "ledWhite"]


class HardwareConfig(BaseModel):
    """Pin assignments and hardware parameters.

    All pin numbers are BCM GPIO numbers.
    """

    model_config = ConfigDict(extra="forbid")

    display_pin: int = Field(default=12, description="Display on/off output")
    brightness_pin: int = Field(default=18, description="Backlight PWM output")
    led_red_pin: int = Field(default=24, description="Upper button LED (red)")
    led_white_pin: int = Field(default=23, description="Lower button LED (white)")
    beeper_pin: int = Field(default=27, description="Beeper output")
    button_upper_pin: int = Field(default=2, description="Upper button input (pull-up)")
    button_lower_pin: int = Field(default=4, description="Lower button input (pull-up)")

    button_bounce_time: float = Field(
        default=0.01, gt=0, description="Hardware glitch filter for button edges, seconds"
    )
    pwm_range: int = Field(
        default=255, gt=0, description="Brightness value that maps to 100 % PWM duty"
    )
    pwm_frequency: int = Field(default=800, gt=0, description="Backlight PWM frequency, Hz")


class MqttConfig(BaseModel):
    """Broker connection and topic layout."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True, description="False runs the panel offline with an in-memory transport")
    host: str = Field(default="localhost")
    port: int = Field(default=1883)
    client_id: str = Field(default="control-io")
    keepalive: int = Field(default=60, ge=5)
    connect_timeout: float = Field(default=10.0, gt=0, description="Startup wait for the first connection")
    topic_prefix: str = Field(
        default="control-io",
        description="Commands arrive on <prefix>/cmnd/<name>, state leaves on <prefix>/<name>/STATE",
    )


class PanelConfig(BaseModel):
    """Control behaviour: initial state, brightness range, interaction timing."""

    model_config = ConfigDict(extra="forbid")

    initial_display_on: bool = Field(default=True)
    initial_brightness: int = Field(default=70, ge=0, le=190)
    brightness_min: int = Field(default=0, ge=0, le=190)
    brightness_max: int = Field(default=190, ge=0, le=190)
    brightness_step: int = Field(default=10, gt=0, description="Step for '+' / '-'")

    hold_seconds: float = Field(default=1.0, gt=0, description="Long-press threshold")
    suppress_seconds: float = Field(
        default=0.5, ge=0, description="Input ignored this long after a long-press turns the display off"
    )
    beep_seconds: float = Field(default=0.1, gt=0)
    blink_interval_seconds: float = Field(default=0.3, gt=0)
    startup_blink_half_cycles: int = Field(default=4, ge=0)

    navigate_topic: str = Field(
        default="control-io/navigate",
        description="Published once when a button press wakes the display",
    )
    navigate_payload: str = Field(default="default")

    @model_validator(mode="after")
    def _check_range(self) -> "PanelConfig":
        if self.brightness_min > self.brightness_max:
            raise ValueError("brightness_min must not exceed brightness_max")
        return self


class ScheduleEntry(BaseModel):
    """A time-of-day rule that fires one command.

    Entries are immutable once loaded.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    hour: int = Field(ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)
    weekdays: WeekdayFilter = Field(default=WeekdayFilter.EVERY)
    command: CommandName
    payload: Any = Field(default=None, description="JSON value delivered with the command")


class ScheduleConfig(BaseModel):
    """Wall-clock schedule, evaluated in a fixed timezone."""

    model_config = ConfigDict(extra="forbid")

    timezone: str = Field(default="Europe/Berlin", description="IANA zone name")
    entries: list[ScheduleEntry] = Field(default_factory=list)

    @field_validator("timezone")
    @classmethod
    def _known_zone(cls, value: str) -> str:
        from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value


class SystemConfig(BaseModel):
    """Non-hardware runtime settings."""

    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(default="INFO", description="Root log level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    event_bus_queue_size: int = Field(default=1000, description="Max queued events")
    dev_mode: bool = Field(default=False, description="Force mock hardware (mqtt.enabled selects the transport)")
    health_interval_seconds: float = Field(default=60.0, gt=0)
    health_payload: str = Field(default="OK")
    stale_lock_file: str | None = Field(
        default="/var/run/pigpio.pid",
        description="Lock file left behind by a previous run; removed at startup if present",
    )


class ControlIoConfig(BaseModel):
    """Top-level configuration loaded from ``controlio_config.json``."""

    model_config = ConfigDict(extra="forbid")

    hardware: HardwareConfig = Field(default_factory=HardwareConfig)
    mqtt: MqttConfig = Field(default_factory=MqttConfig)
    panel: PanelConfig = Field(default_factory=PanelConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    system: SystemConfig = Field(default_factory=SystemConfig)
