"""Pydantic models for configuration, commands, events, and panel state."""
from controlio.core.models.command import (
    CommandEvent,
    Payload,
    RawPayload,
    StructuredPayload,
    is_truthy,
    parse_payload,
)
from controlio.core.models.config import (
    ControlIoConfig,
    HardwareConfig,
    MqttConfig,
    PanelConfig,
    ScheduleConfig,
    ScheduleEntry,
    SystemConfig,
)
from controlio.core.models.event import Event
from controlio.core.models.state import (
    ButtonName,
    ButtonPhase,
    DisplayState,
    OutputTarget,
    WeekdayFilter,
)

__all__ = [
    "ControlIoConfig",
    "HardwareConfig",
    "MqttConfig",
    "PanelConfig",
    "ScheduleConfig",
    "ScheduleEntry",
    "SystemConfig",
    "CommandEvent",
    "Payload",
    "RawPayload",
    "StructuredPayload",
    "is_truthy",
    "parse_payload",
    "Event",
    "ButtonName",
    "ButtonPhase",
    "DisplayState",
    "OutputTarget",
    "WeekdayFilter",
]
