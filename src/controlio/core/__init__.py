"""Core services: event bus, control state machines, routing, orchestration."""

from controlio.core.button_state_machine import ButtonStateMachine
from controlio.core.command_router import CommandRouter
from controlio.core.display_controller import DisplayController
from controlio.core.event_bus import EventBus
from controlio.core.hardware_event_bridge import HardwareEventBridge
from controlio.core.schedule_engine import ScheduleEngine
from controlio.core.state_publisher import StatePublisher
from controlio.core.system_manager import ControlPanel

__all__ = [
    "ButtonStateMachine",
    "CommandRouter",
    "ControlPanel",
    "DisplayController",
    "EventBus",
    "HardwareEventBridge",
    "ScheduleEngine",
    "StatePublisher",
]
