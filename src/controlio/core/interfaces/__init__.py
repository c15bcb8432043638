"""Hardware and transport abstraction interfaces."""

from controlio.core.interfaces.hardware import (
    ButtonInputInterface,
    DigitalOutputInterface,
    HardwareFactory,
    PwmOutputInterface,
)
from controlio.core.interfaces.transport import MessageTransport

__all__ = [
    "ButtonInputInterface",
    "DigitalOutputInterface",
    "HardwareFactory",
    "MessageTransport",
    "PwmOutputInterface",
]
