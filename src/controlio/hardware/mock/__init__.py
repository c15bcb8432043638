"""Mock hardware backend for development and testing."""

from controlio.hardware.mock.mock_factory import MockHardwareFactory
from controlio.hardware.mock.mock_hardware import (
    MockButtonInput,
    MockDigitalOutput,
    MockPwmOutput,
)

__all__ = [
    "MockButtonInput",
    "MockDigitalOutput",
    "MockHardwareFactory",
    "MockPwmOutput",
]
