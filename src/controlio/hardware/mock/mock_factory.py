"""MockHardwareFactory — creates in-memory hardware for dev and test.

All created instances are stored as public attributes so tests can reach
the ``simulate_*()`` helpers and recorded writes directly.
"""

from __future__ import annotations

from controlio.core.interfaces.hardware import (
    ButtonInputInterface,
    DigitalOutputInterface,
    HardwareFactory,
    PwmOutputInterface,
)
from controlio.core.models.state import ButtonName, OutputTarget
from controlio.hardware.mock.mock_hardware import (
    MockButtonInput,
    MockDigitalOutput,
    MockPwmOutput,
)


class MockHardwareFactory(HardwareFactory):
    """Factory that returns in-memory mock implementations.

    After creation the mocks are available as ``factory.outputs``,
    ``factory.brightness`` and ``factory.buttons``.
    """

    def __init__(self) -> None:
        self.outputs: dict[OutputTarget, MockDigitalOutput] = {
            target: MockDigitalOutput(target.value) for target in OutputTarget
        }
        self.brightness = MockPwmOutput()
        self.buttons: dict[ButtonName, MockButtonInput] = {
            name: MockButtonInput(name.value) for name in ButtonName
        }

    # -- Factory interface --

    def create_outputs(self) -> dict[OutputTarget, DigitalOutputInterface]:
        return dict(self.outputs)

    def create_brightness(self) -> PwmOutputInterface:
        return self.brightness

    def create_buttons(self) -> dict[ButtonName, ButtonInputInterface]:
        return dict(self.buttons)
