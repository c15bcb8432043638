"""GPIOHardwareFactory — creates real GPIO hardware on Raspberry Pi.

Sets the ``gpiozero`` pin factory to ``LGPIOFactory`` once during
construction, then eagerly creates all hardware component instances.
"""

from __future__ import annotations

import logging

from controlio.core.interfaces.hardware import (
    ButtonInputInterface,
    DigitalOutputInterface,
    HardwareFactory,
    PwmOutputInterface,
)
from controlio.core.models.config import HardwareConfig
from controlio.core.models.state import ButtonName, OutputTarget
from controlio.hardware.gpio.gpio_hardware import (
    GPIOButtonInput,
    GPIODigitalOutput,
    GPIOPwmOutput,
)

_log = logging.getLogger(__name__)


def _setup_pin_factory() -> None:
    """Configure gpiozero to use ``LGPIOFactory`` (for Pi 5 compat)."""
    try:
        from gpiozero import Device  # type: ignore[import-untyped]
        from gpiozero.pins.lgpio import LGPIOFactory  # type: ignore[import-untyped]

        Device.pin_factory = LGPIOFactory()
        _log.info("gpiozero pin factory set to LGPIOFactory")
    except ImportError:
        _log.warning(
            "LGPIOFactory not available — using gpiozero default pin factory"
        )


class GPIOHardwareFactory(HardwareFactory):
    """Factory that creates real GPIO-backed hardware components.

    All components are created eagerly in ``__init__`` so that
    :meth:`cleanup` can reliably close every resource.

    Args:
        config: Pin assignments and PWM parameters.
    """

    def __init__(self, config: HardwareConfig) -> None:
        _setup_pin_factory()

        self._outputs: dict[OutputTarget, GPIODigitalOutput] = {
            OutputTarget.DISPLAY: GPIODigitalOutput(config.display_pin, "display"),
            OutputTarget.LED_RED: GPIODigitalOutput(config.led_red_pin, "ledRed"),
            OutputTarget.LED_WHITE: GPIODigitalOutput(config.led_white_pin, "ledWhite"),
            OutputTarget.BEEPER: GPIODigitalOutput(config.beeper_pin, "beeper"),
        }
        self._brightness = GPIOPwmOutput(
            config.brightness_pin, config.pwm_range, config.pwm_frequency
        )
        self._buttons: dict[ButtonName, GPIOButtonInput] = {
            ButtonName.UPPER: GPIOButtonInput(config.button_upper_pin, config.button_bounce_time),
            ButtonName.LOWER: GPIOButtonInput(config.button_lower_pin, config.button_bounce_time),
        }

        _log.info("GPIOHardwareFactory ready")

    # -- Factory interface --

    def create_outputs(self) -> dict[OutputTarget, DigitalOutputInterface]:
        return dict(self._outputs)

    def create_brightness(self) -> PwmOutputInterface:
        return self._brightness

    def create_buttons(self) -> dict[ButtonName, ButtonInputInterface]:
        return dict(self._buttons)

    # -- Lifecycle --

    def cleanup(self) -> None:
        """Release all GPIO resources."""
        components = [
            *((f"button {name.value}", btn) for name, btn in self._buttons.items()),
            *((f"output {target.value}", out) for target, out in self._outputs.items()),
            ("brightness", self._brightness),
        ]
        for name, component in components:
            try:
                component.cleanup()
            except Exception:
                _log.exception("Error cleaning up %s", name)
        _log.info("GPIOHardwareFactory cleanup complete")
