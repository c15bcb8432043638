"""GPIO hardware implementations for Raspberry Pi.

Each class implements the corresponding ABC from
:mod:`controlio.core.interfaces.hardware` using ``gpiozero``.

Pin factory (``LGPIOFactory``) is set **once** by
:class:`~controlio.hardware.gpio.gpio_factory.GPIOHardwareFactory` before
any objects in this module are instantiated.

.. note::

   The ``gpiozero`` imports are guarded so the module can be imported (but
   not instantiated) on non-Pi platforms for testing with
   ``unittest.mock.patch``.
"""

from __future__ import annotations

import logging
from typing import Callable

from controlio.core.interfaces.hardware import (
    ButtonInputInterface,
    DigitalOutputInterface,
    PwmOutputInterface,
)

_log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Lazy imports — patched by unit tests on non-Pi platforms.
# The names below become module-level attributes that tests can
# ``@patch("controlio.hardware.gpio.gpio_hardware.Button")`` etc.
# ---------------------------------------------------------------------------
try:
    from gpiozero import Button  # type: ignore[import-untyped]
    from gpiozero import DigitalOutputDevice, PWMOutputDevice  # type: ignore[import-untyped]
except ImportError:  # pragma: no cover — non-Pi
    Button = None  # type: ignore[assignment,misc]
    DigitalOutputDevice = None  # type: ignore[assignment,misc]
    PWMOutputDevice = None  # type: ignore[assignment,misc]


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class GPIODigitalOutput(DigitalOutputInterface):
    """On/off output via ``gpiozero.DigitalOutputDevice``."""

    def __init__(self, pin: int, name: str = "") -> None:
        self._device = DigitalOutputDevice(pin, initial_value=False)
        self._name = name or f"GPIO{pin}"
        _log.info("GPIODigitalOutput %s initialised on pin %d", self._name, pin)

    def write(self, on: bool) -> None:
        if on:
            self._device.on()
        else:
            self._device.off()

    def cleanup(self) -> None:
        self._device.close()
        _log.debug("GPIODigitalOutput %s cleaned up", self._name)


class GPIOPwmOutput(PwmOutputInterface):
    """Backlight PWM via ``gpiozero.PWMOutputDevice``.

    Brightness values are on a ``0..pwm_range`` scale and map linearly onto
    the device's ``0.0..1.0`` duty cycle.
    """

    def __init__(self, pin: int, pwm_range: int = 255, frequency: int = 800) -> None:
        self._range = pwm_range
        self._device = PWMOutputDevice(pin, initial_value=0, frequency=frequency)
        _log.info("GPIOPwmOutput initialised on pin %d (range=%d, %d Hz)", pin, pwm_range, frequency)

    def write(self, value: int) -> None:
        self._device.value = max(0.0, min(1.0, value / self._range))

    def cleanup(self) -> None:
        self._device.value = 0
        self._device.close()
        _log.debug("GPIOPwmOutput cleaned up")


# ---------------------------------------------------------------------------
# Buttons
# ---------------------------------------------------------------------------

class GPIOButtonInput(ButtonInputInterface):
    """Pull-up push-button via ``gpiozero.Button``.

    ``bounce_time`` acts as the glitch filter.  gpiozero reports logical
    press/release; both are converted back to the raw level the core
    expects (pressed = low).
    """

    def __init__(self, pin: int, bounce_time: float = 0.01) -> None:
        self._button = Button(pin, pull_up=True, bounce_time=bounce_time)
        _log.info("GPIOButtonInput initialised on pin %d (bounce=%.3fs)", pin, bounce_time)

    def register_edge_callback(self, callback: Callable[[bool], None]) -> None:
        self._button.when_pressed = lambda: callback(False)
        self._button.when_released = lambda: callback(True)

    def cleanup(self) -> None:
        self._button.close()
        _log.debug("GPIOButtonInput cleaned up")
