"""Hardware abstraction interfaces (ABCs).

Every hardware component has a matching abstract base class here.  The GPIO
and Mock backends both implement these interfaces, ensuring parity between
production and development / test environments.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from controlio.core.models.state import ButtonName, OutputTarget


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------

class DigitalOutputInterface(ABC):
    """A single on/off output pin (display enable, LED, beeper)."""

    @abstractmethod
    def write(self, on: bool) -> None:
        """Drive the pin high (*on*) or low."""


class PwmOutputInterface(ABC):
    """The backlight PWM output."""

    @abstractmethod
    def write(self, value: int) -> None:
        """Set the duty cycle on the brightness scale (``0`` = dark)."""


# ---------------------------------------------------------------------------
# Buttons
# ---------------------------------------------------------------------------

class ButtonInputInterface(ABC):
    """A pull-up push-button delivering edge notifications.

    Callbacks receive the **raw** pin level: ``False`` while the button is
    held down, ``True`` once it is released.  They may be invoked from a
    driver thread.
    """

    @abstractmethod
    def register_edge_callback(self, callback: Callable[[bool], None]) -> None:
        """Register *callback(raw_level)* for every filtered edge."""


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

class HardwareFactory(ABC):
    """Creates all hardware interface implementations for the current platform."""

    @abstractmethod
    def create_outputs(self) -> dict[OutputTarget, DigitalOutputInterface]: ...

    @abstractmethod
    def create_brightness(self) -> PwmOutputInterface: ...

    @abstractmethod
    def create_buttons(self) -> dict[ButtonName, ButtonInputInterface]: ...

    def cleanup(self) -> None:
        """Release hardware resources.  No-op by default (mock)."""
