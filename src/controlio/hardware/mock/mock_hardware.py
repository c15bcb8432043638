"""Mock hardware implementations for development and testing.

Each class implements the corresponding ABC from
:mod:`controlio.core.interfaces.hardware` with in-memory state and
``simulate_*()`` helpers for tests.
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


class MockDigitalOutput(DigitalOutputInterface):
    """In-memory output pin.

    Attributes:
        value: Current level.
        writes: Every level written, in order.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.value = False
        self.writes: list[bool] = []

    def write(self, on: bool) -> None:
        self.value = bool(on)
        self.writes.append(self.value)


class MockPwmOutput(PwmOutputInterface):
    """In-memory backlight output."""

    def __init__(self) -> None:
        self.value = 0
        self.writes: list[int] = []

    def write(self, value: int) -> None:
        self.value = value
        self.writes.append(value)


class MockButtonInput(ButtonInputInterface):
    """In-memory pull-up button with ``simulate_*`` helpers."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._callback: Callable[[bool], None] | None = None

    def register_edge_callback(self, callback: Callable[[bool], None]) -> None:
        self._callback = callback

    def simulate_edge(self, raw_level: bool) -> None:
        """Deliver a raw edge (``False`` = pin pulled low = pressed)."""
        if self._callback:
            self._callback(raw_level)
        else:
            _log.debug("No edge callback registered for %s", self.name)

    def simulate_press(self) -> None:
        self.simulate_edge(False)

    def simulate_release(self) -> None:
        self.simulate_edge(True)
