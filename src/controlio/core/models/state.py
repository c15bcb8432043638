"""Runtime state models and enumerations."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ButtonName(str, Enum):
    """The two illuminated push-buttons on the panel.

    Values double as the status topic segment (``control-io/<value>/STATE``).
    """

    UPPER = "buttonUpper"
    LOWER = "buttonLower"


class OutputTarget(str, Enum):
    """Digital outputs addressable by a command name."""

    DISPLAY = "display"
    LED_RED = "ledRed"
    LED_WHITE = "ledWhite"
    BEEPER = "beeper"


class ButtonPhase(str, Enum):
    """Phase of a :class:`ButtonStateMachine`."""

    IDLE = "idle"
    PRESS_PENDING = "press_pending"
    SUPPRESSED = "suppressed"


class WeekdayFilter(str, Enum):
    """Which days of the week a schedule entry applies to."""

    WEEKDAYS = "weekdays"
    WEEKEND = "weekend"
    EVERY = "every"

    @property
    def day_of_week(self) -> str:
        """Cron ``day_of_week`` field for this class of days."""
        return _CRON_DAYS[self]


_CRON_DAYS = {
    WeekdayFilter.WEEKDAYS: "mon-fri",
    WeekdayFilter.WEEKEND: "sat,sun",
    WeekdayFilter.EVERY: "*",
}


class DisplayState(BaseModel):
    """Snapshot of the display flag and backlight brightness.

    ``validate_assignment`` re-checks the brightness bounds on every write so
    an out-of-range value can never be stored.
    """

    model_config = ConfigDict(validate_assignment=True)

    is_on: bool = Field(default=True)
    brightness: int = Field(default=70, ge=0, le=190)
