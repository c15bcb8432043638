"""DisplayController — sole owner of display and brightness state.

Every change to the display flag or the backlight brightness goes through
this class: the value is stored (clamped), written to the hardware output,
and republished as retained state.  Writes are never elided, so re-issuing
the current value still rewrites the pin and republishes.
"""

from __future__ import annotations

import asyncio
import logging

from controlio.core.interfaces.hardware import DigitalOutputInterface, PwmOutputInterface
from controlio.core.models.config import PanelConfig
from controlio.core.models.state import DisplayState, OutputTarget
from controlio.core.state_publisher import StatePublisher

_log = logging.getLogger(__name__)

#: Relative brightness tokens and the direction they move the value.
BRIGHTNESS_STEPS: dict[str, int] = {"+": 1, "-": -1}


class DisplayController:
    """Applies display, brightness, beeper and LED writes.

    Args:
        outputs: Digital outputs keyed by target.  ``DISPLAY`` and ``BEEPER``
            are expected; the LEDs are optional pass-throughs.
        brightness: Backlight PWM output.
        publisher: Retained state publisher.
        config: Panel settings (initial values, range, timing).
    """

    def __init__(
        self,
        outputs: dict[OutputTarget, DigitalOutputInterface],
        brightness: PwmOutputInterface,
        publisher: StatePublisher,
        config: PanelConfig | None = None,
    ) -> None:
        self._outputs = dict(outputs)
        self._pwm = brightness
        self._publisher = publisher
        self._config = config or PanelConfig()
        self._state = DisplayState(
            is_on=self._config.initial_display_on,
            brightness=self._clamp(self._config.initial_brightness),
        )
        self._beep_off: asyncio.TimerHandle | None = None
        self._blink_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def is_on(self) -> bool:
        return self._state.is_on

    @property
    def brightness(self) -> int:
        return self._state.brightness

    def has_output(self, target: OutputTarget) -> bool:
        """Return ``True`` if a hardware output is wired for *target*."""
        return self._outputs.get(target) is not None

    # ------------------------------------------------------------------
    # Display & brightness
    # ------------------------------------------------------------------

    async def publish_initial_state(self) -> None:
        """Write and announce the configured startup state."""
        await self.set_display(self._state.is_on)
        await self.set_brightness(self._state.brightness)

    async def set_display(self, on: bool) -> None:
        """Store the flag, drive the display pin, republish ``0``/``1``."""
        self._state.is_on = bool(on)
        self._write(OutputTarget.DISPLAY, self._state.is_on)
        await self._publisher.publish_state(OutputTarget.DISPLAY.value, int(self._state.is_on))

    async def set_brightness(self, value: int | str) -> int:
        """Apply an absolute value or a ``"+"``/``"-"`` step.

        Returns:
            The stored (clamped) brightness.

        Raises:
            ValueError: If *value* is neither an integer nor a known token.
        """
        if isinstance(value, str):
            direction = BRIGHTNESS_STEPS.get(value)
            if direction is None:
                raise ValueError(f"Unknown brightness token {value!r}")
            target = self._state.brightness + direction * self._config.brightness_step
        elif isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"Brightness must be an integer, got {value!r}")
        else:
            target = value

        self._state.brightness = self._clamp(target)
        _log.info("PWM %d", self._state.brightness)
        self._pwm.write(self._state.brightness)
        await self._publisher.publish_state("brightness", self._state.brightness)
        return self._state.brightness

    def blank(self) -> None:
        """Drive the backlight output to zero without touching stored state."""
        self._pwm.write(0)

    # ------------------------------------------------------------------
    # Beeper & LEDs
    # ------------------------------------------------------------------

    async def beep(self) -> None:
        """Pulse the beeper and republish ``1``; a newer beep supersedes the pending off."""
        if self._beep_off is not None:
            self._beep_off.cancel()
        self._write(OutputTarget.BEEPER, True)
        loop = asyncio.get_running_loop()
        self._beep_off = loop.call_later(self._config.beep_seconds, self._end_beep)
        await self._publisher.publish_state("beep", 1)

    def _end_beep(self) -> None:
        self._beep_off = None
        self._write(OutputTarget.BEEPER, False)

    async def set_aux_output(self, target: OutputTarget, on: bool) -> None:
        """Pass-through write for an LED, plus retained republish."""
        self._write(target, on)
        await self._publisher.publish_state(target.value, int(bool(on)))

    def startup_blink(self, target: OutputTarget, half_cycles: int) -> asyncio.Task[None]:
        """Toggle *target* every blink interval, *half_cycles* times, in the background."""
        task = asyncio.create_task(self._blink(target, half_cycles), name=f"blink-{target.value}")
        self._blink_tasks.add(task)
        task.add_done_callback(self._blink_tasks.discard)
        return task

    async def _blink(self, target: OutputTarget, half_cycles: int) -> None:
        state = True
        for _ in range(half_cycles):
            self._write(target, state)
            await asyncio.sleep(self._config.blink_interval_seconds)
            state = not state

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def cancel_timers(self) -> None:
        """Cancel the pending beep-off and any running blink."""
        if self._beep_off is not None:
            self._beep_off.cancel()
            self._end_beep()
        for task in list(self._blink_tasks):
            task.cancel()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clamp(self, value: int) -> int:
        return max(self._config.brightness_min, min(self._config.brightness_max, value))

    def _write(self, target: OutputTarget, on: bool) -> None:
        output = self._outputs.get(target)
        if output is None:
            _log.warning("No output wired for %s — write skipped", target.value)
            return
        output.write(on)
