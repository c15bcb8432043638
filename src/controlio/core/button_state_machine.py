"""ButtonStateMachine — per-button press / long-press / suppression logic.

Phases::

    IDLE ──press (display on)──▶ PRESS_PENDING ──hold timer──▶ SUPPRESSED
      ▲                              │                             │
      └──────────release─────────────┘◀────── window elapsed ──────┘

* A press while the display is off wakes it (``display=1`` plus the navigate
  message) and stays ``IDLE``.
* A press while the display is on starts the hold timer.  Releasing before
  it fires is a short press; letting it fire turns the display off.
* After that auto-off every edge is swallowed for the suppression window so
  the release that belongs to the long press does not count as input.

Every press/release that is not swallowed is mirrored on the button's
retained status topic as ``1`` / ``0``.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable

from controlio.core import events
from controlio.core.display_controller import DisplayController
from controlio.core.event_bus import EventBus
from controlio.core.models.command import CommandEvent, StructuredPayload
from controlio.core.models.config import PanelConfig
from controlio.core.models.event import Event
from controlio.core.models.state import ButtonName, ButtonPhase
from controlio.core.state_publisher import StatePublisher
from controlio.log_config.logger import ContextualLogger

_log = logging.getLogger(__name__)


class ButtonStateMachine:
    """Turns raw edges of one button into commands and notifications.

    The machine never changes display state itself; it reads
    :attr:`DisplayController.is_on` and emits :data:`events.COMMAND_ISSUED`
    for the router.

    Args:
        button: Which button this machine owns.
        event_bus: Bus the display commands are emitted on.
        display: Controller, read for the current on/off flag.
        publisher: Publishes button state and the navigate message.
        config: Panel timing and navigate topic.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        button: ButtonName,
        event_bus: EventBus,
        display: DisplayController,
        publisher: StatePublisher,
        config: PanelConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._button = button
        self._bus = event_bus
        self._display = display
        self._publisher = publisher
        self._config = config or PanelConfig()
        self._clock = clock
        self._log = ContextualLogger(_log, button=button.value)

        self._phase = ButtonPhase.IDLE
        self._pressed = False
        self._hold_task: asyncio.Task[None] | None = None
        self._suppressed_until: float | None = None
        self._suppress_timer: asyncio.TimerHandle | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def button(self) -> ButtonName:
        return self._button

    @property
    def phase(self) -> ButtonPhase:
        return self._phase

    @property
    def pressed(self) -> bool:
        """Last accepted logical level."""
        return self._pressed

    @property
    def hold_pending(self) -> bool:
        return self._hold_task is not None and not self._hold_task.done()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    async def on_edge_event(self, event: Event) -> None:
        """Event-bus handler for :data:`events.BUTTON_EDGE`."""
        await self.handle_edge(bool(event.payload["level"]))

    async def handle_edge(self, raw_level: bool) -> None:
        """Process one edge; *raw_level* is the pin level (low = pressed)."""
        if self._phase is ButtonPhase.SUPPRESSED:
            if self._suppressed_until is not None and self._clock() < self._suppressed_until:
                self._log.debug("edge discarded (suppressed, raw=%s)", raw_level)
                return
            self._end_suppression()

        if not raw_level:
            await self._on_press()
        else:
            await self._on_release()

    async def _on_press(self) -> None:
        self._cancel_hold()
        self._pressed = True

        if self._display.is_on:
            self._phase = ButtonPhase.PRESS_PENDING
            self._hold_task = asyncio.create_task(
                self._hold_timer(), name=f"hold-{self._button.value}"
            )
            self._log.debug("trigger (level=1)")
            await self._notify()
            return

        self._phase = ButtonPhase.IDLE
        self._log.debug("display on")
        await self._emit_display(True)
        await self._publisher.publish_raw(
            self._config.navigate_topic, self._config.navigate_payload
        )
        await self._notify()

    async def _on_release(self) -> None:
        if self._phase is ButtonPhase.PRESS_PENDING:
            self._cancel_hold()
            self._phase = ButtonPhase.IDLE
        self._pressed = False
        self._log.debug("trigger (level=0)")
        await self._notify()

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    async def _hold_timer(self) -> None:
        await asyncio.sleep(self._config.hold_seconds)
        self._hold_task = None
        self._log.debug("long press — display off")

        self._phase = ButtonPhase.SUPPRESSED
        self._pressed = False
        self._suppressed_until = self._clock() + self._config.suppress_seconds
        loop = asyncio.get_running_loop()
        self._suppress_timer = loop.call_later(
            self._config.suppress_seconds, self._end_suppression
        )
        await self._emit_display(False)

    def _end_suppression(self) -> None:
        if self._suppress_timer is not None:
            self._suppress_timer.cancel()
            self._suppress_timer = None
        self._suppressed_until = None
        if self._phase is ButtonPhase.SUPPRESSED:
            self._phase = ButtonPhase.IDLE

    def _cancel_hold(self) -> None:
        if self._hold_task is not None:
            self._hold_task.cancel()
            self._hold_task = None

    def cancel_timers(self) -> None:
        """Cancel the hold and suppression timers (shutdown)."""
        self._cancel_hold()
        self._end_suppression()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    async def _emit_display(self, on: bool) -> None:
        command = CommandEvent("display", StructuredPayload(int(on)), source="button")
        await self._bus.publish(events.COMMAND_ISSUED, {"command": command})

    async def _notify(self) -> None:
        await self._publisher.publish_state(self._button.value, int(self._pressed))
