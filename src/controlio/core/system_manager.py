"""ControlPanel — startup & shutdown orchestration."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from controlio.core import events
from controlio.core.button_state_machine import ButtonStateMachine
from controlio.core.command_router import CommandRouter
from controlio.core.display_controller import DisplayController
from controlio.core.event_bus import EventBus
from controlio.core.hardware_event_bridge import HardwareEventBridge
from controlio.core.interfaces.hardware import HardwareFactory
from controlio.core.interfaces.transport import MessageTransport
from controlio.core.models.config import ControlIoConfig
from controlio.core.models.state import ButtonName, OutputTarget
from controlio.core.schedule_engine import ScheduleEngine
from controlio.core.state_publisher import StatePublisher

_log = logging.getLogger(__name__)

_TRANSPORT_CLOSE_TIMEOUT = 5.0


def remove_stale_lock(path: str | None) -> bool:
    """Delete a lock file left by a previous run.  Returns ``True`` if removed."""
    if not path:
        return False
    lock = Path(path)
    try:
        lock.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        _log.warning("Could not remove stale lock %s: %s", lock, exc)
        return False
    _log.info("Cleanup lock file of previous run: %s", lock)
    return True


class ControlPanel:
    """Top-level orchestrator for control-io startup and shutdown.

    All control logic lives in dedicated modules — this class only
    sequences init / teardown and wires components together.

    Args:
        config: Validated configuration.
        event_bus: The global event bus (not yet started).
        hardware_factory: Platform-specific hardware factory.
        transport: Broker connection (not yet connected).
    """

    def __init__(
        self,
        config: ControlIoConfig,
        event_bus: EventBus,
        hardware_factory: HardwareFactory,
        transport: MessageTransport,
    ) -> None:
        self._config = config
        self._bus = event_bus
        self._factory = hardware_factory
        self._transport = transport
        self._publisher = StatePublisher(transport, config.mqtt.topic_prefix)

        # Created during start()
        self._display: DisplayController | None = None
        self._router: CommandRouter | None = None
        self._router_subs: list[str] = []
        self._machines: dict[ButtonName, ButtonStateMachine] = {}
        self._bridge: HardwareEventBridge | None = None
        self._schedule: ScheduleEngine | None = None
        self._health_task: asyncio.Task[None] | None = None

        self._stop_requested = asyncio.Event()
        self._stopped = False

    # ------------------------------------------------------------------
    # Public properties
    # ------------------------------------------------------------------

    @property
    def display(self) -> DisplayController | None:
        """The display controller (available after ``start()``)."""
        return self._display

    @property
    def router(self) -> CommandRouter | None:
        return self._router

    @property
    def machines(self) -> dict[ButtonName, ButtonStateMachine]:
        return dict(self._machines)

    @property
    def schedule(self) -> ScheduleEngine | None:
        return self._schedule

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Boot: lock cleanup → bus → controller → router/machines → broker → timers."""
        _log.info("Startup --------------------------------------------------")
        remove_stale_lock(self._config.system.stale_lock_file)

        # 1. Create hardware
        outputs = self._factory.create_outputs()
        brightness = self._factory.create_brightness()
        buttons = self._factory.create_buttons()

        # 2. Start event bus
        await self._bus.start()

        # 3. Controller, router and one state machine per button
        panel = self._config.panel
        self._display = DisplayController(outputs, brightness, self._publisher, panel)
        self._router = CommandRouter(self._display, self._publisher.command_namespace)
        self._router_subs = [
            self._bus.subscribe(events.MESSAGE_RECEIVED, self._router.on_message_event),
            self._bus.subscribe(events.COMMAND_ISSUED, self._router.on_command_event),
        ]

        for name in buttons:
            machine = ButtonStateMachine(name, self._bus, self._display, self._publisher, panel)
            self._machines[name] = machine
            self._bus.subscribe(
                events.BUTTON_EDGE, machine.on_edge_event, filter_dict={"button": name.value}
            )

        # 4. Wire drivers → event bus, then connect
        self._bridge = HardwareEventBridge(self._bus, buttons, self._transport)
        await self._transport.connect(
            [f"{self._publisher.command_namespace}#"],
            timeout=self._config.mqtt.connect_timeout,
        )

        # 5. Initial state + ready blink
        await self._display.publish_initial_state()
        for target in (OutputTarget.LED_RED, OutputTarget.LED_WHITE):
            if self._display.has_output(target):
                self._display.startup_blink(target, panel.startup_blink_half_cycles)

        # 6. Timers
        self._schedule = ScheduleEngine(
            self._config.schedule.entries, self._bus, self._config.schedule.timezone
        )
        self._schedule.start()
        self._health_task = asyncio.create_task(self._health_loop(), name="health-heartbeat")

        _log.info("ControlPanel started (buttons=%s)", [n.value for n in self._machines])

    async def _health_loop(self) -> None:
        topic = self._publisher.state_topic("health")
        while True:
            await self._publisher.publish_raw(topic, self._config.system.health_payload, retain=True)
            await asyncio.sleep(self._config.system.health_interval_seconds)

    # ------------------------------------------------------------------
    # Run / stop
    # ------------------------------------------------------------------

    def request_stop(self, reason: str = "requested") -> None:
        """Ask :meth:`run` to shut down (safe to call from a signal handler)."""
        _log.info("Stop requested: %s", reason)
        self._stop_requested.set()

    async def run(self) -> None:
        """Start, then block until a stop is requested or the bus dies.

        Raises:
            FatalControlError: A handler hit a fatal error; raised after
                shutdown has completed.
        """
        await self.start()

        stop_task = asyncio.create_task(self._stop_requested.wait(), name="stop-wait")
        bus_task = asyncio.create_task(self._bus.wait_stopped(), name="bus-wait")
        fatal: BaseException | None = None
        try:
            done, _ = await asyncio.wait({stop_task, bus_task}, return_when=asyncio.FIRST_COMPLETED)
            if bus_task in done and not bus_task.cancelled():
                fatal = bus_task.exception()
        finally:
            for task in (stop_task, bus_task):
                if not task.done():
                    task.cancel()
            await self.shutdown(reason="fatal error" if fatal else "stop requested")

        if fatal is not None:
            raise fatal

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def shutdown(self, reason: str = "user request") -> None:
        """Best-effort, bounded teardown: router off → dark backlight → timers → broker → bus → GPIO."""
        if self._stopped:
            return
        self._stopped = True
        _log.info("ControlPanel shutting down: %s", reason)

        # Queued commands must not reach the outputs once teardown has begun.
        for sub_id in self._router_subs:
            self._bus.unsubscribe(sub_id)
        self._router_subs = []

        if self._display is not None:
            self._display.blank()
            self._display.cancel_timers()

        if self._health_task is not None:
            self._health_task.cancel()
            try:
                await self._health_task
            except asyncio.CancelledError:
                pass
            self._health_task = None

        if self._schedule is not None:
            await self._schedule.stop()

        for machine in self._machines.values():
            machine.cancel_timers()

        try:
            await asyncio.wait_for(self._transport.close(), timeout=_TRANSPORT_CLOSE_TIMEOUT)
        except asyncio.TimeoutError:
            _log.warning("Transport did not close within %.0fs", _TRANSPORT_CLOSE_TIMEOUT)

        await self._bus.stop()

        # Release GPIO resources (no-op on mock).
        self._factory.cleanup()

        _log.info("Shutdown -------------------------------------------------")
