"""control-io — application entry point (composition root).

Wires together: Config → HardwareFactory → Transport → EventBus → ControlPanel.
``asyncio.run`` owns the event loop; SIGTERM / SIGINT request a graceful
shutdown.
"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys

from controlio.config.config_manager import load_config
from controlio.core.event_bus import EventBus
from controlio.core.exceptions import FatalControlError
from controlio.core.system_manager import ControlPanel
from controlio.hardware.factory import create_hardware_factory
from controlio.log_config.logger import setup_logging
from controlio.transport.factory import create_transport

_log = logging.getLogger(__name__)


async def _run(panel: ControlPanel) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, panel.request_stop, sig.name)
    await panel.run()


def main() -> None:
    """Synchronous entry point — bootstraps and runs the panel until signalled."""

    setup_logging(log_dir=None)

    # 1. Load configuration, then re-init logging with its settings
    config = load_config()
    setup_logging(config.system.log_level, config.system.log_dir)
    _log.info("Starting control-io")

    # 2. Hardware (mock on dev, GPIO on Pi) and broker transport
    factory = create_hardware_factory(config)
    transport = create_transport(config.mqtt)

    # 3. Event bus + orchestrator
    bus = EventBus(queue_size=config.system.event_bus_queue_size)
    panel = ControlPanel(config=config, event_bus=bus, hardware_factory=factory, transport=transport)

    try:
        asyncio.run(_run(panel))
    except FatalControlError:
        _log.critical("Fatal error — exiting", exc_info=True)
        sys.exit(1)

    _log.info("control-io stopped")


if __name__ == "__main__":
    main()
