"""HardwareEventBridge — wires driver callbacks to the event bus.

Button edges (gpiozero threads) and broker messages (paho network thread)
are handed to the bus with ``publish_threadsafe`` so that every handler runs
on the event loop, one at a time.
"""

from __future__ import annotations

import logging

from controlio.core import events
from controlio.core.event_bus import EventBus
from controlio.core.interfaces.hardware import ButtonInputInterface
from controlio.core.interfaces.transport import MessageTransport
from controlio.core.models.state import ButtonName

_log = logging.getLogger(__name__)


class HardwareEventBridge:
    """Translates raw callbacks into event-bus messages.

    Must be instantiated *after* the event bus has been started so that
    ``publish_threadsafe`` works.

    Args:
        event_bus: The global event bus.
        buttons: Button inputs keyed by name.
        transport: Broker connection delivering command messages.
    """

    def __init__(
        self,
        event_bus: EventBus,
        buttons: dict[ButtonName, ButtonInputInterface],
        transport: MessageTransport,
    ) -> None:
        self._bus = event_bus

        for name, button in buttons.items():
            button.register_edge_callback(
                lambda level, n=name.value: self._on_button_edge(n, level)
            )
        transport.register_message_callback(self._on_message)

    # ------------------------------------------------------------------
    # Driver callbacks (may be called from foreign threads)
    # ------------------------------------------------------------------

    def _on_button_edge(self, button: str, level: bool) -> None:
        self._bus.publish_threadsafe(events.BUTTON_EDGE, {"button": button, "level": bool(level)})

    def _on_message(self, topic: str, payload: bytes) -> None:
        self._bus.publish_threadsafe(events.MESSAGE_RECEIVED, {"topic": topic, "payload": payload})
