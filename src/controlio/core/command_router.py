"""CommandRouter — the single entry point for commands.

Broker messages arrive as ``(topic, payload)`` and are turned into a
:class:`CommandEvent`; button machines and the schedule engine hand over
ready-made events.  Both end up in :meth:`CommandRouter.dispatch`, the only
caller of the :class:`DisplayController` mutators.
"""

from __future__ import annotations

import logging

from controlio.core.display_controller import DisplayController
from controlio.core.exceptions import UnresolvedTargetError
from controlio.core.models.command import (
    CommandEvent,
    RawPayload,
    is_truthy,
    parse_payload,
)
from controlio.core.models.event import Event
from controlio.core.models.state import OutputTarget

_log = logging.getLogger(__name__)

# Commands that drive a plain digital output.
_OUTPUT_COMMANDS: dict[str, OutputTarget] = {
    "display": OutputTarget.DISPLAY,
    "ledRed": OutputTarget.LED_RED,
    "ledWhite": OutputTarget.LED_WHITE,
}


class CommandRouter:
    """Parses, validates and dispatches commands.

    Args:
        display: The controller owning display/brightness state.
        command_namespace: Topic prefix of command messages, with trailing
            slash (``"control-io/cmnd/"``).
    """

    def __init__(
        self,
        display: DisplayController,
        command_namespace: str = "control-io/cmnd/",
    ) -> None:
        self._display = display
        self._namespace = command_namespace

    # ------------------------------------------------------------------
    # Event-bus handlers
    # ------------------------------------------------------------------

    async def on_message_event(self, event: Event) -> None:
        """Handler for :data:`events.MESSAGE_RECEIVED`."""
        await self.handle_message(event.payload["topic"], event.payload["payload"])

    async def on_command_event(self, event: Event) -> None:
        """Handler for :data:`events.COMMAND_ISSUED`."""
        await self.dispatch(event.payload["command"])

    # ------------------------------------------------------------------
    # Routing
    # ------------------------------------------------------------------

    async def handle_message(self, topic: str, raw: bytes | str) -> bool:
        """Route one broker message.  Returns ``True`` if it was applied."""
        payload = parse_payload(raw)

        if not topic.startswith(self._namespace):
            _log.error("Unhandled topic '%s' (%r)", topic, payload)
            return False

        command = topic[len(self._namespace):]
        _log.debug("MQTT received cmnd=%s payload=%r", command, payload)
        return await self.dispatch(CommandEvent(command, payload))

    async def dispatch(self, event: CommandEvent) -> bool:
        """Apply *event*.  Returns ``True`` if state was written and republished.

        Raises:
            UnresolvedTargetError: A recognised output command has no
                hardware output wired.
        """
        command = event.command

        if command == "beep":
            await self._display.beep()
            return True

        if command == "brightness":
            value = self._brightness_value(event)
            if value is None:
                _log.warning("Ignoring brightness payload %r", event.payload)
                return False
            await self._display.set_brightness(value)
            return True

        target = _OUTPUT_COMMANDS.get(command)
        if target is None:
            _log.error("Unhandled cmnd '%s' (%r)", command, event.payload)
            return False

        if not self._display.has_output(target):
            raise UnresolvedTargetError(command)

        state = is_truthy(event.payload)
        if target is OutputTarget.DISPLAY:
            await self._display.set_display(state)
        else:
            await self._display.set_aux_output(target, state)
        return True

    @staticmethod
    def _brightness_value(event: CommandEvent) -> int | str | None:
        payload = event.payload
        if isinstance(payload, RawPayload):
            value = payload.text.strip()
        else:
            value = payload.value

        if isinstance(value, str):
            return value if value in ("+", "-") else None
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None
