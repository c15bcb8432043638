"""Retained state notifications on ``<prefix>/<name>/STATE``."""

from __future__ import annotations

import json
import logging
from typing import Any

from controlio.core.interfaces.transport import MessageTransport

_log = logging.getLogger(__name__)


class StatePublisher:
    """Formats and publishes status topics through a :class:`MessageTransport`.

    Args:
        transport: Broker connection.
        topic_prefix: Namespace root, e.g. ``"control-io"``.
    """

    def __init__(self, transport: MessageTransport, topic_prefix: str = "control-io") -> None:
        self._transport = transport
        self._prefix = topic_prefix.rstrip("/")

    @property
    def command_namespace(self) -> str:
        """Topic prefix commands arrive under (with trailing slash)."""
        return f"{self._prefix}/cmnd/"

    def state_topic(self, name: str) -> str:
        return f"{self._prefix}/{name}/STATE"

    async def publish_state(self, name: str, value: Any) -> None:
        """Publish *value* as JSON, retained, on the status topic for *name*."""
        await self._transport.publish(self.state_topic(name), json.dumps(value), retain=True)

    async def publish_raw(self, topic: str, payload: str, retain: bool = False) -> None:
        """Publish a verbatim *payload* on an arbitrary *topic*."""
        _log.debug("Publishing %s → %s", topic, payload)
        await self._transport.publish(topic, payload, retain=retain)
