"""Transport factory — paho-mqtt when a broker is configured, in-memory otherwise."""

from __future__ import annotations

import logging

from controlio.core.interfaces.transport import MessageTransport
from controlio.core.models.config import MqttConfig

_log = logging.getLogger(__name__)


def create_transport(config: MqttConfig) -> MessageTransport:
    """Return the :class:`MessageTransport` selected by *config*."""
    if not config.enabled:
        from controlio.transport.memory_transport import InMemoryTransport

        _log.info("MQTT disabled — using InMemoryTransport")
        return InMemoryTransport()

    from controlio.transport.mqtt_transport import PahoMqttTransport

    return PahoMqttTransport(config)
