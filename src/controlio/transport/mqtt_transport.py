"""MQTT transport backed by ``paho-mqtt``.

paho runs its network loop in a background thread (``loop_start``) and
reconnects on its own.  Subscriptions are renewed from ``on_connect`` so
they survive a reconnect.  Connection state changes are only logged; the
core keeps working and publishes made while offline are reported as not
queued.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Callable

import paho.mqtt.client as mqtt

from controlio.core.interfaces.transport import MessageTransport
from controlio.core.models.config import MqttConfig

_log = logging.getLogger(__name__)


class PahoMqttTransport(MessageTransport):
    """:class:`MessageTransport` over a paho ``Client``.

    Args:
        config: Broker address and client settings.
    """

    def __init__(self, config: MqttConfig) -> None:
        self._config = config
        self._client = mqtt.Client(
            callback_api_version=mqtt.CallbackAPIVersion.VERSION2,
            client_id=config.client_id,
        )
        self._client.on_connect = self._on_connect
        self._client.on_disconnect = self._on_disconnect
        self._client.on_message = self._on_message
        self._client.reconnect_delay_set(min_delay=1, max_delay=30)

        self._subscriptions: list[str] = []
        self._callback: Callable[[str, bytes], None] | None = None
        self._connected = threading.Event()
        self._started = False

    @property
    def is_connected(self) -> bool:
        return self._connected.is_set()

    # ------------------------------------------------------------------
    # MessageTransport
    # ------------------------------------------------------------------

    def register_message_callback(self, callback: Callable[[str, bytes], None]) -> None:
        self._callback = callback

    async def connect(self, subscriptions: list[str], timeout: float = 10.0) -> bool:
        self._subscriptions = list(subscriptions)
        _log.info("Connecting to MQTT broker %s:%d", self._config.host, self._config.port)
        self._client.connect_async(self._config.host, self._config.port, keepalive=self._config.keepalive)
        self._client.loop_start()
        self._started = True

        loop = asyncio.get_running_loop()
        connected = await loop.run_in_executor(None, self._connected.wait, timeout)
        if not connected:
            _log.warning("MQTT broker not reachable after %.0fs — continuing, will retry", timeout)
        return connected

    async def publish(self, topic: str, payload: str, retain: bool = False) -> None:
        info = self._client.publish(topic, payload, qos=0, retain=retain)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            _log.warning("Publish to %s not queued: %s", topic, mqtt.error_string(info.rc))

    async def close(self) -> None:
        if not self._started:
            return
        self._started = False
        self._client.disconnect()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._client.loop_stop)
        _log.info("MQTT connection closed")

    # ------------------------------------------------------------------
    # paho callbacks (network thread)
    # ------------------------------------------------------------------

    def _on_connect(
        self, client: mqtt.Client, userdata: Any, flags: Any, reason_code: Any, properties: Any
    ) -> None:
        if reason_code.is_failure:
            _log.warning("mqtt.connect refused: %s", reason_code)
            return
        _log.info("mqtt.connect")
        for topic in self._subscriptions:
            client.subscribe(topic)
        self._connected.set()

    def _on_disconnect(
        self, client: mqtt.Client, userdata: Any, flags: Any, reason_code: Any, properties: Any
    ) -> None:
        self._connected.clear()
        _log.info("mqtt.disconnect (%s)", reason_code)

    def _on_message(self, client: mqtt.Client, userdata: Any, message: mqtt.MQTTMessage) -> None:
        if self._callback is None:
            _log.debug("Dropping message on %s — no callback registered", message.topic)
            return
        self._callback(message.topic, message.payload)
