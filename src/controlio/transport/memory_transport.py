"""InMemoryTransport — broker-less transport for offline use and tests.

Published messages are recorded (and retained ones kept per topic) instead
of being sent anywhere; :meth:`simulate_message` injects an inbound message
the way the network thread of a real client would.
"""

from __future__ import annotations

import logging
from typing import Callable

from controlio.core.interfaces.transport import MessageTransport

_log = logging.getLogger(__name__)


class InMemoryTransport(MessageTransport):
    """Records publishes; delivers only simulated messages.

    Attributes:
        published: Every ``(topic, payload, retain)`` published, in order.
        retained: Last retained payload per topic.
    """

    def __init__(self) -> None:
        self.published: list[tuple[str, str, bool]] = []
        self.retained: dict[str, str] = {}
        self.subscriptions: list[str] = []
        self.connected = False
        self._callback: Callable[[str, bytes], None] | None = None

    def register_message_callback(self, callback: Callable[[str, bytes], None]) -> None:
        self._callback = callback

    async def connect(self, subscriptions: list[str], timeout: float = 10.0) -> bool:
        self.subscriptions = list(subscriptions)
        self.connected = True
        _log.info("In-memory transport ready (subscriptions=%s)", self.subscriptions)
        return True

    async def publish(self, topic: str, payload: str, retain: bool = False) -> None:
        self.published.append((topic, payload, retain))
        if retain:
            self.retained[topic] = payload
        _log.debug("publish %s → %s%s", topic, payload, " (retained)" if retain else "")

    async def close(self) -> None:
        self.connected = False

    # -- Simulation helpers --

    def simulate_message(self, topic: str, payload: bytes | str) -> None:
        """Deliver an inbound message if *topic* matches a subscription."""
        if not any(_topic_matches(sub, topic) for sub in self.subscriptions):
            _log.debug("No subscription for %s", topic)
            return
        if self._callback is None:
            return
        data = payload.encode("utf-8") if isinstance(payload, str) else payload
        self._callback(topic, data)

    def messages_on(self, topic: str) -> list[str]:
        """Return every payload published on *topic*, in order."""
        return [payload for t, payload, _ in self.published if t == topic]


def _topic_matches(subscription: str, topic: str) -> bool:
    """MQTT-style match supporting a trailing ``#`` and single-level ``+``."""
    if subscription.endswith("/#"):
        return topic.startswith(subscription[:-1])
    if "+" in subscription:
        sub_parts = subscription.split("/")
        topic_parts = topic.split("/")
        return len(sub_parts) == len(topic_parts) and all(
            s == "+" or s == t for s, t in zip(sub_parts, topic_parts)
        )
    return subscription == topic
