"""Publish/subscribe transport interface.

The core only needs to publish, receive command messages, and shut the
connection down.  Connection lifecycle and reconnection belong to the
implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class MessageTransport(ABC):
    """Broker connection used for commands in and state out."""

    @abstractmethod
    def register_message_callback(self, callback: Callable[[str, bytes], None]) -> None:
        """Register *callback(topic, payload)* for inbound messages.

        May be invoked from a network thread.
        """

    @abstractmethod
    async def connect(self, subscriptions: list[str], timeout: float = 10.0) -> bool:
        """Start connecting and wait up to *timeout* for the first connection.

        *subscriptions* are (re)subscribed on every connect.  Returns
        ``False`` if the first connection did not complete in time; the
        implementation keeps retrying in the background.
        """

    @abstractmethod
    async def publish(self, topic: str, payload: str, retain: bool = False) -> None:
        """Publish *payload* on *topic*."""

    @abstractmethod
    async def close(self) -> None:
        """Disconnect gracefully."""
