"""Publish/subscribe transports: paho-mqtt and in-memory."""

from controlio.transport.factory import create_transport

__all__ = ["create_transport"]
