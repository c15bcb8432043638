"""Command payloads and the command event routed to the controller.

A payload arriving over MQTT is either valid JSON (:class:`StructuredPayload`)
or an unparseable token such as ``+`` (:class:`RawPayload`).  Consumers
branch on the variant with ``isinstance`` instead of guessing at the type
of a bare value.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class StructuredPayload:
    """A payload that parsed as JSON."""

    value: Any


@dataclass(frozen=True)
class RawPayload:
    """A payload kept verbatim because it is not valid JSON."""

    text: str


Payload = Union[StructuredPayload, RawPayload]


@dataclass(frozen=True)
class CommandEvent:
    """A ``(command, payload)`` pair, whatever its origin.

    Attributes:
        command: Command name, e.g. ``"brightness"``.
        payload: Parsed or raw payload.
        source: Where the command came from (``mqtt``, ``button``,
            ``schedule``); informational only.
    """

    command: str
    payload: Payload
    source: str = "mqtt"


def parse_payload(raw: bytes | str) -> Payload:
    """Parse *raw* as JSON, falling back to the raw text."""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    try:
        return StructuredPayload(json.loads(text))
    except ValueError:
        return RawPayload(text)


def is_truthy(payload: Payload) -> bool:
    """Interpret *payload* as an on/off flag.

    JSON values follow JSON truthiness (``0``, ``false``, ``null`` and
    ``""`` are off; arrays and objects are on).  Raw text carries no value
    and is treated as off.
    """
    if isinstance(payload, RawPayload):
        return False
    value = payload.value
    if isinstance(value, (list, dict)):
        return True
    return bool(value)
