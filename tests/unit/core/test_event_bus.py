"""Tests for the async EventBus."""

import asyncio

import pytest

from controlio.core.event_bus import EventBus
from controlio.core.exceptions import FatalControlError, UnresolvedTargetError
from controlio.core.models.event import Event


class TestEventBusSubscribePublish:
    async def test_basic_publish_subscribe(self, event_bus: EventBus):
        received: list[Event] = []

        async def handler(event: Event):
            received.append(event)

        event_bus.subscribe("test.event", handler)
        await event_bus.publish("test.event", {"key": "value"})

        # Give consumer a tick to dispatch.
        await asyncio.sleep(0.1)
        assert len(received) == 1
        assert received[0].event_type == "test.event"
        assert received[0].payload == {"key": "value"}

    async def test_events_dispatched_in_order(self, event_bus: EventBus):
        seen: list[int] = []

        async def slow_handler(event: Event):
            await asyncio.sleep(0.01)
            seen.append(event.payload["n"])

        event_bus.subscribe("ordered", slow_handler)
        for n in range(5):
            await event_bus.publish("ordered", {"n": n})
        await asyncio.sleep(0.2)

        assert seen == [0, 1, 2, 3, 4]

    async def test_unsubscribe(self, event_bus: EventBus):
        received: list[Event] = []

        async def handler(event: Event):
            received.append(event)

        sub_id = event_bus.subscribe("unsub.test", handler)
        event_bus.unsubscribe(sub_id)

        await event_bus.publish("unsub.test")
        await asyncio.sleep(0.1)

        assert len(received) == 0


class TestEventBusFilter:
    async def test_filter_match(self, event_bus: EventBus):
        received: list[Event] = []

        async def handler(event: Event):
            received.append(event)

        event_bus.subscribe("input.button.edge", handler, filter_dict={"button": "buttonUpper"})
        await event_bus.publish("input.button.edge", {"button": "buttonUpper", "level": False})
        await event_bus.publish("input.button.edge", {"button": "buttonLower", "level": False})
        await asyncio.sleep(0.1)

        assert len(received) == 1
        assert received[0].payload["button"] == "buttonUpper"


class TestEventBusThreadsafe:
    async def test_publish_threadsafe(self, event_bus: EventBus):
        received: list[Event] = []

        async def handler(event: Event):
            received.append(event)

        event_bus.subscribe("threadsafe.test", handler)

        # Simulate a GPIO thread publishing.
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None,
            lambda: event_bus.publish_threadsafe("threadsafe.test", {"from": "thread"}),
        )
        await asyncio.sleep(0.2)

        assert len(received) == 1
        assert received[0].payload["from"] == "thread"


class TestEventBusErrors:
    async def test_failing_handler_stays_subscribed(self, event_bus: EventBus):
        call_count = 0

        async def bad_handler(_e: Event):
            nonlocal call_count
            call_count += 1
            raise RuntimeError("boom")

        event_bus.subscribe("err.test", bad_handler)

        await event_bus.publish("err.test")
        await asyncio.sleep(0.1)
        await event_bus.publish("err.test")
        await asyncio.sleep(0.1)

        assert call_count == 2
        waiter = asyncio.ensure_future(event_bus.wait_stopped())
        await asyncio.sleep(0.01)
        assert not waiter.done()
        waiter.cancel()

    async def test_sync_handler_works(self, event_bus: EventBus):
        received: list[str] = []

        def sync_handler(event: Event):
            received.append(event.event_type)

        event_bus.subscribe("sync.test", sync_handler)
        await event_bus.publish("sync.test")
        await asyncio.sleep(0.1)

        assert received == ["sync.test"]

    async def test_fatal_error_stops_consumer(self):
        bus = EventBus(queue_size=10)
        await bus.start()
        later: list[Event] = []

        def fatal_handler(_e: Event):
            raise UnresolvedTargetError("ledRed")

        bus.subscribe("fatal", fatal_handler)
        bus.subscribe("after", later.append)
        try:
            await bus.publish("fatal")
            await bus.publish("after")

            with pytest.raises(FatalControlError) as exc_info:
                await asyncio.wait_for(bus.wait_stopped(), timeout=1.0)
            assert exc_info.value.command == "ledRed"
            assert later == []
        finally:
            await bus.stop()


class TestEventBusOverflow:
    async def test_queue_overflow_drops_oldest(self):
        bus = EventBus(queue_size=2)
        await bus.start()
        received: list[str] = []
        bus.subscribe("a", lambda e: received.append("a"))
        bus.subscribe("b", lambda e: received.append("b"))
        bus.subscribe("c", lambda e: received.append("c"))
        try:
            # No await between publishes, so the consumer cannot drain.
            await bus.publish("a")
            await bus.publish("b")
            await bus.publish("c")
            await asyncio.sleep(0.1)

            assert received == ["b", "c"]
        finally:
            await bus.stop()
