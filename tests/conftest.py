"""Shared pytest fixtures for control-io tests."""

from __future__ import annotations

import pytest

from controlio.core.display_controller import DisplayController
from controlio.core.event_bus import EventBus
from controlio.core.models.config import ControlIoConfig, PanelConfig
from controlio.core.state_publisher import StatePublisher
from controlio.hardware.mock.mock_factory import MockHardwareFactory
from controlio.transport.memory_transport import InMemoryTransport


@pytest.fixture
async def event_bus():
    """Provide a started EventBus that is stopped after the test."""
    bus = EventBus(queue_size=100)
    await bus.start()
    yield bus
    await bus.stop()


@pytest.fixture
def fast_panel() -> PanelConfig:
    """Panel timing shortened so interaction scenarios run in well under a second."""
    return PanelConfig(
        hold_seconds=0.2,
        suppress_seconds=0.2,
        beep_seconds=0.05,
        blink_interval_seconds=0.01,
    )


@pytest.fixture
def control_config(fast_panel: PanelConfig, tmp_path) -> ControlIoConfig:
    """Config for whole-panel tests: fast timing, no broker, lock file under tmp."""
    cfg = ControlIoConfig(panel=fast_panel)
    cfg.mqtt.enabled = False
    cfg.system.stale_lock_file = str(tmp_path / "pigpio.pid")
    cfg.system.log_dir = str(tmp_path / "logs")
    return cfg


@pytest.fixture
def transport() -> InMemoryTransport:
    return InMemoryTransport()


@pytest.fixture
def publisher(transport: InMemoryTransport) -> StatePublisher:
    return StatePublisher(transport, "control-io")


@pytest.fixture
def hardware() -> MockHardwareFactory:
    return MockHardwareFactory()


@pytest.fixture
def display(hardware: MockHardwareFactory, publisher: StatePublisher, fast_panel: PanelConfig) -> DisplayController:
    """Controller on mock hardware, display on, brightness 70."""
    return DisplayController(
        hardware.create_outputs(), hardware.create_brightness(), publisher, fast_panel
    )
