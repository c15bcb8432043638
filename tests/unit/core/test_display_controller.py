"""Tests for DisplayController — clamping, republishing, beeper and blink."""

from __future__ import annotations

import asyncio

import pytest

from controlio.core.display_controller import DisplayController
from controlio.core.models.state import OutputTarget
from controlio.hardware.mock.mock_factory import MockHardwareFactory

BRIGHTNESS_TOPIC = "control-io/brightness/STATE"
DISPLAY_TOPIC = "control-io/display/STATE"


class TestInitialState:
    async def test_publish_initial_state(self, display, hardware, transport):
        await display.publish_initial_state()

        assert hardware.outputs[OutputTarget.DISPLAY].writes == [True]
        assert hardware.brightness.writes == [70]
        assert transport.retained[DISPLAY_TOPIC] == "1"
        assert transport.retained[BRIGHTNESS_TOPIC] == "70"


class TestBrightness:
    async def test_plus_steps_up_and_saturates(self, display):
        for v in range(0, 191):
            await display.set_brightness(v)
            assert await display.set_brightness("+") == min(v + 10, 190)

    async def test_minus_steps_down_and_saturates(self, display):
        for v in range(0, 191):
            await display.set_brightness(v)
            assert await display.set_brightness("-") == max(v - 10, 0)

    @pytest.mark.parametrize("value,expected", [(500, 190), (191, 190), (-1, 0), (-40, 0)])
    async def test_absolute_value_is_clamped(self, display, value, expected):
        assert await display.set_brightness(value) == expected
        assert display.brightness == expected

    async def test_write_and_publish_use_clamped_value(self, display, hardware, transport):
        await display.set_brightness(250)
        assert hardware.brightness.value == 190
        assert transport.retained[BRIGHTNESS_TOPIC] == "190"

    async def test_same_value_still_writes_and_publishes(self, display, hardware, transport):
        await display.set_brightness(190)
        await display.set_brightness("+")

        assert hardware.brightness.writes == [190, 190]
        assert transport.messages_on(BRIGHTNESS_TOPIC) == ["190", "190"]

    @pytest.mark.parametrize("value", ["up", "++", 1.5, True, None])
    async def test_invalid_value_raises(self, display, value):
        with pytest.raises(ValueError):
            await display.set_brightness(value)
        assert display.brightness == 70

    async def test_blank_keeps_stored_value(self, display, hardware):
        display.blank()
        assert hardware.brightness.value == 0
        assert display.brightness == 70


class TestDisplay:
    async def test_reissuing_on_rewrites_and_republishes(self, display, hardware, transport):
        await display.set_display(True)
        await display.set_display(True)

        assert display.is_on is True
        assert hardware.outputs[OutputTarget.DISPLAY].writes == [True, True]
        assert transport.messages_on(DISPLAY_TOPIC) == ["1", "1"]

    async def test_off(self, display, hardware, transport):
        await display.set_display(False)
        assert display.is_on is False
        assert hardware.outputs[OutputTarget.DISPLAY].value is False
        assert transport.retained[DISPLAY_TOPIC] == "0"


class TestBeeper:
    async def test_beep_pulses_output(self, display, hardware):
        beeper = hardware.outputs[OutputTarget.BEEPER]

        await display.beep()
        assert beeper.value is True

        await asyncio.sleep(0.1)
        assert beeper.writes == [True, False]

    async def test_new_beep_supersedes_pending_off(self, display, hardware):
        beeper = hardware.outputs[OutputTarget.BEEPER]

        await display.beep()
        await asyncio.sleep(0.03)
        await display.beep()
        await asyncio.sleep(0.03)
        # First off (due at 0.05 s) was cancelled.
        assert beeper.value is True

        await asyncio.sleep(0.05)
        assert beeper.writes == [True, True, False]

    async def test_beep_publishes_state(self, display, transport):
        await display.beep()
        assert transport.retained["control-io/beep/STATE"] == "1"


class TestAuxOutputs:
    async def test_led_pass_through(self, display, hardware, transport):
        await display.set_aux_output(OutputTarget.LED_RED, True)

        assert hardware.outputs[OutputTarget.LED_RED].value is True
        assert transport.retained["control-io/ledRed/STATE"] == "1"

    async def test_startup_blink_toggles(self, display, hardware):
        task = display.startup_blink(OutputTarget.LED_WHITE, 4)
        await task

        assert hardware.outputs[OutputTarget.LED_WHITE].writes == [True, False, True, False]

    async def test_cancel_timers_stops_blink(self, display, hardware):
        task = display.startup_blink(OutputTarget.LED_RED, 100)
        await asyncio.sleep(0.02)
        display.cancel_timers()
        await asyncio.sleep(0)

        assert task.cancelled()
        assert len(hardware.outputs[OutputTarget.LED_RED].writes) < 100

    def test_has_output(self, publisher):
        hw = MockHardwareFactory()
        outputs = hw.create_outputs()
        del outputs[OutputTarget.LED_WHITE]
        controller = DisplayController(outputs, hw.create_brightness(), publisher)

        assert controller.has_output(OutputTarget.LED_RED)
        assert not controller.has_output(OutputTarget.LED_WHITE)
