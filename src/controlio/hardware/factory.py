"""Hardware factory — platform detection and factory creation.

Selects GPIO on Raspberry Pi, Mock on everything else (dev machines, CI).
"""

from __future__ import annotations

import logging

from controlio.core.interfaces.hardware import HardwareFactory
from controlio.core.models.config import ControlIoConfig

_log = logging.getLogger(__name__)


def _is_raspberry_pi() -> bool:
    """Return ``True`` if running on a Raspberry Pi."""
    try:
        with open("/sys/firmware/devicetree/base/model") as f:
            model = f.read().lower()
        return "raspberry pi" in model
    except OSError:
        return False


def create_hardware_factory(config: ControlIoConfig) -> HardwareFactory:
    """Return the appropriate :class:`HardwareFactory` for the platform.

    * ``dev_mode`` or not a Pi → ``MockHardwareFactory`` (``dev_mode`` is
      switched on so the rest of the system knows it runs without hardware).
    * On a Raspberry Pi → ``GPIOHardwareFactory``.
    """
    is_pi = _is_raspberry_pi()
    if config.system.dev_mode or not is_pi:
        from controlio.hardware.mock.mock_factory import MockHardwareFactory

        _log.info("Using MockHardwareFactory (dev_mode=%s, is_pi=%s)",
                  config.system.dev_mode, is_pi)
        config.system.dev_mode = True
        return MockHardwareFactory()

    from controlio.hardware.gpio.gpio_factory import GPIOHardwareFactory

    _log.info("Using GPIOHardwareFactory")
    return GPIOHardwareFactory(config.hardware)
