"""GPIO hardware backend for Raspberry Pi.

Provides :class:`GPIOHardwareFactory` and the individual GPIO component
classes (outputs, backlight PWM, buttons).  Only usable on a Pi with
``gpiozero`` and ``rpi-lgpio`` installed.
"""
