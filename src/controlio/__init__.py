"""control-io — control panel daemon: display, backlight, buttons and beeper over MQTT."""
