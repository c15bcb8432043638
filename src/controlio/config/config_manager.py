"""Config manager — load JSON → apply env overrides → validate → ControlIoConfig."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from controlio.core.models.config import ControlIoConfig

_log = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "controlio_config.json"

# Environment variable → config field mapping.
# Keys are env-var names; values are ``(section, field, type)`` tuples.
_ENV_OVERRIDES: dict[str, tuple[str, str, type]] = {
    "CONTROL_IO_LOG_LEVEL": ("system", "log_level", str),
    "CONTROL_IO_DEV_MODE": ("system", "dev_mode", bool),
    "CONTROL_IO_MQTT_HOST": ("mqtt", "host", str),
    "CONTROL_IO_MQTT_PORT": ("mqtt", "port", int),
}


def _coerce(value: str, target_type: type) -> object:
    """Coerce a string env-var value to the expected Python type."""
    if target_type is bool:
        return value.strip().lower() in ("1", "true", "yes")
    return target_type(value)


def load_config(config_path: Path | str | None = None) -> ControlIoConfig:
    """Load, override, and validate the control-io configuration.

    Args:
        config_path: Path to ``controlio_config.json``.  When *None*, falls
            back to the ``CONTROL_IO_CONFIG_FILE`` env-var and then the file
            shipped next to this module.

    Returns:
        A fully-validated :class:`ControlIoConfig` instance.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If the file content is invalid.
    """
    path = _resolve_config_path(config_path)
    _log.info("Loading config from %s", path)

    raw = json.loads(path.read_text(encoding="utf-8"))

    for env_key, (section, field, typ) in _ENV_OVERRIDES.items():
        env_val = os.environ.get(env_key)
        if env_val is not None:
            raw.setdefault(section, {})[field] = _coerce(env_val, typ)
            _log.debug("Env override: %s → %s.%s = %r", env_key, section, field, env_val)

    return ControlIoConfig(**raw)


def _resolve_config_path(config_path: Path | str | None) -> Path:
    if config_path is not None:
        p = Path(config_path)
    else:
        env = os.environ.get("CONTROL_IO_CONFIG_FILE")
        p = Path(env) if env else _DEFAULT_CONFIG_PATH
    if not p.is_file():
        raise FileNotFoundError(
            f"Config file not found: {p}\n"
            "Create controlio_config.json or set CONTROL_IO_CONFIG_FILE to a valid path."
        )
    return p
