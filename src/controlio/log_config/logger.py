"""Root logging handlers and the per-button log adapter."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, MutableMapping

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_LOG_FILE = "control-io.log"


def _file_handler(log_dir: str, max_bytes: int, backup_count: int) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    return RotatingFileHandler(
        os.path.join(log_dir, _LOG_FILE),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )


def setup_logging(
    log_level: str = "INFO",
    log_dir: str | None = "logs",
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB
    backup_count: int = 3,
) -> None:
    """Install console (and optional rotating-file) handlers on the root logger.

    ``main`` calls this twice: console-only before the config is read, then
    with the configured level and directory.  Handlers from an earlier call
    are closed and replaced.

    Args:
        log_level: Level name; unknown names fall back to INFO.
        log_dir: Directory for ``control-io.log``; ``None`` for console only.
        max_bytes: File size that triggers rotation.
        backup_count: Rotated files kept.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_dir is not None:
        handlers.append(_file_handler(log_dir, max_bytes, backup_count))

    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)


class ContextualLogger(logging.LoggerAdapter):
    """Prefixes each record with ``[key=value]`` tags for its context.

    ``ContextualLogger(log, button="buttonUpper").debug("trigger")`` logs
    ``"[button=buttonUpper] trigger"``.
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        super().__init__(logger, context)
        self._prefix = " ".join(f"[{k}={v}]" for k, v in context.items())

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return (f"{self._prefix} {msg}" if self._prefix else msg), kwargs
