from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, TextIO

_HANDLER_NAME = "versionist"


class EventFormatter(logging.Formatter):
    """Render ``log_event`` records as JSON lines or ``key=value`` text."""

    def __init__(self, format_name: str = "json") -> None:
        super().__init__()
        self._format_name = format_name

    def format(self, record: logging.LogRecord) -> str:
        payload = getattr(record, "event_fields", None)
        if payload is None:
            payload = {"event": "message", "message": record.getMessage()}
        payload = {"level": record.levelname.lower(), "logger": record.name, **payload}
        if self._format_name == "json":
            return json.dumps(payload, sort_keys=True, default=str)
        event = payload.pop("event")
        level = payload.pop("level").upper()
        fields = " ".join(f"{key}={value}" for key, value in sorted(payload.items()))
        return f"{level} {event} {fields}".rstrip()


def get_logger(name: str = "versionist") -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(
    *,
    level: str = "warning",
    format_name: str = "json",
    stream: TextIO | None = None,
    log_dir: Path | None = None,
    filename: str = "versionist.log",
) -> None:
    normalized = level.strip().upper()
    level_value = getattr(logging, normalized, logging.WARNING)
    root = get_logger()
    root.setLevel(level_value)
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)
            existing.close()

    if stream is None:
        env_dir = os.environ.get("VERSIONIST_LOG_DIR")
        if env_dir:
            log_dir = Path(env_dir)
    handler: logging.Handler
    if stream is not None:
        handler = logging.StreamHandler(stream)
    elif log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_dir / filename, encoding="utf-8")
    else:
        handler = logging.NullHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(EventFormatter(format_name))
    root.addHandler(handler)


def log_event(
    logger: logging.Logger,
    event: str,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    payload = {"event": event, **fields}
    logger.log(level, event, extra={"event_fields": payload})
