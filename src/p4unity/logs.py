"""Trace logging for p4unity runs.

Verbose mode writes one JSON-lines file per invocation under `p4unity_logs/`.
There is no expiry or rotation; the files accumulate next to the p4d process,
so leave it off outside of debugging.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

LOGGER_NAME = "p4unity"
DEFAULT_LOG_DIR = Path("p4unity_logs")


class JsonLineFormatter(logging.Formatter):
    """Render a record as one JSON object carrying its structured fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(getattr(record, "fields", {}))
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, default=str)


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log `event` with key/value fields attached for the JSON formatter."""
    logger.log(level, event, extra={"fields": fields})


def configure_logging(verbose: bool, log_dir: Path | None = None) -> logging.Logger:
    """Return the p4unity logger, writing to a fresh file when verbose.

    Args:
        verbose: Enable the per-invocation log file
        log_dir: Directory for log files (default ./p4unity_logs)

    Returns:
        Configured logger; silent when not verbose
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if not verbose:
        logger.addHandler(logging.NullHandler())
        return logger

    target_dir = log_dir or DEFAULT_LOG_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target_dir / f"{uuid.uuid4().hex}.txt", encoding="utf-8")
    handler.setFormatter(JsonLineFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger
