"""JSON-lines logging shared by every Cheve module.

Each record is one JSON object on stderr carrying the translation context
(mode, direction), the component that logged it and any timing or count
attached through ``extra=``.

CHEVE_LOG_LEVEL picks the level (default INFO). CHEVE_LOG_FORMAT=text
switches to plain lines for local runs.
"""
import logging
import json
import os
import sys
from typing import Any

EXTRA_FIELDS = (
    "component", "detail", "duration_ms", "count", "endpoint",
    "status_code", "mode", "direction",
)


class JSONFormatter(logging.Formatter):
    """One JSON object per record; unset extras are left out."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
            entry["error_type"] = type(record.exc_info[1]).__name__
        for key in EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val
        return json.dumps(entry, ensure_ascii=False, default=str)


def get_logger(name: str = "cheve") -> logging.Logger:
    """Get or create a structured logger.

    Usage:
        from log import get_logger
        logger = get_logger("cheve.llm")
        logger.info("Gemini call finished", extra={"component": "gemini", "duration_ms": 412})
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        level = os.environ.get("CHEVE_LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, level, logging.INFO))

        handler = logging.StreamHandler(sys.stderr)
        fmt = os.environ.get("CHEVE_LOG_FORMAT", "json")
        if fmt == "text":
            handler.setFormatter(logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            ))
        else:
            handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger
