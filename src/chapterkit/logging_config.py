"""Application logging configuration utilities."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

AUDIT_LOGGER_NAME = "chapterkit.ingest.audit"

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class IngestJSONFormatter(logging.Formatter):
    """One JSON object per record.

    Dict messages (the audit records) are merged into the object with their
    ``event`` key first. Exceptions are flattened to ``error_type``/``error``
    plus the formatted traceback.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - inherited
        payload: dict[str, Any] = {}
        fields: dict[str, Any] = {}
        if isinstance(record.msg, dict):
            fields = dict(record.msg)
            if "event" in fields:
                payload["event"] = fields.pop("event")

        payload["ts"] = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )
        payload["level"] = record.levelname
        payload["logger"] = record.name

        if isinstance(record.msg, dict):
            payload.update(fields)
        else:
            message = record.getMessage()
            if message:
                payload["message"] = message

        if record.exc_info and record.exc_info[1] is not None:
            error = record.exc_info[1]
            payload["error_type"] = type(error).__name__
            payload["error"] = str(error)
            payload["traceback"] = self.formatException(record.exc_info)

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_ingest_audit_logger() -> logging.Logger:
    """Logger receiving one structured record per ingested document."""

    return logging.getLogger(AUDIT_LOGGER_NAME)


def configure_logging(level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure JSON logging; with ``log_dir`` the audit trail also goes to a file."""

    handlers: dict[str, Any] = {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "json",
        },
    }
    audit_handlers = ["default"]
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["ingest_audit"] = {
            "class": "logging.FileHandler",
            "filename": str(log_dir / "ingest_audit.log"),
            "mode": "a",
            "encoding": "utf-8",
            "formatter": "json",
        }
        audit_handlers = ["ingest_audit"]

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"json": {"()": IngestJSONFormatter}},
            "handlers": handlers,
            "root": {
                "level": level,
                "handlers": ["default"],
            },
            "loggers": {
                AUDIT_LOGGER_NAME: {
                    "level": "INFO",
                    "handlers": audit_handlers,
                    "propagate": False,
                }
            },
        }
    )
