from __future__ import annotations

import json
import logging
import logging.config

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra=``.
_RECORD_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {"message", "asctime"}


def extra_fields(record: logging.LogRecord) -> dict:
    return {key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS}


class ExtraFieldsFormatter(logging.Formatter):
    """Appends cache and upstream context (query_hash, job_id, status_code...) as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields = extra_fields(record)
        if not fields:
            return message
        return f"{message} | {json.dumps(fields, default=str, sort_keys=True)}"


def configure_logging(level: str = "INFO") -> None:
    if logging.getLogger().handlers:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"extra": {"()": ExtraFieldsFormatter, "format": LOG_FORMAT}},
            "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "extra"}},
            "root": {"level": level, "handlers": ["console"]},
            # httpx logs every upstream request at INFO.
            "loggers": {"httpx": {"level": "WARNING"}},
        }
    )
