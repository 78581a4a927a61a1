"""
Logging helpers for store components.

Store modules log through the standard library ``logging`` package
under the ``tribble_store`` namespace. Records about a file carry its
path, and records about a failure carry the failing error's details
(offset, declared and available byte counts, operation) as attributes,
so the JSON formatter can emit them as fields rather than prose.

JSON output is switched on from configuration, see
``tribble_store.config.apply_log_settings``.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from .exceptions import TribbleStoreError

ROOT_LOGGER = "tribble_store"

# Record attributes the formatter promotes to top-level JSON fields.
CONTEXT_FIELDS = (
    "path",
    "operation",
    "offset",
    "size",
    "limit",
    "declared",
    "available",
    "entry_id",
    "error_type",
)


class StructuredJsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Fields: timestamp (UTC, ISO 8601), level, logger, message, then any
    CONTEXT_FIELDS present on the record, then the formatted exception
    if one is attached.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in CONTEXT_FIELDS:
            if hasattr(record, key):
                log_obj[key] = getattr(record, key)

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def configure_structured_logging(
    level: int = logging.INFO,
    logger_name: str = ROOT_LOGGER,
) -> logging.Logger:
    """
    Send a logger's records to stdout as JSON.

    Replaces any handlers already on the logger, so calling it twice
    does not duplicate output.

    Args:
        level: Logging level
        logger_name: Logger to configure (default: the package logger)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(logger_name)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(StructuredJsonFormatter())

    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


def get_store_logger(name: str) -> logging.Logger:
    """Logger named ``tribble_store.{name}``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


class StoreLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds store context to all log messages.

    Used by FramedFileStore and Backlog to tag records with the file path.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = kwargs.get("extra", {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def log_store_error(
    log: logging.Logger | logging.LoggerAdapter,
    message: str,
    error: TribbleStoreError,
    level: int = logging.WARNING,
) -> None:
    """Log a store error with its details attached as record attributes.

    Only scalar detail values are attached; ``cause`` is left to the
    exception chain.
    """
    extra: dict[str, Any] = {"error_type": type(error).__name__}
    for key, value in error.details.items():
        if key in CONTEXT_FIELDS and isinstance(value, (str, int, float)):
            extra[key] = value
    log.log(level, f"{message}: {error.message}", extra=extra)
