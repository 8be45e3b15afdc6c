"""
Structured JSON logging.

Provides single-line JSON records carrying the request id of the HTTP call
that produced them, plus a timing context manager for store operations and
retention sweeps.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime

# Context variables for request correlation
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
component_var: ContextVar[str | None] = ContextVar("component", default=None)

# Extra record attributes copied into the JSON payload
EXTRA_FIELDS = (
    "event",
    "duration_ms",
    "operation",
    "handler",
    "method",
    "path",
    "status_code",
    "entry_id",
    "mailing_id",
    "entries",
    "stale_found",
    "deleted",
    "cutoff",
    "tick_seconds",
    "ttl_seconds",
)


# -----------------------------------------------------------------------------
# JSON Formatter
# -----------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Output format:
    {"timestamp": "...", "level": "INFO", "message": "...", "request_id": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = getattr(record, "request_id", None) or request_id_var.get()
        if request_id:
            log_data["request_id"] = request_id

        component = component_var.get()
        if component:
            log_data["component"] = component

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: str = "INFO") -> None:
    """
    Configure root logging.

    Args:
        json_format: If True, use JSON format. If False, use human-readable format.
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# -----------------------------------------------------------------------------
# Context Managers
# -----------------------------------------------------------------------------


@contextmanager
def log_operation(operation: str, logger_name: str = "mailing_api.operations"):
    """
    Context manager for operation-level logging.

    Logs completion or failure with duration. The yielded dict is merged
    into the completion record, so callers can attach counters.

    Usage:
        with log_operation("retention_sweep") as metrics:
            metrics["deleted"] = len(ids)
    """
    start_time = time.time()
    logger = logging.getLogger(logger_name)
    metrics: dict = {}

    try:
        yield metrics
        duration_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"{operation} completed",
            extra={"event": f"{operation}_complete", "operation": operation, "duration_ms": duration_ms, **metrics},
        )
    except Exception as e:
        duration_ms = int((time.time() - start_time) * 1000)
        logger.error(
            f"{operation} failed: {e}",
            extra={"event": f"{operation}_failed", "operation": operation, "duration_ms": duration_ms},
        )
        raise
