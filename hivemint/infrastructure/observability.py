"""Structured Logging — JSON and text formatters carrying hive and ledger identifiers.

Invariants:
    - Every record includes timestamp, level, logger name, and message
    - Hive/ledger identifiers passed via `extra=` are rendered in both formats
    - setup_logging is idempotent: calling it again replaces, never stacks, its handler
    - HTTP client and SDK chatter stays at WARNING unless the app level is DEBUG

Design Decisions:
    - setup_logging called once on startup via lifespan
    - Identifier keys are a fixed tuple: unknown extras are not serialized
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_KEYS = (
    "hive_id", "token_id", "serial_number", "transaction_id",
    "ledger_status", "error_code", "path", "origin",
)
NOISY_LOGGERS = ("httpx", "httpcore", "hiero_sdk_python", "sqlalchemy.engine")

_HANDLER_NAME = "hivemint"


def record_context(record: logging.LogRecord) -> dict:
    """Identifier extras present on the record, in CONTEXT_KEYS order."""
    return {
        key: record.__dict__[key]
        for key in CONTEXT_KEYS
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with identifiers appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the hivemint handler on the root logger and return it."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)

    app_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(app_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            app_level if app_level <= logging.DEBUG else logging.WARNING,
        )
    return handler
