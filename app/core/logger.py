"""
Application logging.
Provides the shared logger, correlation-aware adapters and a structured audit trail.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.config import settings


class CorrelationIdFilter(logging.Filter):
    """Guarantees every record carries a correlation_id attribute."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def _build_logger(name: str) -> logging.Logger:
    built = logging.getLogger(name)
    if not built.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s"
        ))
        handler.addFilter(CorrelationIdFilter())
        built.addHandler(handler)
    built.setLevel(settings.LOG_LEVEL.upper())
    built.propagate = False
    return built


logger = _build_logger(settings.APP_NAME)
_audit_logger = _build_logger(f"{settings.APP_NAME}.audit")


def get_logger_with_correlation(correlation_id: str) -> logging.LoggerAdapter:
    """Returns a logger adapter that stamps every message with the given correlation ID."""
    return logging.LoggerAdapter(logger, {"correlation_id": correlation_id})


def audit_log(action: str, user: str, resource: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Writes one JSON line to the audit trail.
    Kept separate from the application log so it can be shipped to immutable storage.
    """
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "user": user,
        "resource": resource,
        "details": details or {},
    }
    correlation_id = (details or {}).get("correlation_id") or "-"
    _audit_logger.info(json.dumps(entry, default=str), extra={"correlation_id": correlation_id})
