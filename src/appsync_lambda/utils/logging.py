"""
Logging utilities for the generator and the Lambda runtime.

Provides structured JSON logging with correlation IDs for tracing requests.
"""

import json
import logging
import os
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}


class StructuredLogger:
    """
    JSON logger with correlation ID support.

    Example:
        logger = StructuredLogger(__name__)
        logger.info("Dispatching operation", operation="Query.players")
    """

    def __init__(self, name: str, correlation_id: Optional[str] = None) -> None:
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
        self.correlation_id = correlation_id or str(uuid.uuid4())

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        """Internal method to emit structured JSON logs."""
        if _LEVELS[level] < self.logger.getEffectiveLevel():
            return

        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "logger": self.logger.name,
            "message": message,
            "correlationId": self.correlation_id,
            **kwargs,
        }

        # Remove None values
        log_entry = {k: v for k, v in log_entry.items() if v is not None}

        print(json.dumps(log_entry, default=str))

    def with_correlation_id(self, correlation_id: str) -> "StructuredLogger":
        """Return a logger bound to another correlation ID (one per invocation)."""
        return StructuredLogger(self.logger.name, correlation_id)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info level message."""
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning level message."""
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error level message."""
        self._log("ERROR", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug level message."""
        self._log("DEBUG", message, **kwargs)


def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger for the given module name."""
    return StructuredLogger(name)


def init_logging(default_level: str = "INFO") -> None:
    """
    Configure the root logger once per process.

    The level comes from LOG_LEVEL, falling back to ``default_level``.
    Chatty third-party loggers (botocore, urllib3) are held at WARNING.
    """
    level = os.getenv("LOG_LEVEL", default_level).upper()
    logging.basicConfig(level=level, format="%(message)s")
    for noisy in ("botocore", "boto3", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_correlation_id(event: Any) -> str:
    """
    Extract or generate correlation ID from an AppSync event.

    Checks for correlation ID in:
    1. event['request']['headers']['x-amzn-requestid'] (AppSync)
    2. event['request']['headers']['x-correlation-id']
    3. Generates new UUID if not found
    """
    if not isinstance(event, dict):
        return str(uuid.uuid4())

    headers = (event.get("request") or {}).get("headers") or {}
    for header in ("x-amzn-requestid", "x-correlation-id"):
        if header in headers:
            return str(headers[header])

    # Generate new ID
    return str(uuid.uuid4())
