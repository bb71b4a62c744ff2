"""Structured JSON logging for API call tracing"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from gocardless_client.config import settings

logger = logging.getLogger("gocardless_client")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on the root logger"""
    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def log_api_call(
    operation: str,
    method: str,
    path: str,
    status_code: Optional[int],
    duration_ms: float,
    outcome: str,
) -> None:
    """Log one outbound API call; never pass secrets or tokens here"""
    level = logging.INFO if outcome == "success" else logging.WARNING
    logger.log(
        level,
        "GoCardless API call",
        extra={
            "operation": operation,
            "method": method,
            "path": path,
            "status_code": status_code,
            "duration_ms": duration_ms,
            "outcome": outcome,
        },
    )
