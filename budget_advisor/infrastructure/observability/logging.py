"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from budget_advisor.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_chat_outcome(
    request_id: str,
    session_id: Optional[str],
    outcome: str,
    health_score: Optional[int],
    attempts: int,
    duration_ms: float,
    error_kind: Optional[str] = None,
) -> None:
    """Log structured chat outcome for analysis"""
    logging.info(
        "Advisor chat completed",
        extra={
            "request_id": request_id,
            "session_id": session_id,
            "step": "chat_complete",
            "outcome": outcome,
            "health_score": health_score,
            "attempts": attempts,
            "error_kind": error_kind,
            "duration_ms": duration_ms,
        },
    )
