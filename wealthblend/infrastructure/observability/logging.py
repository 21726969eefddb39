"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from wealthblend.config import settings


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

    # SQL echo is too noisy for JSON logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_record_saved(
    record_type: str,
    record_id: str,
    user_id: str,
    operation: str,
    request_id: Optional[str] = None,
) -> None:
    """Log a completed validate -> derive -> persist pipeline"""
    logging.info(
        "Record saved",
        extra={
            "request_id": request_id,
            "record_type": record_type,
            "record_id": record_id,
            "user_id": user_id,
            "step": operation,
        },
    )


def log_status_transition(budget_id: str, user_id: str, old_status: str, new_status: str) -> None:
    """Log automatic budget status changes driven by usage"""
    logging.info(
        "Budget status changed",
        extra={
            "record_id": budget_id,
            "user_id": user_id,
            "step": "status_transition",
            "old_status": old_status,
            "new_status": new_status,
        },
    )


def log_alert_dispatched(budget_id: str, user_id: str, percentage_used: int, delivered: bool) -> None:
    """Log the outcome of a budget alert dispatch"""
    logging.info(
        "Budget alert dispatched" if delivered else "Budget alert failed",
        extra={
            "record_id": budget_id,
            "user_id": user_id,
            "step": "alert_dispatch",
            "percentage_used": percentage_used,
            "delivered": delivered,
        },
    )
