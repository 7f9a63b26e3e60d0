"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from finance_tracker.config import settings

_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route every record through a single JSON handler on stdout"""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())

    # SQL statement logging only when explicitly debugging
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_template_execution(
    request_id: str,
    user_id: str,
    template_id: str,
    executed_on: str,
    next_due_date: str,
) -> None:
    """Log a recurring template turning into a transaction"""
    logging.info(
        "Recurring template executed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "template_executed",
            "template_id": template_id,
            "executed_on": executed_on,
            "next_due_date": next_due_date,
        },
    )


def log_budget_alert(
    request_id: str,
    user_id: str,
    category: str,
    status: str,
    spent: float,
    limit: float,
) -> None:
    """Log a budget evaluation that produced a notification"""
    logging.warning(
        "Budget threshold reached",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "budget_alert",
            "category": category,
            "budget_status": status,
            "spent": spent,
            "limit": limit,
        },
    )
