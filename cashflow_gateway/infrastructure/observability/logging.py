"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from cashflow_gateway.config import settings


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


def log_forecast(request_id: str, week_count: int, exposed_weeks: int, total_cents: int, duration_ms: float) -> None:
    """Log forecast computation summary"""
    logging.info(
        "Forecast computed",
        extra={
            "request_id": request_id,
            "step": "forecast",
            "week_count": week_count,
            "exposed_weeks": exposed_weeks,
            "total_cents": total_cents,
            "duration_ms": duration_ms,
        },
    )


def log_allocation(
    request_id: str,
    user_id: str,
    allocation_id: str,
    outcome: str,
    income_cents: int,
    free_cash_cents: int,
    duration_ms: float,
) -> None:
    """Log allocation lifecycle step (proposed / confirmed / discarded)"""
    logging.info(
        "Allocation %s",
        outcome,
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "allocation_id": allocation_id,
            "step": f"allocation_{outcome}",
            "income_cents": income_cents,
            "free_cash_cents": free_cash_cents,
            "duration_ms": duration_ms,
        },
    )
