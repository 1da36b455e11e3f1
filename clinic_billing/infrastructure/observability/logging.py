"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "clinic-billing", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "clinic-billing") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_plan_created(
    request_id: str,
    user_id: str,
    payment_method: str,
    installments: int,
    total_amount: Decimal,
    duration_ms: float,
) -> None:
    """Log structured plan creation outcome"""
    logging.info(
        "Installment plan stored",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "plan_created",
            "payment_method": payment_method,
            "installments": installments,
            "total_amount": str(total_amount),
            "duration_ms": duration_ms,
        },
    )


def log_schedule_drift(request_id: str, total_amount: Decimal, drift: Decimal, installments: int) -> None:
    """Installment amounts do not add up to the procedure total"""
    logging.warning(
        "Installment amounts differ from total",
        extra={
            "request_id": request_id,
            "step": "schedule_drift",
            "total_amount": str(total_amount),
            "drift": str(drift),
            "installments": installments,
        },
    )
