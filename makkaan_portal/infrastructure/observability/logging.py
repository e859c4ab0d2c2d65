"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from makkaan_portal.config import settings


class CustomJsonFormatter(JsonFormatter):
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

    # SQL echo is too chatty for JSON logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_contract_event(request_id: str, action: str, contract_id: int, **fields: Any) -> None:
    """Log an administrator mutation of a client contract"""
    logging.info(
        "Contract %s",
        action,
        extra={
            "request_id": request_id,
            "step": f"contract_{action}",
            "contract_id": contract_id,
            **fields,
        },
    )


def log_ledger_view(
    request_id: str,
    contract_id: int,
    row_count: int,
    late_rows: int,
    total_due: str,
    duration_ms: float,
) -> None:
    """Log structured ledger view outcome for analysis"""
    logging.info(
        "Ledger reconciled",
        extra={
            "request_id": request_id,
            "step": "ledger_view",
            "contract_id": contract_id,
            "row_count": row_count,
            "late_rows": late_rows,
            "total_due": total_due,
            "duration_ms": duration_ms,
        },
    )
