"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

from financing_gateway.config import settings


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

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_extraction(
    request_id: str,
    fields_found: int,
    valid: bool,
    missing_fields: list[str],
    duration_ms: float,
) -> None:
    """Log structured extraction outcome"""
    logging.info(
        "Extraction completed",
        extra={
            "request_id": request_id,
            "step": "extraction_complete",
            "fields_found": fields_found,
            "validation_outcome": "valid" if valid else "invalid",
            "missing_fields": missing_fields,
            "duration_ms": duration_ms,
        },
    )


def log_simulation(
    request_id: str,
    amortization_system: str,
    term_months: int,
    extraordinary_payments: int,
    duration_ms: float,
) -> None:
    """Log structured simulation outcome"""
    logging.info(
        "Simulation completed",
        extra={
            "request_id": request_id,
            "step": "simulation_complete",
            "amortization_system": amortization_system,
            "term_months": term_months,
            "extraordinary_payments": extraordinary_payments,
            "duration_ms": duration_ms,
        },
    )
