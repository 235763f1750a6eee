"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = "acquisition-gateway"


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


def log_calculation(
    request_id: str,
    workspace_id: Optional[str],
    eligible: bool,
    dscr: Optional[float],
    primary_loan_amount: float,
    duration_ms: float,
) -> None:
    """Log structured loan-structure outcome for analysis"""
    logging.info(
        "Loan structure computed",
        extra={
            "request_id": request_id,
            "workspace_id": workspace_id,
            "step": "calculation_complete",
            "eligibility_outcome": "eligible" if eligible else "ineligible",
            "dscr": dscr,
            "primary_loan_amount": primary_loan_amount,
            "duration_ms": duration_ms,
        },
    )
