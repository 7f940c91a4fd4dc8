"""Logging setup, plain text or structured JSON"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

SERVICE_NAME = "finance-tracker"
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class TrackerJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(TrackerJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    logger.addHandler(handler)
