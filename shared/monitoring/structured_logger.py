"""
Structured logging for the scanner services.

Log records are rendered as JSON (python-json-logger) or as plain text for
the command line. Every record carries the service name, the environment
and, while a web request is being handled, its request id.
"""

import logging
import sys
import traceback
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger


# Request id of the HTTP request currently being served, None outside requests
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
JSON_FIELDS = '%(timestamp)s %(level)s %(service_name)s %(logger)s %(message)s'


class ContextFilter(logging.Filter):
    """Stamp records with service, environment and request id."""

    def __init__(self, service_name: str, environment: str):
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        request_id = request_id_var.get()
        if request_id:
            record.request_id = request_id
        record.service_name = self.service_name
        record.environment = self.environment
        return True


class ScannerJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding source location and structured exception info."""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['source'] = f"{record.filename}:{record.lineno}"

        if getattr(record, 'request_id', None):
            log_record['request_id'] = record.request_id
        if getattr(record, 'environment', None):
            log_record['environment'] = record.environment

        if record.exc_info and record.exc_info[0] is not None:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }


class StructuredLogger:
    """
    Configures handlers and manages the request context.

    Usage:
        StructuredLogger.configure("web_viewer", level=logging.INFO)
        StructuredLogger.set_context(request_id="3f2c...")
        logging.getLogger(__name__).info("Scan completed", extra={"symbols": 12})
    """

    _installed: List[logging.Handler] = []

    @staticmethod
    def configure(
        service_name: str,
        level: int = logging.INFO,
        log_file: Optional[Path] = None,
        json_format: bool = True,
        environment: str = "development"
    ) -> logging.Logger:
        """
        Install console (and optional file) handlers on the root logger.

        Module loggers propagate to the root, so one call per process covers
        every ``logging.getLogger(__name__)`` in the code base. Calling it
        again replaces the handlers instead of stacking them.

        Args:
            service_name: Value of the ``service_name`` field
            level: Minimum level for the root logger and its handlers
            log_file: Optional file receiving the same records
            json_format: JSON lines when True, human readable text otherwise
            environment: Value of the ``environment`` field

        Returns:
            The root logger
        """
        if json_format:
            formatter: logging.Formatter = ScannerJsonFormatter(JSON_FIELDS)
        else:
            formatter = logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

        context = ContextFilter(service_name, environment)

        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

        root = logging.getLogger()
        for handler in StructuredLogger._installed:
            root.removeHandler(handler)
            handler.close()
        StructuredLogger._installed = handlers

        # Filters sit on handlers so records from child loggers get them too
        for handler in handlers:
            handler.setLevel(level)
            handler.addFilter(context)
            handler.setFormatter(formatter)
            root.addHandler(handler)

        root.setLevel(level)
        return root

    @classmethod
    def set_context(cls, request_id: Optional[str] = None):
        """Attach a request id to every record logged in the current context."""
        if request_id:
            request_id_var.set(request_id)

    @classmethod
    def clear_context(cls):
        request_id_var.set(None)


def setup_service_logger(
    service_name: str,
    level: str = "INFO",
    log_dir: Optional[Path] = None,
    json_format: bool = True,
    environment: str = "development"
) -> logging.Logger:
    """
    Set up logging for a service entry point.

    Args:
        service_name: Name of the service, also used for the log file name
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for ``<service_name>.log``; console only when None
        json_format: Use JSON format
        environment: Deployment environment stamped on every record

    Returns:
        Logger named after the service
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    log_file = Path(log_dir) / f"{service_name}.log" if log_dir else None

    StructuredLogger.configure(service_name, log_level, log_file, json_format, environment)
    return logging.getLogger(service_name)


def log_performance(logger: logging.Logger, operation: str, duration_ms: float, **kwargs):
    """Log the duration of an operation with its counters as structured fields."""
    logger.info(
        f"Performance: {operation} took {duration_ms:.0f} ms",
        extra={
            "operation": operation,
            "duration_ms": duration_ms,
            "metric_type": "performance",
            **kwargs
        }
    )


def log_error(logger: logging.Logger, error: Exception, context: Optional[Dict[str, Any]] = None):
    """Log an unexpected exception with its traceback and request details."""
    extra = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "metric_type": "error",
        **(context or {}),
    }
    logger.error(f"Unexpected error: {error}", exc_info=error, extra=extra)
