"""
Monitoring Module

Structured JSON logging with request tracing for the scanner services.
"""

from .structured_logger import (
    StructuredLogger,
    setup_service_logger,
    log_performance,
    log_error,
    request_id_var,
)

__all__ = [
    "StructuredLogger",
    "setup_service_logger",
    "log_performance",
    "log_error",
    "request_id_var",
]
