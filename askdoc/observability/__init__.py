"""Logging setup and request observability middleware."""

from askdoc.observability.correlation import get_correlation_id, set_correlation_id
from askdoc.observability.logger import configure_logging, get_logger
from askdoc.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

__all__ = [
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "set_correlation_id",
    "CorrelationMiddleware",
    "RequestLoggingMiddleware",
]
