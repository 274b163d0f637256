"""
Logger configuration.

Sets up the root logger once for the service. Every record carries the
request correlation ID (or "-" outside a request).

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys

from askdoc.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "faiss", "aiosqlite", "multipart")


class CorrelationIdFilter(logging.Filter):
    """Attach the current correlation ID to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the service.

    Replaces any existing root handlers with a stdout handler whose format
    includes the correlation ID.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a module logger.

    Args:
        name: Logger name (usually __name__)

    Returns:
        logging.Logger: Logger sharing the root configuration
    """
    return logging.getLogger(name)
