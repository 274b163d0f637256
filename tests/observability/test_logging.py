"""
Tests for logging configuration and correlation ID propagation.
"""

import logging

import pytest

from askdoc.observability import configure_logging, get_correlation_id, get_logger, set_correlation_id
from askdoc.observability.correlation import clear_correlation_id
from askdoc.observability.logger import CorrelationIdFilter


@pytest.fixture(autouse=True)
def reset_context():
    """Clear correlation state and restore root handlers after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    clear_correlation_id()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_should_install_single_handler_with_level(self) -> None:
        # Act
        configure_logging("warning")
        configure_logging("DEBUG")

        # Assert
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_unknown_level_should_fall_back_to_info(self) -> None:
        configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_get_logger_returns_named_logger(self) -> None:
        assert get_logger("askdoc.test").name == "askdoc.test"


class TestCorrelationId:
    """Test suite for correlation ID context."""

    def test_set_should_generate_when_missing(self) -> None:
        # Act
        value = set_correlation_id()

        # Assert
        assert value
        assert get_correlation_id() == value

    def test_filter_should_tag_records(self) -> None:
        # Arrange
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        log_filter = CorrelationIdFilter()

        # Act
        log_filter.filter(record)
        untagged = record.correlation_id
        set_correlation_id("req-42")
        log_filter.filter(record)

        # Assert
        assert untagged == "-"
        assert record.correlation_id == "req-42"


class TestCorrelationMiddleware:
    """Test suite for the X-Correlation-ID header."""

    def test_should_echo_incoming_header(self, client) -> None:
        response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_should_generate_header_when_absent(self, client) -> None:
        response = client.get("/health")
        assert response.headers["X-Correlation-ID"]
