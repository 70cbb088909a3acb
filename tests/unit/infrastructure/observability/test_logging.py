"""Tests for structured logging."""

import json
import logging
import sys

import pytest

from hiddenspins.domain.exceptions import EntityNotFoundError, RemoteError
from hiddenspins.infrastructure.observability.logger_template import log_operation
from hiddenspins.infrastructure.observability.logging import (
    CompactExceptionFormatter,
    CorrelationIdFilter,
    CustomJsonFormatter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


def _record(msg: str = "hello", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="hiddenspins.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


class TestCorrelationId:
    """Test correlation ID functionality."""

    def test_set_and_get_correlation_id(self):
        """Test setting and getting correlation ID."""
        test_id = "test-123-abc"
        result = set_correlation_id(test_id)
        assert result == test_id
        assert get_correlation_id() == test_id

    def test_set_correlation_id_generates_uuid_when_none(self):
        """Test that setting None generates a UUID."""
        result = set_correlation_id(None)
        assert len(result) == 36
        assert get_correlation_id() == result

    def test_filter_attaches_correlation_id(self):
        """Test that the filter copies the current ID onto the record."""
        set_correlation_id("req-42")
        record = _record()

        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "req-42"


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_configure_logging_debug_level(self):
        """Test configuring logging with DEBUG level."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        logger = logging.getLogger("test")
        assert logger.getEffectiveLevel() <= logging.DEBUG

    def test_configure_logging_info_level(self):
        """Test configuring logging with INFO level."""
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        logger = logging.getLogger("test")
        assert logger.getEffectiveLevel() == logging.INFO

    def test_configure_logging_json_format(self):
        """Test configuring logging with JSON format."""
        configure_logging(log_level="INFO", json_format=True, app_name="test-app")
        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CustomJsonFormatter)

    def test_configure_logging_replaces_handlers(self):
        """Test that repeated configuration doesn't stack handlers."""
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        configure_logging(log_level="INFO", json_format=False, app_name="test-app")
        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, CompactExceptionFormatter)

    def test_noisy_loggers_quieted(self):
        """Test that third-party loggers are raised to WARNING."""
        configure_logging(log_level="DEBUG", json_format=False, app_name="test-app")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("aiosqlite").level == logging.WARNING


class TestFormatters:
    """Test the two output formats."""

    def test_json_formatter_fields(self):
        """Test JSON lines carry level, logger and correlation ID."""
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = _record("artist.create.completed")
        record.correlation_id = "req-7"

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "artist.create.completed"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "hiddenspins.test"
        assert payload["correlation_id"] == "req-7"

    def test_compact_formatter_folds_chain(self):
        """Test the exception chain is printed root cause first."""
        try:
            try:
                raise ConnectionError("database is locked")
            except ConnectionError as e:
                raise RemoteError("Failed to toggle save", cause=e) from e
        except RemoteError:
            exc_info = sys.exc_info()

        text = CompactExceptionFormatter().formatException(exc_info)
        lines = [line for line in text.splitlines() if line.startswith("╰─►")]

        assert lines == [
            "╰─► ConnectionError: database is locked",
            "╰─► RemoteError: Failed to toggle save",
        ]


class TestLogOperation:
    """Test the log_operation helper."""

    async def test_completed(self, mocker):
        logger = mocker.MagicMock(spec=logging.Logger)

        async with log_operation(logger, "artist.create", created_by="u1"):
            pass

        logger.debug.assert_called_once()
        assert logger.debug.call_args[0][0] == "artist.create.started"
        message = logger.info.call_args[0][0]
        extra = logger.info.call_args[1]["extra"]
        assert message == "artist.create.completed"
        assert extra["created_by"] == "u1"
        assert "duration_ms" in extra

    async def test_domain_failure_is_warning(self, mocker):
        logger = mocker.MagicMock(spec=logging.Logger)

        with pytest.raises(EntityNotFoundError):
            async with log_operation(logger, "save.toggle"):
                raise EntityNotFoundError("Artist", "a1")

        logger.warning.assert_called_once()
        assert logger.warning.call_args[1]["extra"]["error_type"] == "EntityNotFoundError"
        logger.error.assert_not_called()
        logger.info.assert_not_called()

    async def test_unexpected_failure_is_error(self, mocker):
        logger = mocker.MagicMock(spec=logging.Logger)

        with pytest.raises(RuntimeError):
            async with log_operation(logger, "draft.promote"):
                raise RuntimeError("boom")

        logger.error.assert_called_once()
        assert logger.error.call_args[1]["exc_info"] is True
