"""Observability infrastructure for structured logging."""

from hiddenspins.infrastructure.observability.logger_template import (
    get_module_logger,
    log_operation,
)
from hiddenspins.infrastructure.observability.logging import (
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)
from hiddenspins.infrastructure.observability.middleware import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "configure_logging",
    "get_correlation_id",
    "get_module_logger",
    "log_operation",
    "set_correlation_id",
]
