"""Shared logger utilities.

USAGE:
    from hiddenspins.infrastructure.observability.logger_template import (
        get_module_logger,
        log_operation,
    )

    logger = get_module_logger(__name__)

    async with log_operation(logger, "artist.create", user_id="uid-1"):
        await store.create_document(...)
"""

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from hiddenspins.domain.exceptions import DomainException


def get_module_logger(name: str) -> logging.Logger:
    """Get logger for module (use __name__)."""
    return logging.getLogger(name)


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


# Yo, wrap every store write in this. It logs `{operation}.started`, then `.completed` or
# `.failed` with duration_ms, and always re-raises. The **context kwargs become `extra` fields,
# so never pass keys that clash with LogRecord attributes ("name", "message", "args", ...).
# Expected domain outcomes (NotFound, Validation, ...) are logged at WARNING without a
# traceback; anything else is an ERROR with the full chain.
@asynccontextmanager
async def log_operation(
    logger: logging.Logger,
    operation: str,
    **context: Any,
) -> AsyncIterator[None]:
    """Log operation start/end with automatic timing.

    Args:
        logger: Logger instance from get_module_logger()
        operation: Operation name (e.g. "draft.promote")
        **context: Extra fields for all three log lines

    Example:
        >>> async with log_operation(logger, "save.toggle", artist_id="a1"):
        ...     await store.update_document(...)

        # DEBUG: save.toggle.started {"artist_id": "a1"}
        # INFO:  save.toggle.completed {"artist_id": "a1", "duration_ms": 12}
    """
    start = time.perf_counter()
    logger.debug(f"{operation}.started", extra=context)

    try:
        yield
    except DomainException as e:
        logger.warning(
            f"{operation}.failed",
            extra={
                **context,
                "duration_ms": _elapsed_ms(start),
                "error": e.message,
                "error_type": type(e).__name__,
            },
        )
        raise
    except Exception as e:
        logger.error(
            f"{operation}.failed",
            extra={
                **context,
                "duration_ms": _elapsed_ms(start),
                "error": str(e),
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        raise

    logger.info(
        f"{operation}.completed",
        extra={**context, "duration_ms": _elapsed_ms(start)},
    )
