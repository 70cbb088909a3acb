"""Error boundary shared by the application services."""

from collections.abc import Iterator
from contextlib import contextmanager

from hiddenspins.domain.exceptions import DomainException, RemoteError


# Hey future me - wrap every store/host call in this. Domain exceptions (NotFound from the
# store, ConfigurationError from the image host, ...) pass through untouched; anything else
# (SQLAlchemy, httpx, a broken SDK) becomes RemoteError so the API layer can map it to 502.
# CancelledError is a BaseException and is NOT caught - cancellation must keep propagating.
@contextmanager
def remote_call(message: str) -> Iterator[None]:
    """Re-raise non-domain exceptions as RemoteError(message)."""
    try:
        yield
    except DomainException:
        raise
    except Exception as exc:
        raise RemoteError(message, cause=exc) from exc
