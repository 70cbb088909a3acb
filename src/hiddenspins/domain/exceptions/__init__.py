"""Domain exceptions."""

from enum import Enum
from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so handlers can read it without parsing
    # str(exception). Don't raise this directly - always use a specific subclass so callers can
    # catch precisely (the API layer maps each subclass to its own HTTP status).
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationErrorKind(str, Enum):
    """What exactly was wrong with the user input."""

    MISSING_PLATFORM = "missing_platform"
    INVALID_URL = "invalid_url"
    MISSING_IDENTIFIER = "missing_identifier"


class ValidationError(DomainException):
    """Input validation failed.

    Raised by the normalizer (bad artist submission) and by services that get
    blank ids. Recoverable - the UI shows it inline next to the offending field.

    HTTP Status: 422

    Example:
        raise ValidationError(ValidationErrorKind.MISSING_PLATFORM)
        raise ValidationError(ValidationErrorKind.INVALID_URL, platform="Spotify")
    """

    _DEFAULT_MESSAGES = {
        ValidationErrorKind.MISSING_PLATFORM: "Please enter at least one streaming platform URL",
        ValidationErrorKind.INVALID_URL: "Please enter a valid URL",
        ValidationErrorKind.MISSING_IDENTIFIER: "Artist ID and User ID are required",
    }

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str | None = None,
        platform: str | None = None,
    ) -> None:
        if message is None:
            message = self._DEFAULT_MESSAGES[kind]
            if kind is ValidationErrorKind.INVALID_URL and platform:
                message = f"{message} for {platform}"
        super().__init__(message)
        self.kind = kind
        self.platform = platform


class EntityNotFoundError(DomainException):
    """Raised when a referenced entity vanished from the store."""

    # Yo, this is for "get by ID" operations that must succeed - e.g. toggling save on an artist
    # that someone deleted a second ago. entity_type/entity_id are kept separately so the
    # exception handler can log them structured.
    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class RemoteError(DomainException):
    """The document store or image host failed.

    Not retried automatically - the user retries by repeating the action.
    The original exception is kept on `cause` (and as __cause__ when raised
    with `from`).

    HTTP Status: 502

    Example:
        raise RemoteError("Failed to create artist", cause=exc) from exc
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class PartialFailureError(DomainException):
    """An operation completed only partially and left orphan data behind.

    Hey future me - this is NON-FATAL. Typical case: a draft was published but
    deleting the draft afterwards failed. `result` carries whatever DID succeed
    (the published artist), so callers can carry on and just warn the user.
    """

    def __init__(
        self,
        message: str,
        result: Any = None,
        cause: BaseException | None = None,
        orphan_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.result = result
        self.cause = cause
        self.orphan_id = orphan_id


class ConfigurationError(DomainException):
    """Application misconfiguration.

    Example:
        raise ConfigurationError("ImgBB API key not configured")
    """

    pass


# Shorter alias used throughout the services
NotFoundError = EntityNotFoundError

__all__ = [
    "ConfigurationError",
    "DomainException",
    "EntityNotFoundError",
    "NotFoundError",
    "PartialFailureError",
    "RemoteError",
    "ValidationError",
    "ValidationErrorKind",
]
