"""Custom errors and exceptions raised by PlayerDeck."""

from __future__ import annotations


class PlayerDeckError(Exception):
    """Custom Exception for all errors."""

    error_code = 0


class ValidationError(PlayerDeckError):
    """Error raised when a raw server payload does not match its schema."""

    error_code = 1

    def __init__(self, message: str, errors: list[dict[str, object]] | None = None) -> None:
        """Initialize."""
        super().__init__(message)
        self.errors = errors or []


class BackendError(PlayerDeckError):
    """Error raised when the server or the transport reports a failure."""

    error_code = 2

    def __init__(self, message: str, status: int | None = None, code: int | None = None) -> None:
        """Initialize."""
        super().__init__(message)
        self.message = message
        # HTTP status of the response (None when the request never completed)
        self.status = status
        # protocol level error code (Subsonic error codes)
        self.code = code


class MediaNotFoundError(BackendError):
    """Error raised when the server does not know the requested item."""

    error_code = 3


class QueueIndexError(PlayerDeckError):
    """Error raised when a queue operation references an unknown index or uniqueId."""

    error_code = 4


class PartialResolutionWarning(PlayerDeckError, Warning):
    """Raised (reported) when a queue restore could not resolve all song ids."""

    error_code = 5

    def __init__(self, dropped_ids: list[str]) -> None:
        """Initialize."""
        super().__init__(f"Unable to resolve {len(dropped_ids)} song(s): {', '.join(dropped_ids)}")
        self.dropped_ids = dropped_ids


class UnsupportedOperation(PlayerDeckError):
    """Error raised when an operation is not available on a backend."""

    error_code = 6


class OperationSuperseded(PlayerDeckError):
    """Error raised when the result of an in-flight operation is discarded."""

    error_code = 7


class InvalidCommand(PlayerDeckError):
    """Error raised when an unknown or malformed command is received."""

    error_code = 8
