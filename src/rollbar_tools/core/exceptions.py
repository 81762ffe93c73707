"""Exception hierarchy for rollbar-tools."""


class RollbarError(Exception):
    """Base exception for all rollbar-tools errors."""

    def __init__(self, message: str, operation: str | None = None, details: dict | None = None):
        """Initialize RollbarError.

        Args:
            message: Error message
            operation: Operation label (e.g., 'item_by_counter')
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation."""
        if self.operation:
            return f"{self.operation}: {self.message}"
        return self.message


class TransportError(RollbarError):
    """The request could not be sent or no response was received."""


class StatusError(RollbarError):
    """The response status was not 2xx."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        operation: str | None = None,
        details: dict | None = None,
    ):
        """Initialize StatusError.

        Args:
            message: Error message
            status_code: HTTP status code
            operation: Operation label
            details: Additional error details
        """
        super().__init__(message, operation, details)
        self.status_code = status_code


class AuthenticationError(StatusError):
    """Access token rejected (401/403)."""


class NotFoundError(StatusError):
    """Resource not found (404)."""


class DecodeError(RollbarError):
    """Response body does not match the envelope or payload shape."""


class ServiceError(RollbarError):
    """The envelope reported err != 0."""


class MissingResultError(RollbarError):
    """The envelope reported success but carried no result."""


class ValidationError(RollbarError):
    """Validation error for caller input."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        operation: str | None = None,
        details: dict | None = None,
    ):
        """Initialize ValidationError.

        Args:
            message: Error message
            field: Field that failed validation
            operation: Operation label
            details: Additional error details
        """
        super().__init__(message, operation, details)
        self.field = field
