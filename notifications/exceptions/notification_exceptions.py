"""Custom exceptions for the notification store, access layer and fan-out."""

from typing import Any


class NotificationError(Exception):
    """Base exception for notification subsystem errors."""

    def __init__(self, message: str, status_code: int = 500):
        """Initialize notification error.

        Args:
            message: Error message
            status_code: HTTP status code the error maps to
        """
        self.status_code = status_code
        super().__init__(message)


class NotificationValidationError(NotificationError):
    """Notification data is malformed or missing required fields (400)."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        """Initialize validation error.

        Args:
            message: Error message
            errors: Field-level errors in pydantic's ``errors()`` format
        """
        self.errors = errors or []
        super().__init__(message, status_code=400)


class NotificationNotFoundError(NotificationError):
    """Notification not found for the requesting tenant and user (404)."""

    def __init__(self, nuid: str, cuid: str | None = None):
        """Initialize not found error.

        Args:
            nuid: Public identifier of the missing notification
            cuid: Tenant the lookup was scoped to
        """
        self.nuid = nuid
        self.cuid = cuid
        super().__init__(f"Notification {nuid} not found", status_code=404)


class TenantValidationError(NotificationError):
    """Tenant identifier does not match the accepted format (400)."""

    def __init__(self, cuid: str | None):
        """Initialize tenant validation error.

        Args:
            cuid: The rejected tenant identifier
        """
        self.cuid = cuid
        super().__init__("Invalid tenant ID format", status_code=400)


class SerializationError(NotificationError):
    """Payload cannot be serialized for publishing."""

    def __init__(self, message: str):
        """Initialize serialization error.

        Args:
            message: Description of the serialization failure
        """
        super().__init__(message, status_code=500)


class StoreError(NotificationError):
    """Underlying database or driver failure (503)."""

    def __init__(self, operation: str, message: str):
        """Initialize store error.

        Args:
            operation: DAO operation that failed
            message: Original driver error message
        """
        self.operation = operation
        super().__init__(f"{operation} failed: {message}", status_code=503)
