"""
Error types raised by the timesheet engine and service layer.

The HTTP layer maps them to status codes in app.main:
ValidationError/InvalidDate -> 400, NotFoundError -> 404, StorageError -> 500.
"""


class TimesheetError(Exception):
    """Base exception for timesheet errors."""

    pass


class ValidationError(TimesheetError):
    """Missing or malformed input. Client error, never retried."""

    pass


class InvalidDate(ValidationError):
    """Raised when a value cannot be parsed as a calendar date."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid date: {value!r} (expected YYYY-MM-DD)")


class NotFoundError(TimesheetError):
    """Requested entry or timesheet does not exist for this user."""

    pass


class StorageError(TimesheetError):
    """
    A database operation failed.

    Attributes:
        operation: Service operation that was running
        original_error: Underlying exception from the storage layer
    """

    def __init__(self, operation: str, original_error: Exception):
        self.operation = operation
        self.original_error = original_error
        super().__init__(f"Storage failure during '{operation}': {original_error}")
