"""
Error taxonomy for the dashboard.

Repositories and validators raise these; mutation actions catch them at
their boundary and turn them into a MutationResult.
"""


class DashboardError(Exception):
    """Base exception for dashboard operations."""

    default_message = "Operation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class ValidationError(DashboardError):
    """Malformed input, detected before any persistence call."""

    default_message = "Invalid input"


class NotFoundError(DashboardError):
    """The operation targets an identifier that does not exist."""

    default_message = "Record not found"


class PersistenceError(DashboardError):
    """The backing store rejected the write or was unreachable."""

    default_message = "Storage operation failed"


class UnknownError(DashboardError):
    """Fallback when a caught failure carries no usable message."""

    default_message = "An unexpected error occurred"
