"""
Typed errors raised by the Task Hub core.

Each error carries the HTTP status code and machine-readable ``code`` that
the Flask error handler in :mod:`taskhub` renders.  Errors are raised where
a problem is detected and propagate unchanged to that handler, which is the
only place they are translated into a response.
"""

from __future__ import annotations


class TaskHubError(Exception):
    """Base class for errors that map onto a client-facing HTTP response."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class NotFoundError(TaskHubError):
    """A referenced task or user does not exist."""

    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"


class UnauthorizedError(TaskHubError):
    """Identity is missing, malformed or not verifiable."""

    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized access"


class ForbiddenError(TaskHubError):
    """The caller is authenticated but lacks the required privilege."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden access"


class ValidationError(TaskHubError):
    """Input is malformed or violates a business rule."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class TransactionStateError(RuntimeError):
    """A transaction operation was called while no transaction is active."""
