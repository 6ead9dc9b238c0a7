"""
Application errors raised by the resource services.

The HTTP layer maps each error to its status code and renders the
standard ``{"success": false, "message": ...}`` envelope.
"""
from fastapi import status


class AppError(Exception):
    """Base class for errors that surface to API clients."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(AppError):
    """No valid identity was presented."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(AppError):
    """A well-formed identity was denied by an access decision."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"
