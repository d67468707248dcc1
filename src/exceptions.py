"""Domain errors raised by services and rendered by the API error handlers."""

from fastapi import status


class AppError(Exception):
    """Base class for errors that map to an `{"ok": false, "message": ...}` response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"
    headers: dict[str, str] | None = None

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AppError):
    """Request was well-formed but a value could not be interpreted."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnauthorizedError(AppError):
    """The request carried no usable credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenError(AppError):
    """Caller is authenticated but does not own the referenced record."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to access this resource"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InternalError(AppError):
    pass


class OAuthProviderError(AppError):
    """A third-party login provider returned an error or an unusable profile."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Login provider request failed"
