"""
Domain exceptions raised by the service layer.

Each exception carries the HTTP status it maps to; the handlers registered in
storefront.main render every one of them as ``{"error": message}``.
"""
from fastapi import status


class StorefrontError(Exception):
    """
    Base class for errors that are safe to show to the caller.
    """
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be processed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(StorefrontError):
    """Missing or malformed required field"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields"


class WeakPasswordError(ValidationError):
    default_message = "Password must be at least 6 characters"


class AuthenticationError(StorefrontError):
    """No session, or the session/credentials are invalid"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthorizationError(StorefrontError):
    """Valid session acting on another tenant's record"""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(StorefrontError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(StorefrontError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DuplicateEmailError(ConflictError):
    default_message = "Email already registered"


class UpstreamError(StorefrontError):
    """Object storage or database failure; message is never the raw cause"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"
