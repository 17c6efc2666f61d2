"""
Custom exception classes for the Property Showcase API.
Every exception maps to one HTTP status and one machine readable error code.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """
    Base API exception class.

    Subclasses set ``http_status`` and ``code``; both can be overridden per instance.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "Internal server error"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status_code or self.http_status,
            detail=detail or self.default_detail,
            headers=headers
        )
        self.error_code = error_code or self.code


class ValidationError(APIException):
    """Business rule violation; ``field_errors`` become the envelope details."""

    http_status = 422
    code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    resource = "Resource"

    def __init__(self, resource: Optional[str] = None, resource_id: Optional[str] = None):
        detail = f"{resource or self.resource} not found"
        if resource_id:
            detail = f"{detail} with ID: {resource_id}"
        super().__init__(detail)


class UnauthorizedError(APIException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"
    default_detail = "Access forbidden"


class ConflictError(APIException):
    http_status = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    default_detail = "Resource conflict"


class BadRequestError(APIException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"
    default_detail = "Bad request"


class PayloadTooLargeError(APIException):
    http_status = 413
    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, size: int, max_size: int):
        super().__init__(f"Request size {size} bytes exceeds maximum allowed size {max_size} bytes")


# Authentication
class InvalidCredentialsError(UnauthorizedError):
    default_detail = "Invalid username or password"


class TokenExpiredError(UnauthorizedError):
    default_detail = "Token has expired"


class InvalidTokenError(UnauthorizedError):
    default_detail = "Invalid token"


class InactiveUserError(ForbiddenError):
    default_detail = "User account is inactive"


class InsufficientPermissionsError(ForbiddenError):
    """Raised when the caller's role does not allow the action."""

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


# Catalog resources
class PropertyNotFoundError(NotFoundError):
    resource = "Property"

    def __init__(self, property_id: str):
        super().__init__(resource_id=property_id)


class AnnouncementNotFoundError(NotFoundError):
    resource = "Announcement"

    def __init__(self, announcement_id: str):
        super().__init__(resource_id=announcement_id)


class UserNotFoundError(NotFoundError):
    resource = "User"

    def __init__(self, user_id: str):
        super().__init__(resource_id=user_id)


class PhotoNotFoundError(NotFoundError):
    """Raised when a property does not reference the given photo."""

    resource = "Photo"

    def __init__(self, reference: str):
        super().__init__(resource_id=reference)


class DuplicateResourceError(ConflictError):
    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} with identifier '{identifier}' already exists")


class ResourceLimitExceededError(BadRequestError):
    def __init__(self, resource: str, limit: int):
        super().__init__(f"{resource} limit exceeded (maximum: {limit})")


# Uploaded files
class UnsupportedFileTypeError(BadRequestError):
    def __init__(self, file_type: str, supported_types: List[str]):
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {', '.join(supported_types)}")


class FileSizeExceededError(BadRequestError):
    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")
