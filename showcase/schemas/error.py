"""
Error response schemas for API documentation.
Mirrors the envelope produced by ErrorHandlerService.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(None, description="Field name that caused the error", examples=["email"])
    message: str = Field(..., description="Human-readable error message", examples=["Invalid email format"])
    type: Optional[str] = Field(None, description="Error type identifier", examples=["value_error"])


class ErrorBody(BaseModel):
    code: str = Field(..., description="Machine readable error code", examples=["NOT_FOUND"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="UTC timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Request identifier for log correlation")
    details: Optional[List[ErrorDetail]] = None


class ErrorResponse(BaseModel):
    """Envelope returned for every failed request."""

    error: ErrorBody


ERROR_DESCRIPTIONS = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    409: "Conflict",
    413: "Payload Too Large",
    422: "Validation Error",
    500: "Internal Server Error",
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """Build a ``responses`` mapping for route decorators."""
    return {
        code: {"model": ErrorResponse, "description": ERROR_DESCRIPTIONS[code]}
        for code in status_codes
        if code in ERROR_DESCRIPTIONS
    }


def get_common_error_responses() -> Dict[int, Dict[str, Any]]:
    return get_error_responses(400, 422, 500)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    return get_error_responses(400, 401, 403, 404, 422, 500)
