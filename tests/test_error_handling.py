"""
Tests for error handling and the request middleware.
Tests custom exceptions, error response formatting and the request size limit.
"""

import json
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import IntegrityError, OperationalError

from showcase.middleware import RequestLoggingMiddleware
from showcase.services.error_handler import ErrorHandlerService
from showcase.utils.exceptions import (
    APIException,
    BadRequestError,
    ConflictError,
    DuplicateResourceError,
    FileSizeExceededError,
    ForbiddenError,
    NotFoundError,
    PayloadTooLargeError,
    PropertyNotFoundError,
    UnauthorizedError,
    ValidationError,
)


class TestErrorHandlerService:
    """Test error handler service functionality."""

    def test_format_error_response(self):
        response = ErrorHandlerService.format_error_response(
            error_code="TEST_ERROR",
            message="Test error message",
            details=[{"field": "test", "message": "Test field error"}],
            request_id="test123"
        )

        assert response["error"]["code"] == "TEST_ERROR"
        assert response["error"]["message"] == "Test error message"
        assert response["error"]["request_id"] == "test123"
        assert response["error"]["details"][0]["field"] == "test"
        assert response["error"]["timestamp"].endswith("Z")

    def test_handle_api_exception(self):
        response = ErrorHandlerService.handle_api_exception(ValidationError("Test validation error"))

        assert response.status_code == 422
        response_data = json.loads(response.body)
        assert response_data["error"]["code"] == "VALIDATION_ERROR"
        assert response_data["error"]["message"] == "Test validation error"
        assert response_data["error"]["request_id"]

    def test_handle_validation_error(self):
        """Field paths are joined into a readable location."""
        mock_error = Mock()
        mock_error.errors.return_value = [
            {"loc": ("body", "price"), "msg": "Input should be greater than 0", "type": "greater_than"},
            {"loc": ("query", "page"), "msg": "Input should be a valid integer", "type": "int_parsing"},
        ]

        response = ErrorHandlerService.handle_validation_error(mock_error)

        assert response.status_code == 422
        details = json.loads(response.body)["error"]["details"]
        assert [d["field"] for d in details] == ["body -> price", "query -> page"]

    def test_handle_database_errors(self):
        integrity = ErrorHandlerService.handle_database_error(IntegrityError("statement", {}, Exception("UNIQUE constraint failed")))
        operational = ErrorHandlerService.handle_database_error(OperationalError("statement", {}, Exception("locked")))

        assert integrity.status_code == 409
        assert json.loads(integrity.body)["error"]["code"] == "INTEGRITY_ERROR"
        assert operational.status_code == 500
        assert json.loads(operational.body)["error"]["code"] == "DATABASE_ERROR"

    def test_handle_unexpected_error_hides_details(self):
        response = ErrorHandlerService.handle_unexpected_error(Exception("secret connection string"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert "secret" not in body["error"]["message"]


class TestExceptions:

    @pytest.mark.parametrize("exception, status_code, code", [
        (ValidationError("bad"), 422, "VALIDATION_ERROR"),
        (NotFoundError("Thing", "1"), 404, "NOT_FOUND"),
        (UnauthorizedError(), 401, "UNAUTHORIZED"),
        (ForbiddenError(), 403, "FORBIDDEN"),
        (ConflictError("taken"), 409, "CONFLICT"),
        (BadRequestError("nope"), 400, "BAD_REQUEST"),
        (PayloadTooLargeError(10, 5), 413, "PAYLOAD_TOO_LARGE"),
    ])
    def test_status_codes(self, exception: APIException, status_code: int, code: str):
        assert exception.status_code == status_code
        assert exception.error_code == code

    def test_messages(self):
        assert PropertyNotFoundError("abc").detail == "Property not found with ID: abc"
        assert DuplicateResourceError("User", "sara").detail == "User with identifier 'sara' already exists"
        assert isinstance(FileSizeExceededError(10, 5), BadRequestError)
        assert UnauthorizedError().headers == {"WWW-Authenticate": "Bearer"}


class TestRequestLoggingMiddleware:

    @pytest.fixture
    def small_app(self) -> FastAPI:
        test_app = FastAPI()
        test_app.add_middleware(RequestLoggingMiddleware, max_request_size=100, enable_request_logging=True)

        @test_app.post("/echo")
        async def echo(data: dict):
            return data

        return test_app

    async def test_request_id_header(self, small_app):
        async with AsyncClient(transport=ASGITransport(app=small_app), base_url="http://test") as test_client:
            response = await test_client.post("/echo", json={"a": 1})

        assert response.status_code == 200
        assert len(response.headers["X-Request-ID"]) == 8

    async def test_request_too_large(self, small_app):
        async with AsyncClient(transport=ASGITransport(app=small_app), base_url="http://test") as test_client:
            response = await test_client.post("/echo", json={"data": "x" * 500})

        assert response.status_code == 413
        body = response.json()
        assert body["error"]["code"] == "PAYLOAD_TOO_LARGE"
        assert body["error"]["request_id"] == response.headers["X-Request-ID"]

    async def test_malformed_content_length(self, small_app):
        async with AsyncClient(transport=ASGITransport(app=small_app), base_url="http://test") as test_client:
            response = await test_client.post(
                "/echo",
                content=b"{}",
                headers={"content-type": "application/json", "content-length": "abc"}
            )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "BAD_REQUEST"
