"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from showcase.config import settings
from showcase.database import (
    AsyncSessionLocal,
    create_tables,
    test_database_connection,
    close_db_connection,
)
from showcase.routers import (
    auth_router,
    users_router,
    properties_router,
    photos_router,
    announcements_router,
    site_settings_router,
)
from showcase.utils.exceptions import APIException
from showcase.services.auth import AuthService
from showcase.services.error_handler import ErrorHandlerService
from showcase.middleware import RequestLoggingMiddleware

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO)
logger = logging.getLogger(__name__)


async def bootstrap_owner() -> None:
    """Create the owner account from settings when configured."""
    if not settings.owner_password:
        return
    async with AsyncSessionLocal() as session:
        try:
            await AuthService(session).ensure_owner_account()
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Failed to create owner account: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    db_connected = await test_database_connection()
    if db_connected:
        await create_tables()
        await bootstrap_owner()
    else:
        logger.error("Failed to connect to database on startup")

    yield

    logger.info("Shutting down application")
    await close_db_connection()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    API behind a real-estate showcase website.

    ## Features

    * **Catalog**: Published property listings with search, filters and featured shortcuts
    * **Photos**: Validated uploads, ordering, JSON backups and restore from disk
    * **Announcements**: Timed promotional posts shown inside their active window
    * **Dashboard**: Staff management of listings, users and site branding

    ## Authentication

    Dashboard endpoints require a staff account. Use the `/api/v1/auth/login` endpoint to obtain a JWT token,
    then include it in the Authorization header as `Bearer <token>`.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Login and token management"},
        {"name": "Users", "description": "Staff management of accounts"},
        {"name": "Properties", "description": "Property catalog and listing management"},
        {"name": "Photos", "description": "Property photo upload, validation and restore"},
        {"name": "Announcements", "description": "Timed promotional posts"},
        {"name": "Site Settings", "description": "Branding and contact information"},
        {"name": "Health", "description": "Service health endpoints"},
    ],
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

app.add_middleware(
    RequestLoggingMiddleware,
    max_request_size=settings.max_request_size,
    enable_request_logging=not settings.is_testing
)

# Include API routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(users_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(photos_router, prefix=settings.api_v1_prefix)
app.include_router(announcements_router, prefix=settings.api_v1_prefix)
app.include_router(site_settings_router, prefix=settings.api_v1_prefix)

# Uploaded media and the static image directory
app.mount("/uploads", StaticFiles(directory=settings.uploads_root, check_dir=False), name="uploads")
app.mount("/images", StaticFiles(directory=settings.images_dir, check_dir=False), name="images")


# Global exception handlers using ErrorHandlerService
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.environment,
        "status": "healthy",
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "api_prefix": settings.api_v1_prefix
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Used by container health checks and load balancers.
    """
    if not await test_database_connection():
        raise HTTPException(status_code=503, detail="Database connection failed")

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "showcase.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
