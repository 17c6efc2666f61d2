"""
FastAPI dependency injection utilities for authentication and services.
Provides reusable dependencies for route protection and user extraction.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from showcase.database import get_db
from showcase.models.user import User
from showcase.services.auth import AuthService
from showcase.services.user import UserService
from showcase.services.property import PropertyService
from showcase.services.announcement import AnnouncementService
from showcase.services.site_settings import SiteSettingsService
from showcase.services.photo_upload import PhotoUploadService
from showcase.services.photo_restore import PhotoRestoreService
from showcase.utils.exceptions import (
    APIException,
    UnauthorizedError,
    InactiveUserError,
    InsufficientPermissionsError
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_announcement_service(db: AsyncSession = Depends(get_db)) -> AnnouncementService:
    return AnnouncementService(db)


async def get_site_settings_service(db: AsyncSession = Depends(get_db)) -> SiteSettingsService:
    return SiteSettingsService(db)


async def get_photo_upload_service(db: AsyncSession = Depends(get_db)) -> PhotoUploadService:
    return PhotoUploadService(db)


async def get_photo_restore_service(db: AsyncSession = Depends(get_db)) -> PhotoRestoreService:
    return PhotoRestoreService(db)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from JWT token.

    Raises:
        UnauthorizedError: If no token provided or token is invalid
        TokenExpiredError: If token is expired
        InactiveUserError: If user account is inactive
    """
    if not credentials:
        raise UnauthorizedError("Authentication token required")

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except APIException:
        raise
    except Exception as e:
        raise UnauthorizedError(f"Authentication failed: {str(e)}")


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise InactiveUserError()

    return current_user


async def get_current_staff_user(
    current_user: User = Depends(get_current_active_user)
) -> User:
    """
    Get current user with dashboard access (admin or owner).

    Raises:
        InsufficientPermissionsError: If user is a plain user
    """
    if not current_user.is_staff:
        raise InsufficientPermissionsError("access the admin dashboard")

    return current_user


# Optional authentication dependency (for public endpoints that can benefit from user context)
async def get_optional_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if token is provided and valid, otherwise return None.
    """
    if not credentials:
        return None

    try:
        return await auth_service.get_current_user(credentials.credentials)
    except APIException:
        return None
