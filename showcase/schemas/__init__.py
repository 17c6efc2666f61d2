"""
Pydantic schemas for request/response validation.
"""

from .auth import (
    LoginRequest,
    LoginResponse,
    TokenResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
)
from .user import (
    UserCreate,
    UserUpdate,
    UserResponse,
    UserListResponse,
    PasswordChangeRequest,
)
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchParams,
)
from .announcement import (
    AnnouncementCreate,
    AnnouncementUpdate,
    AnnouncementResponse,
    AnnouncementListResponse,
)
from .site_settings import SiteSettingsUpdate, SiteSettingsResponse
from .photo import (
    ImageValidationResult,
    ImageListValidation,
    RestoreReadiness,
    UploadedPhoto,
    PhotoUploadResult,
    PhotoOrderRequest,
    PropertyPhotosResponse,
    PhotoBackup,
    RestoreResult,
    BatchRestoreResult,
    AssetRecoveryResult,
    RestorationReport,
)
from .error import ErrorResponse

__all__ = [
    # Authentication
    "LoginRequest",
    "LoginResponse",
    "TokenResponse",
    "RefreshTokenRequest",
    "AccessTokenResponse",

    # User
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserListResponse",
    "PasswordChangeRequest",

    # Property
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyListResponse",
    "PropertySearchParams",

    # Announcement
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementResponse",
    "AnnouncementListResponse",

    # Site settings
    "SiteSettingsUpdate",
    "SiteSettingsResponse",

    # Photos
    "ImageValidationResult",
    "ImageListValidation",
    "RestoreReadiness",
    "UploadedPhoto",
    "PhotoUploadResult",
    "PhotoOrderRequest",
    "PropertyPhotosResponse",
    "PhotoBackup",
    "RestoreResult",
    "BatchRestoreResult",
    "AssetRecoveryResult",
    "RestorationReport",

    # Errors
    "ErrorResponse",
]
