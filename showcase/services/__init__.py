"""
Service layer for business logic implementation.
Contains services for authentication, catalog management, the photo pipeline and error handling.
"""

from .auth import AuthService
from .user import UserService
from .property import PropertyService
from .announcement import AnnouncementService
from .site_settings import SiteSettingsService
from .image_validator import ImageValidator
from .photo_backup import PhotoBackupService
from .photo_upload import PhotoUploadService
from .photo_restore import PhotoRestoreService
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "UserService",
    "PropertyService",
    "AnnouncementService",
    "SiteSettingsService",
    "ImageValidator",
    "PhotoBackupService",
    "PhotoUploadService",
    "PhotoRestoreService",
    "ErrorHandlerService"
]
