"""
Repository layer for data access operations.
"""

from showcase.repositories.base import BaseRepository
from showcase.repositories.property import PropertyRepository, PropertySearchFilters
from showcase.repositories.user import UserRepository
from showcase.repositories.announcement import AnnouncementRepository
from showcase.repositories.site_settings import SiteSettingsRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "UserRepository",
    "AnnouncementRepository",
    "SiteSettingsRepository",
]
