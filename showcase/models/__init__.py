"""
Database models for the Property Showcase API.
Includes User, Property, Announcement and SiteSettings.
"""

from showcase.models.user import User, UserRole, STAFF_ROLES
from showcase.models.property import Property, PropertyType, ListingType, PropertyStatus
from showcase.models.announcement import Announcement
from showcase.models.site_settings import SiteSettings, DEFAULT_SITE_SETTINGS

__all__ = [
    "User",
    "UserRole",
    "STAFF_ROLES",
    "Property",
    "PropertyType",
    "ListingType",
    "PropertyStatus",
    "Announcement",
    "SiteSettings",
    "DEFAULT_SITE_SETTINGS",
]
