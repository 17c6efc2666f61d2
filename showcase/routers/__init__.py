"""
API route handlers for the Property Showcase API.
Provides organized routing for different API endpoints.
"""

from .auth import router as auth_router
from .users import router as users_router
from .properties import router as properties_router
from .photos import router as photos_router
from .announcements import router as announcements_router
from .site_settings import router as site_settings_router

__all__ = [
    "auth_router",
    "users_router",
    "properties_router",
    "photos_router",
    "announcements_router",
    "site_settings_router",
]
