"""
Site settings repository managing the singleton branding row.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from showcase.repositories.base import BaseRepository
from showcase.models.site_settings import SiteSettings, DEFAULT_SITE_SETTINGS
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)


class SiteSettingsRepository(BaseRepository[SiteSettings]):
    """Repository for the single site settings row."""

    def __init__(self, db: AsyncSession):
        super().__init__(SiteSettings, db)

    async def get_or_create(self) -> SiteSettings:
        """Return the settings row, creating it with defaults on first access."""
        query = select(SiteSettings).order_by(SiteSettings.created_at).limit(1)
        site_settings = (await self.db.execute(query)).scalar_one_or_none()
        if site_settings is not None:
            return site_settings

        logger.info("Creating default site settings")
        return await self.create(dict(DEFAULT_SITE_SETTINGS))

    async def merge_update(self, changes: Dict[str, Any]) -> SiteSettings:
        """Apply a partial update; keys not present keep their stored value."""
        site_settings = await self.get_or_create()
        return await self.update(site_settings.id, changes, skip_none=False)
