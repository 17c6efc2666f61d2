"""
Site settings service for branding and contact information.
"""

from pathlib import Path
from typing import Optional
import logging

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.config import settings
from showcase.models.site_settings import SiteSettings
from showcase.repositories.site_settings import SiteSettingsRepository
from showcase.schemas.site_settings import SiteSettingsUpdate
from showcase.services.photo_upload import save_validated_image
from showcase.utils.exceptions import APIException, BadRequestError
from showcase.utils.file_utils import FileStorage

logger = logging.getLogger(__name__)

BRANDING_URL_PREFIX = "/uploads/branding/"

# Columns that cannot be cleared
_REQUIRED_FIELDS = ("company_name", "contact_email", "contact_phone", "address")


class SiteSettingsService:

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.settings_repo = SiteSettingsRepository(db_session)
        self._storage = storage

    @property
    def storage(self) -> FileStorage:
        if self._storage is None:
            self._storage = FileStorage(settings.branding_dir)
        return self._storage

    async def get_settings(self) -> SiteSettings:
        return await self.settings_repo.get_or_create()

    async def update_settings(self, data: SiteSettingsUpdate) -> SiteSettings:
        """Merge the sent fields into the stored settings; the last write wins."""
        changes = data.model_dump(exclude_unset=True)
        for field in _REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                changes.pop(field)

        try:
            updated = await self.settings_repo.merge_update(changes)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update site settings: {e}")
            raise BadRequestError(f"Failed to update site settings: {str(e)}")

        logger.info(f"Site settings updated: {', '.join(sorted(changes)) or 'no changes'}")
        return updated

    async def upload_logo(self, file: UploadFile) -> SiteSettings:
        """Store a validated logo image and point ``logo_url`` at it."""
        current = await self.settings_repo.get_or_create()
        previous_logo = current.logo_url

        file_path, _, _ = await save_validated_image(file, self.storage, prefix="logo", resize=False)
        logo_url = f"{BRANDING_URL_PREFIX}{file_path.name}"

        try:
            updated = await self.settings_repo.merge_update({"logo_url": logo_url})
        except Exception:
            self.storage.delete_file(file_path)
            raise

        if previous_logo and previous_logo.startswith(BRANDING_URL_PREFIX) and previous_logo != logo_url:
            self.storage.delete_file(self.storage.resolve(Path(previous_logo).name))

        logger.info(f"Site logo updated: {logo_url}")
        return updated
