"""
Announcement service for timed promotional posts.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.config import settings
from showcase.models.announcement import Announcement
from showcase.models.user import User
from showcase.repositories.announcement import AnnouncementRepository
from showcase.schemas.announcement import AnnouncementCreate, AnnouncementUpdate
from showcase.services.photo_upload import save_validated_image
from showcase.utils.exceptions import (
    APIException,
    AnnouncementNotFoundError,
    BadRequestError,
    ValidationError,
)
from showcase.utils.file_utils import FileStorage

logger = logging.getLogger(__name__)

ANNOUNCEMENT_IMAGES_URL_PREFIX = "/uploads/announcements/"


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Store window bounds in UTC; naive values are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AnnouncementService:
    """Service for creating announcements and deciding which ones the public sees."""

    def __init__(self, db_session: AsyncSession, storage: Optional[FileStorage] = None):
        self.db = db_session
        self.announcement_repo = AnnouncementRepository(db_session)
        self._storage = storage

    @property
    def storage(self) -> FileStorage:
        if self._storage is None:
            self._storage = FileStorage(settings.announcement_images_dir)
        return self._storage

    async def list_visible(self, highlighted_only: bool = False, limit: int = 50) -> List[Announcement]:
        return await self.announcement_repo.get_visible(highlighted_only=highlighted_only, limit=limit)

    async def list_all(self, skip: int = 0, limit: int = 100) -> Tuple[List[Announcement], int]:
        announcements = await self.announcement_repo.get_multi(skip=skip, limit=limit, order_by="-created_at")
        total = await self.announcement_repo.count()
        return announcements, total

    async def get_announcement(self, announcement_id: uuid.UUID, public: bool = True) -> Announcement:
        """
        Get an announcement; public reads only find visible ones.

        Raises:
            AnnouncementNotFoundError: If it doesn't exist or is not visible
        """
        announcement = await self.announcement_repo.get_by_id(announcement_id)
        if not announcement or (public and not announcement.is_visible()):
            raise AnnouncementNotFoundError(str(announcement_id))
        return announcement

    async def create_announcement(self, data: AnnouncementCreate, current_user: User) -> Announcement:
        create_data = data.model_dump()
        create_data["start_date"] = _to_utc(create_data.get("start_date"))
        create_data["end_date"] = _to_utc(create_data.get("end_date"))
        create_data["created_by"] = current_user.id

        try:
            announcement = await self.announcement_repo.create(create_data)
        except Exception as e:
            logger.error(f"Failed to create announcement: {e}")
            raise BadRequestError(f"Failed to create announcement: {str(e)}")

        logger.info(f"Announcement created by {current_user.username}: {announcement.title}")
        return announcement

    async def update_announcement(self, announcement_id: uuid.UUID, data: AnnouncementUpdate) -> Announcement:
        """
        Apply a partial update. Fields sent as null are cleared.

        Raises:
            AnnouncementNotFoundError: If it doesn't exist
            ValidationError: If the resulting window ends before it starts
        """
        announcement = await self.get_announcement(announcement_id, public=False)
        changes: Dict[str, Any] = data.model_dump(exclude_unset=True)

        for field in ("start_date", "end_date"):
            if field in changes:
                changes[field] = _to_utc(changes[field])

        start_date = changes.get("start_date", announcement.start_date)
        end_date = changes.get("end_date", announcement.end_date)
        if start_date and end_date and _to_utc(end_date) < _to_utc(start_date):
            raise ValidationError("end_date must not be before start_date")

        for field in ("title", "content", "is_active", "is_featured", "is_highlighted"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        try:
            updated = await self.announcement_repo.update(announcement_id, changes, skip_none=False)
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to update announcement {announcement_id}: {e}")
            raise BadRequestError(f"Failed to update announcement: {str(e)}")

        logger.info(f"Announcement updated: {announcement_id}")
        return updated

    async def delete_announcement(self, announcement_id: uuid.UUID) -> None:
        announcement = await self.get_announcement(announcement_id, public=False)
        image = announcement.image
        await self.announcement_repo.delete(announcement_id)
        self._delete_stored_image(image)
        logger.info(f"Announcement deleted: {announcement_id}")

    async def upload_image(self, announcement_id: uuid.UUID, file: UploadFile) -> Announcement:
        """
        Store a new image for an announcement, replacing the previous one.

        Raises:
            AnnouncementNotFoundError: If it doesn't exist
            ValidationError: If the file is rejected
        """
        announcement = await self.get_announcement(announcement_id, public=False)
        previous_image = announcement.image

        file_path, _, _ = await save_validated_image(file, self.storage, prefix="announcement")
        image_url = f"{ANNOUNCEMENT_IMAGES_URL_PREFIX}{file_path.name}"

        try:
            updated = await self.announcement_repo.update(announcement_id, {"image": image_url})
        except Exception:
            self.storage.delete_file(file_path)
            raise

        if previous_image != image_url:
            self._delete_stored_image(previous_image)

        logger.info(f"Announcement {announcement_id} image set to {image_url}")
        return updated

    def _delete_stored_image(self, image: Optional[str]) -> None:
        if image and image.startswith(ANNOUNCEMENT_IMAGES_URL_PREFIX):
            self.storage.delete_file(self.storage.resolve(Path(image).name))
