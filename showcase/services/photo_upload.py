"""
Photo upload service for property galleries.
Validates, stores and optionally resizes uploaded images, then appends their paths to the property.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple
import logging
import uuid

from fastapi import UploadFile
from PIL import UnidentifiedImageError
from sqlalchemy.ext.asyncio import AsyncSession

from showcase.config import settings
from showcase.models.property import Property
from showcase.repositories.property import PropertyRepository
from showcase.schemas.photo import (
    ImageListValidation,
    PhotoUploadResult,
    PropertyPhotosResponse,
    UploadedPhoto,
)
from showcase.services.image_validator import ImageValidator
from showcase.services.photo_backup import PhotoBackupService
from showcase.utils.exceptions import (
    APIException,
    PhotoNotFoundError,
    PropertyNotFoundError,
    ResourceLimitExceededError,
    ValidationError,
)
from showcase.utils.file_utils import FileStorage, FileValidator, ImageProcessor

logger = logging.getLogger(__name__)


async def save_validated_image(
    file: UploadFile,
    storage: FileStorage,
    prefix: str = "photo",
    resize: Optional[bool] = None
) -> Tuple[Path, int, int]:
    """
    Validate an uploaded image and store it under a generated name.

    Returns:
        Tuple of (stored path, width, height)

    Raises:
        ValidationError: If the file is rejected or cannot be processed
    """
    width, height, _, content = await FileValidator.validate_upload_file(file)

    filename = storage.generate_unique_filename(file.filename, prefix=prefix)
    file_path = await storage.save_bytes(content, filename)

    if settings.resize_uploads if resize is None else resize:
        try:
            width, height = ImageProcessor.resize_image(file_path)
        except (OSError, UnidentifiedImageError, ValueError) as e:
            storage.delete_file(file_path)
            raise ValidationError(f"Failed to process image: {str(e)}")

    return file_path, width, height


def generate_alt_text(title: str, position: int) -> str:
    clean_title = " ".join((title or "").split()) or "listing"
    return f"Property {clean_title} - Image {position}"


class PhotoUploadService:
    """
    Service for managing the image list of a property.
    File writes happen before the database write; the restore service repairs drift.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        storage: Optional[FileStorage] = None,
        validator: Optional[ImageValidator] = None,
        backups: Optional[PhotoBackupService] = None
    ):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.storage = storage or FileStorage(settings.property_photos_dir)
        self.validator = validator or ImageValidator(uploads_dir=self.storage.base_dir)
        self.backups = backups or PhotoBackupService()

    async def upload_property_photos(self, property_id: uuid.UUID, files: List[UploadFile]) -> PhotoUploadResult:
        """
        Upload photos for a property and append them to its image list.

        A rejected file is reported in ``errors`` and does not stop the others.

        Raises:
            PropertyNotFoundError: If the property doesn't exist
            ValidationError: If no files were sent or none could be stored
            ResourceLimitExceededError: If too many files were sent
        """
        property_obj = await self._get_property(property_id)

        if not files:
            raise ValidationError("No files provided")
        if len(files) > settings.max_files_per_upload:
            raise ResourceLimitExceededError("Photo upload", settings.max_files_per_upload)

        current_images = list(property_obj.images or [])
        await self._snapshot(property_id, current_images, "pre-upload")

        uploaded: List[UploadedPhoto] = []
        errors: List[str] = []
        field_errors: List[Dict[str, str]] = []
        for file in files:
            position = len(current_images) + len(uploaded) + 1
            try:
                uploaded.append(await self._store_photo(file, property_obj.title, position))
            except APIException as e:
                logger.warning(f"Rejected photo {file.filename} for property {property_id}: {e.detail}")
                errors.append(f"{file.filename}: {e.detail}")
                field_errors.append({"field": file.filename or "file", "message": e.detail, "type": e.error_code.lower()})
            except OSError as e:
                logger.error(f"Failed to store photo {file.filename} for property {property_id}: {e}", exc_info=True)
                errors.append(f"{file.filename}: {str(e)}")
                field_errors.append({"field": file.filename or "file", "message": str(e), "type": "storage_error"})

        if not uploaded:
            raise ValidationError(f"All uploads failed: {'; '.join(errors)}", field_errors=field_errors)

        images = current_images + [photo.url for photo in uploaded]
        updated = await self.property_repo.update_images(property_id, images)

        logger.info(
            f"Uploaded {len(uploaded)} photos for property {property_id} ({len(errors)} rejected)",
            extra={"property_id": str(property_id), "uploaded": len(uploaded), "rejected": len(errors)}
        )
        return PhotoUploadResult(
            property_id=property_id,
            uploaded=uploaded,
            images=list(updated.images),
            errors=errors
        )

    async def _store_photo(self, file: UploadFile, title: str, position: int) -> UploadedPhoto:
        file_path, width, height = await save_validated_image(file, self.storage)

        check = self.validator.validate_image_exists(file_path.name)
        if not check.is_valid:
            self.storage.delete_file(file_path)
            raise ValidationError(check.error or "Stored file failed validation")

        return UploadedPhoto(
            filename=file_path.name,
            url=self.validator.public_url(file_path.name),
            size=check.file_size or 0,
            width=width,
            height=height,
            alt_text=generate_alt_text(title, position)
        )

    async def remove_property_photo(
        self,
        property_id: uuid.UUID,
        reference: str,
        delete_file: bool = False
    ) -> PropertyPhotosResponse:
        """
        Remove a photo reference from a property, optionally deleting the file.

        Raises:
            PhotoNotFoundError: If the property doesn't reference the photo
        """
        property_obj = await self._get_property(property_id)
        current_images = list(property_obj.images or [])

        target = self.validator.normalize_filename(reference)
        remaining = [img for img in current_images if self.validator.normalize_filename(img) != target]
        if len(remaining) == len(current_images):
            raise PhotoNotFoundError(reference)

        await self._snapshot(property_id, current_images, "pre-remove")
        updated = await self.property_repo.update_images(property_id, remaining)

        if delete_file and self.storage.delete_file(self.storage.resolve(target)):
            logger.info(f"Deleted photo file {target}")

        logger.info(f"Removed photo {target} from property {property_id}")
        return PropertyPhotosResponse(property_id=property_id, images=list(updated.images))

    async def reorder_property_photos(self, property_id: uuid.UUID, images: List[str]) -> PropertyPhotosResponse:
        """
        Store a new order for a property's photos.

        Raises:
            ValidationError: If ``images`` is not a permutation of the current list
        """
        property_obj = await self._get_property(property_id)
        current_images = list(property_obj.images or [])

        if len(images) != len(current_images) or sorted(images) != sorted(current_images):
            raise ValidationError("New order must contain exactly the current images")

        updated = await self.property_repo.update_images(property_id, images)
        return PropertyPhotosResponse(property_id=property_id, images=list(updated.images))

    async def validate_property_photos(self, property_id: uuid.UUID) -> ImageListValidation:
        property_obj = await self._get_property(property_id)
        return self.validator.validate_image_list(property_obj.images or [])

    def delete_photo_files(self, images: List[str]) -> int:
        """Delete the upload files behind ``images``; returns how many were removed."""
        deleted = 0
        for reference in images:
            if self.storage.delete_file(self.storage.resolve(self.validator.normalize_filename(reference))):
                deleted += 1
        return deleted

    async def _get_property(self, property_id: uuid.UUID) -> Property:
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(property_id))
        return property_obj

    async def _snapshot(self, property_id: uuid.UUID, images: List[str], reason: str) -> None:
        try:
            await self.backups.create_backup(property_id, images, reason)
        except OSError as e:
            logger.warning(f"Could not write photo backup for property {property_id}: {e}")
