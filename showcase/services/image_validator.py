"""
Image existence validation for property photo references.
Resolves stored references against the uploads directory and the static images directory.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Sequence
import logging

from showcase.config import settings
from showcase.schemas.photo import (
    ImageValidationResult,
    ImageListValidation,
    InvalidImage,
    RestoreReadiness,
)

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/properties/"


class ImageValidator:
    """
    Checks that an image reference points at a usable file on disk.

    A reference may be a bare filename, ``/uploads/properties/<name>`` or any
    other path; only the final filename is used, so lookups never leave the
    two known directories.
    """

    def __init__(
        self,
        uploads_dir: Optional[Path] = None,
        images_dir: Optional[Path] = None,
        max_file_size: Optional[int] = None,
        allowed_extensions: Optional[Sequence[str]] = None
    ):
        self.uploads_dir = Path(uploads_dir or settings.property_photos_dir)
        self.images_dir = Path(images_dir or settings.images_dir)
        self.max_file_size = max_file_size or settings.max_file_size
        self.allowed_extensions = [ext.lower() for ext in (allowed_extensions or settings.allowed_image_extensions)]

    @staticmethod
    def normalize_filename(reference: str) -> str:
        """Reduce a stored reference to its bare filename."""
        cleaned = (reference or "").strip().replace("\\", "/").lstrip("/")
        if cleaned.startswith("uploads/properties/"):
            cleaned = cleaned[len("uploads/properties/"):]
        return cleaned.rsplit("/", 1)[-1]

    def locate(self, reference: str) -> Optional[Path]:
        """Return the path of the referenced file, uploads directory first."""
        filename = self.normalize_filename(reference)
        if not filename:
            return None
        for directory in (self.uploads_dir, self.images_dir):
            candidate = directory / filename
            if candidate.exists():
                return candidate
        return None

    def validate_image_exists(self, reference: str) -> ImageValidationResult:
        """
        Validate that a referenced image exists and is a usable image file.

        Failure reasons are checked in order: missing, not a regular file,
        empty, over the size ceiling, disallowed extension.
        """
        filename = self.normalize_filename(reference)
        try:
            file_path = self.locate(reference)
            if file_path is None:
                return ImageValidationResult(
                    filename=filename,
                    is_valid=False,
                    exists=False,
                    file_path=str(self.uploads_dir / filename) if filename else None,
                    error=f"File not found: {reference}"
                )

            if not file_path.is_file():
                return ImageValidationResult(
                    filename=filename,
                    is_valid=False,
                    exists=True,
                    file_path=str(file_path),
                    error="Path is not a file"
                )

            file_size = file_path.stat().st_size
            if file_size == 0:
                error = "File is empty"
            elif file_size > self.max_file_size:
                error = f"File too large: {filename} ({round(file_size / 1024 / 1024)}MB)"
            elif file_path.suffix.lower() not in self.allowed_extensions:
                error = "Invalid image extension"
            else:
                error = None

            return ImageValidationResult(
                filename=filename,
                is_valid=error is None,
                exists=True,
                file_path=str(file_path),
                file_size=file_size,
                error=error
            )
        except OSError as e:
            logger.warning(f"Image validation failed for {reference}: {e}")
            return ImageValidationResult(
                filename=filename,
                is_valid=False,
                exists=False,
                error=f"Validation error: {e}"
            )

    def validate_image_list(self, references: Iterable[str]) -> ImageListValidation:
        """Validate every reference, splitting them into valid and invalid."""
        validation = ImageListValidation()
        for reference in references:
            result = self.validate_image_exists(reference)
            validation.results.append(result)
            if result.is_valid:
                validation.valid_images.append(reference)
            else:
                validation.invalid_images.append(InvalidImage(filename=reference, error=result.error or "Invalid image"))
        return validation

    def validate_before_restore(self, references: Iterable[str]) -> RestoreReadiness:
        """Report whether a restore would have at least one usable image."""
        validation = self.validate_image_list(references)
        errors: List[str] = [f"{item.filename}: {item.error}" for item in validation.invalid_images]
        can_restore = len(validation.valid_images) > 0
        if not can_restore:
            errors.insert(0, "No valid images found for restore operation")

        return RestoreReadiness(
            can_restore=can_restore,
            valid_images=validation.valid_images,
            missing_images=[item.filename for item in validation.invalid_images],
            errors=errors
        )

    def public_url(self, filename: str) -> str:
        return f"{UPLOADS_URL_PREFIX}{self.normalize_filename(filename)}"
