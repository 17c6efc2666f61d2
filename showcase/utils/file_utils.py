"""
File upload utilities for handling image validation, storage and resizing.
Provides common file operations shared by the photo, logo and announcement uploads.
"""

import io
import secrets
import time
from pathlib import Path
from typing import List, Sequence, Tuple, Optional
from PIL import Image, ImageOps, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from showcase.config import settings
from showcase.utils.exceptions import (
    ValidationError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
)


class FileValidator:
    """Utility class for file validation operations."""

    # Supported image formats and their extensions
    SUPPORTED_FORMATS = {
        'image/jpeg': ['.jpg', '.jpeg'],
        'image/png': ['.png'],
        'image/gif': ['.gif'],
        'image/webp': ['.webp']
    }

    # Pillow format names expected for each MIME type
    PIL_FORMATS = {
        'image/jpeg': ['jpeg', 'mpo'],
        'image/png': ['png'],
        'image/gif': ['gif'],
        'image/webp': ['webp']
    }

    @classmethod
    def validate_file_extension(cls, filename: str) -> str:
        """
        Validate file extension.

        Args:
            filename: Name of the file

        Returns:
            Lowercase file extension

        Raises:
            ValidationError: If extension is missing or not supported
        """
        if not filename:
            raise ValidationError("Filename is required")

        extension = Path(filename).suffix.lower()
        if not extension:
            raise ValidationError("File must have an extension")

        supported_extensions = [ext for exts in cls.SUPPORTED_FORMATS.values() for ext in exts]
        if extension not in supported_extensions or extension not in settings.allowed_image_extensions:
            raise ValidationError(
                f"File extension '{extension}' not supported. "
                f"Supported extensions: {', '.join(supported_extensions)}"
            )

        return extension

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        """
        Validate MIME type against the configured allow-list.

        Raises:
            UnsupportedFileTypeError: If MIME type is not allowed
        """
        allowed = [m for m in settings.allowed_file_types if m in cls.SUPPORTED_FORMATS]
        if not mime_type or mime_type not in allowed:
            raise UnsupportedFileTypeError(mime_type or "unknown", allowed)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        """
        Validate file size.

        Raises:
            ValidationError: If the file is empty
            FileSizeExceededError: If file size exceeds limit
        """
        if file_size <= 0:
            raise ValidationError("File is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)

        return file_size

    @classmethod
    async def validate_upload_file(cls, file: UploadFile) -> Tuple[int, int, str, bytes]:
        """
        Comprehensive validation of an uploaded image.

        Args:
            file: FastAPI UploadFile object

        Returns:
            Tuple of (width, height, mime_type, content)

        Raises:
            ValidationError: If any validation fails
        """
        if not file.filename:
            raise ValidationError("Filename is required")

        mime_type = cls.validate_mime_type(file.content_type or "")
        extension = cls.validate_file_extension(file.filename)

        if extension not in cls.SUPPORTED_FORMATS[mime_type]:
            raise ValidationError(
                f"File extension '{extension}' doesn't match MIME type '{mime_type}'"
            )

        await file.seek(0)
        content = await file.read()
        cls.validate_file_size(len(content))

        width, height, pil_format = cls.inspect_image(content)
        if pil_format not in cls.PIL_FORMATS[mime_type]:
            raise ValidationError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )

        return width, height, mime_type, content

    @staticmethod
    def inspect_image(content: bytes) -> Tuple[int, int, str]:
        """
        Open image bytes with Pillow.

        Returns:
            Tuple of (width, height, lowercase Pillow format name)

        Raises:
            ValidationError: If the bytes are not a readable image
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                img.verify()
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
                return width, height, (img.format or "").lower()
        except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as e:
            raise ValidationError(f"Invalid image file: {str(e)}")


class FileStorage:
    """Utility class for file storage operations under one directory."""

    def __init__(self, base_dir: Optional[Path] = None):
        self.base_dir = Path(base_dir or settings.property_photos_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def generate_unique_filename(self, original_filename: str, prefix: str = "photo") -> str:
        """
        Generate a unique filename while preserving the extension.

        Names look like ``photo-<milliseconds>-<random><ext>``.
        """
        extension = Path(original_filename).suffix.lower()
        timestamp = int(time.time() * 1000)
        return f"{prefix}-{timestamp}-{secrets.token_hex(4)}{extension}"

    async def save_bytes(self, content: bytes, filename: str) -> Path:
        """
        Write content to ``base_dir/filename``.

        Raises:
            ValidationError: If the write fails; a partial file is removed
        """
        file_path = self.base_dir / filename
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
            return file_path
        except OSError as e:
            self.delete_file(file_path)
            raise ValidationError(f"Failed to save file: {str(e)}")

    def resolve(self, filename: str) -> Path:
        """Path of a stored file; directory parts of ``filename`` are ignored."""
        return self.base_dir / Path(filename).name

    def delete_file(self, file_path: Path) -> bool:
        """
        Delete a file from disk.

        Returns:
            True if file was deleted, False otherwise
        """
        try:
            if file_path.is_file():
                file_path.unlink()
                return True
        except OSError:
            return False
        return False

    def list_images(self, allowed_extensions: Optional[Sequence[str]] = None) -> List[Path]:
        """Files in the directory with an allowed image extension, sorted by name."""
        if not self.base_dir.is_dir():
            return []
        allowed = {ext.lower() for ext in (allowed_extensions or settings.allowed_image_extensions)}
        return sorted(p for p in self.base_dir.iterdir() if p.is_file() and p.suffix.lower() in allowed)


class ImageProcessor:
    """Utility class for image processing operations."""

    @staticmethod
    def resize_image(
        image_path: Path,
        max_width: Optional[int] = None,
        max_height: Optional[int] = None
    ) -> Tuple[int, int]:
        """
        Downscale an image in place so it fits the box, keeping its aspect ratio.

        Images already inside the box and animated GIFs are left untouched.

        Returns:
            Final (width, height)
        """
        max_w = max_width or settings.max_image_width
        max_h = max_height or settings.max_image_height

        with Image.open(image_path) as img:
            img.load()
            img_format = img.format
            if img.width <= max_w and img.height <= max_h:
                return img.width, img.height
            if img_format == "GIF":
                return img.width, img.height

            img = ImageOps.exif_transpose(img)
            img.thumbnail((max_w, max_h), Image.Resampling.LANCZOS)

            save_options = {"optimize": True}
            if img_format == "JPEG":
                if img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                save_options["quality"] = settings.jpeg_quality
            elif img_format == "WEBP":
                save_options["quality"] = settings.webp_quality

            img.save(image_path, format=img_format, **save_options)
            return img.width, img.height
