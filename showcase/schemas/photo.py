"""
Pydantic schemas for the photo upload, validation and restore pipeline.
Batch results carry an ``errors`` list instead of failing on the first problem.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class ImageValidationResult(BaseModel):
    """Outcome of checking a single image reference against the filesystem."""

    filename: str = Field(..., description="Bare filename the reference resolves to")
    is_valid: bool
    exists: bool
    file_path: Optional[str] = Field(None, description="Location on disk when found")
    file_size: Optional[int] = None
    error: Optional[str] = None


class InvalidImage(BaseModel):
    filename: str
    error: str


class ImageListValidation(BaseModel):
    valid_images: List[str] = Field(default_factory=list)
    invalid_images: List[InvalidImage] = Field(default_factory=list)
    results: List[ImageValidationResult] = Field(default_factory=list)


class RestoreReadiness(BaseModel):
    can_restore: bool
    valid_images: List[str] = Field(default_factory=list)
    missing_images: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class UploadedPhoto(BaseModel):
    filename: str
    url: str = Field(..., description="Public path stored on the property")
    size: int
    width: int
    height: int
    alt_text: str


class PhotoUploadResult(BaseModel):
    property_id: UUID
    uploaded: List[UploadedPhoto] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list, description="Image list after the upload")
    errors: List[str] = Field(default_factory=list)


class PhotoOrderRequest(BaseModel):
    images: List[str] = Field(..., description="Current image references in the new order")


class PropertyPhotosResponse(BaseModel):
    property_id: UUID
    images: List[str]


class PhotoBackup(BaseModel):
    """JSON snapshot of a property's image list."""

    property_id: UUID
    images: List[str]
    reason: str
    created_at: datetime
    name: Optional[str] = None


class RestoreResult(BaseModel):
    property_id: UUID
    success: bool
    dry_run: bool
    restored_images: List[str] = Field(default_factory=list)
    missing_files: List[str] = Field(default_factory=list)
    copied_files: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    updated: bool = Field(False, description="Whether the stored image list was rewritten")


class BatchRestoreResult(BaseModel):
    success: bool
    dry_run: bool
    processed_properties: int = 0
    total_restored: int = 0
    total_missing: int = 0
    total_copied: int = 0
    results: List[RestoreResult] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class AssetRecoveryResult(BaseModel):
    success: bool
    dry_run: bool
    copied: List[str] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    invalid: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class PropertyPhotoReport(BaseModel):
    property_id: UUID
    title: str
    referenced: int
    valid: int
    missing: List[str] = Field(default_factory=list)


class RestorationReport(BaseModel):
    properties: List[PropertyPhotoReport] = Field(default_factory=list)
    total_properties: int = 0
    total_referenced: int = 0
    total_valid: int = 0
    total_missing: int = 0
    properties_with_missing: int = 0
