"""
Photo pipeline API endpoints: property photo uploads, ordering, validation and restore.
"""

from fastapi import APIRouter, Depends, status, Query, Path, File, UploadFile
from typing import List
from uuid import UUID

from showcase.models.user import User
from showcase.services.image_validator import ImageValidator
from showcase.services.photo_upload import PhotoUploadService
from showcase.services.photo_restore import PhotoRestoreService
from showcase.schemas.photo import (
    AssetRecoveryResult,
    BatchRestoreResult,
    ImageListValidation,
    ImageValidationResult,
    PhotoBackup,
    PhotoOrderRequest,
    PhotoUploadResult,
    PropertyPhotosResponse,
    RestorationReport,
    RestoreResult,
)
from showcase.utils.dependencies import (
    get_current_staff_user,
    get_photo_upload_service,
    get_photo_restore_service,
)
from showcase.schemas.error import get_crud_error_responses, get_error_responses


router = APIRouter(tags=["Photos"])


@router.post(
    "/properties/{property_id}/photos",
    response_model=PhotoUploadResult,
    status_code=status.HTTP_201_CREATED,
    summary="Upload property photos",
    description="""
    Upload one or more photos for a property.

    - Accepts JPEG, PNG, GIF and WEBP files up to the configured size
    - Rejected files are listed in `errors`; the others are still stored
    - New paths are appended after the existing images
    """,
    responses=get_crud_error_responses()
)
async def upload_property_photos(
    property_id: UUID = Path(..., description="Property ID"),
    files: List[UploadFile] = File(..., description="Image files to upload"),
    current_user: User = Depends(get_current_staff_user),
    photo_service: PhotoUploadService = Depends(get_photo_upload_service)
) -> PhotoUploadResult:
    return await photo_service.upload_property_photos(property_id, files)


@router.delete(
    "/properties/{property_id}/photos",
    response_model=PropertyPhotosResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove a property photo",
    responses=get_crud_error_responses()
)
async def remove_property_photo(
    property_id: UUID = Path(..., description="Property ID"),
    image: str = Query(..., min_length=1, description="Image reference or filename to remove"),
    delete_file: bool = Query(False, description="Also delete the file from disk"),
    current_user: User = Depends(get_current_staff_user),
    photo_service: PhotoUploadService = Depends(get_photo_upload_service)
) -> PropertyPhotosResponse:
    return await photo_service.remove_property_photo(property_id, image, delete_file=delete_file)


@router.put(
    "/properties/{property_id}/photos/order",
    response_model=PropertyPhotosResponse,
    status_code=status.HTTP_200_OK,
    summary="Reorder property photos",
    description="The body must contain exactly the current image references in the new order",
    responses=get_crud_error_responses()
)
async def reorder_property_photos(
    order: PhotoOrderRequest,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_staff_user),
    photo_service: PhotoUploadService = Depends(get_photo_upload_service)
) -> PropertyPhotosResponse:
    return await photo_service.reorder_property_photos(property_id, order.images)


@router.get(
    "/properties/{property_id}/photos/validate",
    response_model=ImageListValidation,
    summary="Validate property photos",
    description="Check every image reference of a property against the filesystem",
    responses=get_error_responses(401, 403, 404)
)
async def validate_property_photos(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_staff_user),
    photo_service: PhotoUploadService = Depends(get_photo_upload_service)
) -> ImageListValidation:
    return await photo_service.validate_property_photos(property_id)


@router.get(
    "/properties/{property_id}/photos/backups",
    response_model=List[PhotoBackup],
    summary="List photo backups",
    description="JSON snapshots of the property's image list, newest first",
    responses=get_error_responses(401, 403)
)
async def list_photo_backups(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_staff_user),
    restore_service: PhotoRestoreService = Depends(get_photo_restore_service)
) -> List[PhotoBackup]:
    return await restore_service.backups.list_backups(property_id)


@router.get(
    "/photos/validate",
    response_model=ImageValidationResult,
    summary="Validate a single image",
    responses=get_error_responses(401, 403, 422)
)
async def validate_image(
    filename: str = Query(..., min_length=1, description="Image reference or filename"),
    current_user: User = Depends(get_current_staff_user)
) -> ImageValidationResult:
    return ImageValidator().validate_image_exists(filename)


@router.post(
    "/photos/restore/{property_id}",
    response_model=RestoreResult,
    summary="Restore one property's photos",
    description="Reconcile the stored image list with the files on disk, copying from the assets directory",
    responses=get_error_responses(401, 403, 422)
)
async def restore_property_photos(
    property_id: UUID = Path(..., description="Property ID"),
    dry_run: bool = Query(False, description="Report without copying or writing"),
    check_file_existence: bool = Query(True, description="Inspect the filesystem"),
    use_backup: bool = Query(False, description="Merge the latest snapshot's references"),
    current_user: User = Depends(get_current_staff_user),
    restore_service: PhotoRestoreService = Depends(get_photo_restore_service)
) -> RestoreResult:
    return await restore_service.restore_property_images(
        property_id,
        dry_run=dry_run,
        check_file_existence=check_file_existence,
        use_backup=use_backup
    )


@router.post(
    "/photos/restore",
    response_model=BatchRestoreResult,
    summary="Restore photos of every property",
    responses=get_error_responses(401, 403)
)
async def restore_all_photos(
    dry_run: bool = Query(False, description="Report without copying or writing"),
    check_file_existence: bool = Query(True, description="Inspect the filesystem"),
    use_backup: bool = Query(False, description="Merge the latest snapshot's references"),
    current_user: User = Depends(get_current_staff_user),
    restore_service: PhotoRestoreService = Depends(get_photo_restore_service)
) -> BatchRestoreResult:
    return await restore_service.restore_all_properties(
        dry_run=dry_run,
        check_file_existence=check_file_existence,
        use_backup=use_backup
    )


@router.post(
    "/photos/recover-assets",
    response_model=AssetRecoveryResult,
    summary="Recover images from the assets directory",
    responses=get_error_responses(401, 403)
)
async def recover_assets(
    dry_run: bool = Query(False, description="Report without copying"),
    current_user: User = Depends(get_current_staff_user),
    restore_service: PhotoRestoreService = Depends(get_photo_restore_service)
) -> AssetRecoveryResult:
    return restore_service.recover_assets(dry_run=dry_run)


@router.get(
    "/photos/report",
    response_model=RestorationReport,
    summary="Photo restoration report",
    description="Referenced, valid and missing image counts per property",
    responses=get_error_responses(401, 403)
)
async def restoration_report(
    current_user: User = Depends(get_current_staff_user),
    restore_service: PhotoRestoreService = Depends(get_photo_restore_service)
) -> RestorationReport:
    return await restore_service.restoration_report()
