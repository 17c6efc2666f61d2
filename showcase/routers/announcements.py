"""
Announcement API endpoints.
The public list only contains announcements inside their active window.
"""

from fastapi import APIRouter, Depends, status, Query, Path, File, UploadFile
from typing import Optional, List
from uuid import UUID

from showcase.models.user import User
from showcase.services.announcement import AnnouncementService
from showcase.schemas.announcement import (
    AnnouncementCreate,
    AnnouncementUpdate,
    AnnouncementResponse,
    AnnouncementListResponse,
)
from showcase.utils.dependencies import (
    get_current_staff_user,
    get_optional_current_user,
    get_announcement_service,
)
from showcase.schemas.error import get_crud_error_responses, get_error_responses


router = APIRouter(prefix="/announcements", tags=["Announcements"])


@router.get(
    "",
    response_model=List[AnnouncementResponse],
    summary="Visible announcements",
    description="Active announcements whose start and end dates contain the current time"
)
async def list_visible_announcements(
    limit: int = Query(50, ge=1, le=100),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> List[AnnouncementResponse]:
    announcements = await announcement_service.list_visible(limit=limit)
    return [AnnouncementResponse.model_validate(item) for item in announcements]


@router.get(
    "/highlighted",
    response_model=List[AnnouncementResponse],
    summary="Highlighted announcements"
)
async def list_highlighted_announcements(
    limit: int = Query(10, ge=1, le=50),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> List[AnnouncementResponse]:
    announcements = await announcement_service.list_visible(highlighted_only=True, limit=limit)
    return [AnnouncementResponse.model_validate(item) for item in announcements]


@router.get(
    "/all",
    response_model=AnnouncementListResponse,
    summary="All announcements",
    description="Every announcement regardless of its window. Staff only.",
    responses=get_error_responses(401, 403)
)
async def list_all_announcements(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    current_user: User = Depends(get_current_staff_user),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> AnnouncementListResponse:
    announcements, total = await announcement_service.list_all(skip=skip, limit=limit)
    return AnnouncementListResponse(
        announcements=[AnnouncementResponse.model_validate(item) for item in announcements],
        total=total
    )


@router.get(
    "/{announcement_id}",
    response_model=AnnouncementResponse,
    summary="Get announcement",
    responses=get_error_responses(404, 422)
)
async def get_announcement(
    announcement_id: UUID = Path(..., description="Announcement ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> AnnouncementResponse:
    public = not (current_user and current_user.is_staff)
    announcement = await announcement_service.get_announcement(announcement_id, public=public)
    return AnnouncementResponse.model_validate(announcement)


@router.post(
    "",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create announcement",
    responses=get_crud_error_responses()
)
async def create_announcement(
    announcement_data: AnnouncementCreate,
    current_user: User = Depends(get_current_staff_user),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> AnnouncementResponse:
    announcement = await announcement_service.create_announcement(announcement_data, current_user)
    return AnnouncementResponse.model_validate(announcement)


@router.patch(
    "/{announcement_id}",
    response_model=AnnouncementResponse,
    summary="Update announcement",
    responses=get_crud_error_responses()
)
async def update_announcement(
    announcement_data: AnnouncementUpdate,
    announcement_id: UUID = Path(..., description="Announcement ID"),
    current_user: User = Depends(get_current_staff_user),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> AnnouncementResponse:
    announcement = await announcement_service.update_announcement(announcement_id, announcement_data)
    return AnnouncementResponse.model_validate(announcement)


@router.delete(
    "/{announcement_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete announcement",
    responses=get_crud_error_responses()
)
async def delete_announcement(
    announcement_id: UUID = Path(..., description="Announcement ID"),
    current_user: User = Depends(get_current_staff_user),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> None:
    await announcement_service.delete_announcement(announcement_id)


@router.post(
    "/{announcement_id}/image",
    response_model=AnnouncementResponse,
    summary="Upload announcement image",
    description="Store a validated image and replace the announcement's previous image",
    responses=get_crud_error_responses()
)
async def upload_announcement_image(
    announcement_id: UUID = Path(..., description="Announcement ID"),
    file: UploadFile = File(..., description="Image file"),
    current_user: User = Depends(get_current_staff_user),
    announcement_service: AnnouncementService = Depends(get_announcement_service)
) -> AnnouncementResponse:
    announcement = await announcement_service.upload_image(announcement_id, file)
    return AnnouncementResponse.model_validate(announcement)
