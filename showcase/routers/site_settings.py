"""
Site settings API endpoints for branding and contact information.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from showcase.models.user import User
from showcase.services.site_settings import SiteSettingsService
from showcase.schemas.site_settings import SiteSettingsUpdate, SiteSettingsResponse
from showcase.utils.dependencies import get_current_staff_user, get_site_settings_service
from showcase.schemas.error import get_crud_error_responses, get_error_responses


router = APIRouter(prefix="/site-settings", tags=["Site Settings"])


@router.get(
    "",
    response_model=SiteSettingsResponse,
    summary="Get site settings",
    description="Branding and contact information; defaults are created on first read"
)
async def get_site_settings(
    settings_service: SiteSettingsService = Depends(get_site_settings_service)
) -> SiteSettingsResponse:
    return SiteSettingsResponse.model_validate(await settings_service.get_settings())


@router.patch(
    "",
    response_model=SiteSettingsResponse,
    summary="Update site settings",
    description="Merge the sent fields into the stored settings. Staff only.",
    responses=get_error_responses(400, 401, 403, 422)
)
async def update_site_settings(
    settings_data: SiteSettingsUpdate,
    current_user: User = Depends(get_current_staff_user),
    settings_service: SiteSettingsService = Depends(get_site_settings_service)
) -> SiteSettingsResponse:
    return SiteSettingsResponse.model_validate(await settings_service.update_settings(settings_data))


@router.post(
    "/logo",
    response_model=SiteSettingsResponse,
    summary="Upload site logo",
    responses=get_crud_error_responses()
)
async def upload_logo(
    file: UploadFile = File(..., description="Logo image"),
    current_user: User = Depends(get_current_staff_user),
    settings_service: SiteSettingsService = Depends(get_site_settings_service)
) -> SiteSettingsResponse:
    return SiteSettingsResponse.model_validate(await settings_service.upload_logo(file))
