"""
Property catalog API endpoints for CRUD operations, search, and filtering.
Public callers only see published listings; staff see every status.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from typing import Optional, List
from decimal import Decimal
from uuid import UUID
import logging
import math

from showcase.models.user import User
from showcase.models.property import PropertyType, ListingType, PropertyStatus
from showcase.services.property import PropertyService
from showcase.services.photo_upload import PhotoUploadService
from showcase.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyListResponse,
    PropertySearchParams,
)
from showcase.utils.dependencies import (
    get_current_staff_user,
    get_optional_current_user,
    get_property_service,
    get_photo_upload_service,
)
from showcase.schemas.error import get_crud_error_responses, get_common_error_responses, get_error_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=PropertyListResponse,
    status_code=status.HTTP_200_OK,
    summary="List properties with search and filtering",
    description="Get paginated list of published properties with optional search filters",
    responses=get_common_error_responses()
)
async def list_properties(
    # Search parameters
    query: Optional[str] = Query(None, max_length=200, description="Search query for title and description"),
    location: Optional[str] = Query(None, max_length=100, description="City or address substring"),

    # Classification
    property_type: Optional[PropertyType] = Query(None, description="Property type"),
    listing_type: Optional[ListingType] = Query(None, description="Primary or Resale"),
    project_name: Optional[str] = Query(None, max_length=255),
    developer_name: Optional[str] = Query(None, max_length=255),

    # Price and size filters
    min_price: Optional[Decimal] = Query(None, ge=0, description="Minimum price filter"),
    max_price: Optional[Decimal] = Query(None, ge=0, description="Maximum price filter"),
    min_bedrooms: Optional[int] = Query(None, ge=0, le=50, description="Minimum number of bedrooms"),
    min_bathrooms: Optional[int] = Query(None, ge=0, le=50, description="Minimum number of bathrooms"),

    # Payment and presentation flags
    is_full_cash: Optional[bool] = Query(None),
    has_installments: Optional[bool] = Query(None),
    international: Optional[bool] = Query(None, description="Listings outside the home country"),
    is_featured: Optional[bool] = Query(None),
    is_highlighted: Optional[bool] = Query(None),
    is_new_listing: Optional[bool] = Query(None),

    # Status filter (staff only)
    property_status: Optional[PropertyStatus] = Query(None, alias="status", description="Workflow status (staff only)"),

    # Pagination
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(20, ge=1, le=100, description="Number of properties per page"),

    # Sorting
    sort_by: Optional[str] = Query(None, description="created_at, price, bedrooms, views or title"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$", description="Sort order (asc/desc)"),

    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    """
    Get paginated list of properties with search and filtering capabilities.
    Without ``sort_by`` featured listings come first, then the newest.
    """
    search_params = PropertySearchParams(
        query=query,
        location=location,
        property_type=property_type,
        listing_type=listing_type,
        project_name=project_name,
        developer_name=developer_name,
        min_price=min_price,
        max_price=max_price,
        min_bedrooms=min_bedrooms,
        min_bathrooms=min_bathrooms,
        is_full_cash=is_full_cash,
        has_installments=has_installments,
        international=international,
        is_featured=is_featured,
        is_highlighted=is_highlighted,
        is_new_listing=is_new_listing,
        status=property_status
    )

    properties, total_count = await property_service.search_properties(
        search_params,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        include_unpublished=bool(current_user and current_user.is_staff)
    )

    # Calculate pagination metadata
    total_pages = math.ceil(total_count / page_size) if total_count > 0 else 1

    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(prop) for prop in properties],
        total=total_count,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1
    )


@router.get(
    "/featured",
    response_model=List[PropertyResponse],
    summary="Featured properties",
    description="Published properties marked as featured, newest first"
)
async def get_featured_properties(
    limit: int = Query(10, ge=1, le=50),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_featured_properties(limit)
    return [PropertyResponse.model_validate(prop) for prop in properties]


@router.get(
    "/highlighted",
    response_model=List[PropertyResponse],
    summary="Highlighted properties"
)
async def get_highlighted_properties(
    limit: int = Query(10, ge=1, le=50),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_highlighted_properties(limit)
    return [PropertyResponse.model_validate(prop) for prop in properties]


@router.get(
    "/new",
    response_model=List[PropertyResponse],
    summary="New listings",
    description="Published properties flagged as new or added recently"
)
async def get_new_listings(
    limit: int = Query(10, ge=1, le=50),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_new_listings(limit)
    return [PropertyResponse.model_validate(prop) for prop in properties]


@router.get(
    "/cities",
    response_model=List[str],
    summary="Cities with published listings"
)
async def get_cities(
    property_service: PropertyService = Depends(get_property_service)
) -> List[str]:
    return await property_service.get_cities()


@router.get(
    "/projects",
    response_model=List[str],
    summary="Project names with published listings"
)
async def get_projects(
    property_service: PropertyService = Depends(get_property_service)
) -> List[str]:
    return await property_service.get_projects()


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property by ID",
    description="Public callers only find published properties and each read counts a view",
    responses=get_error_responses(404, 422)
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    public = not (current_user and current_user.is_staff)
    property_obj = await property_service.get_property(property_id, public=public)
    return PropertyResponse.model_validate(property_obj)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a new property listing. Requires admin or owner role.",
    responses=get_crud_error_responses()
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_staff_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.create_property(property_data, current_user)
    return PropertyResponse.model_validate(property_obj)


@router.patch(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description="Partially update a property. Requires admin or owner role.",
    responses=get_crud_error_responses()
)
async def update_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_staff_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return PropertyResponse.model_validate(property_obj)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a property, optionally removing its uploaded photo files",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    delete_photos: bool = Query(False, description="Also delete the uploaded photo files"),
    current_user: User = Depends(get_current_staff_user),
    property_service: PropertyService = Depends(get_property_service),
    photo_service: PhotoUploadService = Depends(get_photo_upload_service)
) -> None:
    images = await property_service.delete_property(property_id, current_user)
    if delete_photos and images:
        deleted = photo_service.delete_photo_files(images)
        logger.info(f"Deleted {deleted} photo files of property {property_id}")
