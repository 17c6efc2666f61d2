"""
Property service for managing catalog listings with business logic validation.
Handles CRUD operations, public visibility, search functionality, and business rules.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, List, Dict, Any, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from showcase.config import settings
from showcase.repositories.property import PropertyRepository, PropertySearchFilters
from showcase.models.property import Property, PropertyStatus
from showcase.models.user import User
from showcase.schemas.property import PropertyCreate, PropertyUpdate, PropertySearchParams
from showcase.utils.exceptions import (
    APIException,
    BadRequestError,
    DuplicateResourceError,
    PropertyNotFoundError,
    ValidationError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

# Columns the model-level validation looks at
_VALIDATED_FIELDS = ("price", "bedrooms", "bathrooms", "latitude", "longitude")


class PropertyService:
    """
    Property service for the public catalog and the admin dashboard.
    Public reads only ever see published listings.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a new property listing.

        Raises:
            ValidationError: If property data breaks a model rule
            DuplicateResourceError: If the reference number is taken
        """
        try:
            create_data = property_data.model_dump()
            create_data["created_by"] = current_user.id

            await self._check_reference_number(create_data.get("reference_number"))

            property_obj = await self.property_repo.create_property(create_data)

            logger.info(f"Property created by {current_user.username}: {property_obj.title} (ID: {property_obj.id})")
            return property_obj

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to create property for user {current_user.id}: {e}")
            raise BadRequestError(f"Failed to create property: {str(e)}")

    async def get_property(self, property_id: uuid.UUID, public: bool = True) -> Property:
        """
        Get property by ID.

        A public read only finds published listings and counts a view.

        Raises:
            PropertyNotFoundError: If property doesn't exist or is hidden
        """
        property_obj = await self.property_repo.get_by_id(property_id)

        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        if public:
            if property_obj.status != PropertyStatus.PUBLISHED:
                raise PropertyNotFoundError(str(property_id))
            property_obj = await self.property_repo.increment_views(property_obj)

        return property_obj

    async def update_property(
        self,
        property_id: uuid.UUID,
        property_data: PropertyUpdate,
        current_user: User
    ) -> Property:
        """
        Apply a partial update to a property.

        Raises:
            PropertyNotFoundError: If property doesn't exist
            ValidationError: If the merged record breaks a model rule
        """
        try:
            existing_property = await self.property_repo.get_by_id(property_id)
            if not existing_property:
                raise PropertyNotFoundError(str(property_id))

            update_data = property_data.model_dump(exclude_unset=True)

            reference_number = update_data.get("reference_number")
            if reference_number and reference_number != existing_property.reference_number:
                await self._check_reference_number(reference_number)

            self._validate_merged(existing_property, update_data)

            if "images" in update_data and update_data["images"] is not None:
                return await self._update_with_images(property_id, update_data, current_user)

            updated_property = await self.property_repo.update(property_id, update_data)
            logger.info(f"Property {property_id} updated by {current_user.username}")
            return updated_property

        except APIException:
            raise
        except ValueError as e:
            raise ValidationError(str(e))
        except Exception as e:
            logger.error(f"Failed to update property {property_id}: {e}")
            raise BadRequestError(f"Failed to update property: {str(e)}")

    async def _update_with_images(
        self,
        property_id: uuid.UUID,
        update_data: Dict[str, Any],
        current_user: User
    ) -> Property:
        images = update_data.pop("images")
        if update_data:
            await self.property_repo.update(property_id, update_data)
        updated_property = await self.property_repo.update_images(property_id, images)
        logger.info(f"Property {property_id} updated by {current_user.username} ({len(images)} images)")
        return updated_property

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> List[str]:
        """
        Delete a property.

        Returns:
            The image references the property held, so the caller can remove files

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError(str(property_id))

        images = list(property_obj.images or [])
        try:
            await self.property_repo.delete(property_id)
        except Exception as e:
            logger.error(f"Failed to delete property {property_id}: {e}")
            raise BadRequestError(f"Failed to delete property: {str(e)}")

        logger.info(f"Property deleted by {current_user.username}: {property_id}")
        return images

    async def search_properties(
        self,
        search_params: PropertySearchParams,
        page: int = 1,
        page_size: int = 20,
        sort_by: Optional[str] = None,
        sort_order: str = "desc",
        include_unpublished: bool = False
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination.

        Public searches are pinned to published listings; staff may pass a
        status filter or see every status.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            repo_filters = self._convert_search_params(search_params, include_unpublished)
            skip = (page - 1) * page_size

            properties, total_count = await self.property_repo.search_properties(
                filters=repo_filters,
                skip=skip,
                limit=page_size,
                order_by=sort_by,
                order_direction=sort_order
            )

            logger.debug(f"Property search returned {len(properties)} of {total_count} results")
            return properties, total_count

        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise BadRequestError(f"Failed to search properties: {str(e)}")

    async def get_featured_properties(self, limit: int = 10) -> List[Property]:
        return await self.property_repo.get_flagged_properties("is_featured", limit)

    async def get_highlighted_properties(self, limit: int = 10) -> List[Property]:
        return await self.property_repo.get_flagged_properties("is_highlighted", limit)

    async def get_new_listings(self, limit: int = 10) -> List[Property]:
        """Listings flagged as new or added within the configured number of days."""
        since = datetime.now(timezone.utc) - timedelta(days=settings.new_listing_days)
        return await self.property_repo.get_new_listings(since, limit)

    async def get_cities(self) -> List[str]:
        return await self.property_repo.get_distinct_values("city")

    async def get_projects(self) -> List[str]:
        return await self.property_repo.get_distinct_values("project_name")

    async def _check_reference_number(self, reference_number: Optional[str]) -> None:
        if reference_number and await self.property_repo.get_by_field("reference_number", reference_number):
            raise DuplicateResourceError("Property", reference_number)

    @staticmethod
    def _validate_merged(existing_property: Property, update_data: Dict[str, Any]) -> None:
        merged = {field: getattr(existing_property, field) for field in _VALIDATED_FIELDS}
        merged.update({k: v for k, v in update_data.items() if k in _VALIDATED_FIELDS and v is not None})
        Property(**merged).validate_all()

    @staticmethod
    def _convert_search_params(params: PropertySearchParams, include_unpublished: bool) -> PropertySearchFilters:
        """Convert query parameters to repository filter format."""
        if include_unpublished:
            status = params.status
        else:
            status = PropertyStatus.PUBLISHED

        return PropertySearchFilters(
            search_text=params.query,
            location=params.location,
            property_type=params.property_type,
            listing_type=params.listing_type,
            project_name=params.project_name,
            developer_name=params.developer_name,
            min_price=params.min_price,
            max_price=params.max_price,
            min_bedrooms=params.min_bedrooms,
            min_bathrooms=params.min_bathrooms,
            is_full_cash=params.is_full_cash,
            has_installments=params.has_installments,
            international=params.international,
            is_featured=params.is_featured,
            is_highlighted=params.is_highlighted,
            is_new_listing=params.is_new_listing,
            status=status
        )
