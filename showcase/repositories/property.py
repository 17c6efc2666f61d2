"""
Property repository for catalog listings with search and filtering.
Provides database operations for property management, search and the photo list.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_, func, desc, asc
from showcase.repositories.base import BaseRepository
from showcase.models.property import Property, PropertyType, ListingType, PropertyStatus
from showcase.config import settings
from typing import Optional, List, Dict, Any, Tuple
from datetime import datetime
from decimal import Decimal
import uuid
import logging

logger = logging.getLogger(__name__)

# Sort keys accepted by search_properties
SORT_FIELDS = {
    "created_at": Property.created_at,
    "price": Property.price,
    "bedrooms": Property.bedrooms,
    "views": Property.views,
    "title": Property.title,
}


class PropertySearchFilters:
    """Data class for property search filters."""

    def __init__(
        self,
        search_text: Optional[str] = None,
        location: Optional[str] = None,
        city: Optional[str] = None,
        property_type: Optional[PropertyType] = None,
        listing_type: Optional[ListingType] = None,
        project_name: Optional[str] = None,
        developer_name: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_bedrooms: Optional[int] = None,
        min_bathrooms: Optional[int] = None,
        is_full_cash: Optional[bool] = None,
        has_installments: Optional[bool] = None,
        international: Optional[bool] = None,
        is_featured: Optional[bool] = None,
        is_highlighted: Optional[bool] = None,
        is_new_listing: Optional[bool] = None,
        status: Optional[PropertyStatus] = PropertyStatus.PUBLISHED
    ):
        self.search_text = search_text
        self.location = location
        self.city = city
        self.property_type = property_type
        self.listing_type = listing_type
        self.project_name = project_name
        self.developer_name = developer_name
        self.min_price = min_price
        self.max_price = max_price
        self.min_bedrooms = min_bedrooms
        self.min_bathrooms = min_bathrooms
        self.is_full_cash = is_full_cash
        self.has_installments = has_installments
        self.international = international
        self.is_featured = is_featured
        self.is_highlighted = is_highlighted
        self.is_new_listing = is_new_listing
        self.status = status


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for catalog listings with search and filtering capabilities.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any]) -> Property:
        """
        Create a new property after model-level validation.

        Raises:
            ValueError: If validation fails
        """
        property_data = dict(property_data)
        property_data["images"] = _dedupe(property_data.get("images") or [])
        property_data["amenities"] = list(property_data.get("amenities") or [])

        Property(**property_data).validate_all()

        created_property = await self.create(property_data)
        logger.info(f"Created property: {created_property.title} (ID: {created_property.id})")
        return created_property

    async def search_properties(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20,
        order_by: Optional[str] = None,
        order_direction: str = "desc"
    ) -> Tuple[List[Property], int]:
        """
        Search properties with filtering and pagination.

        Without an explicit ``order_by`` featured listings come first, newest first.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            query = select(Property)
            count_query = select(func.count(Property.id))
            if conditions:
                query = query.where(and_(*conditions))
                count_query = count_query.where(and_(*conditions))

            total_count = (await self.db.execute(count_query)).scalar() or 0

            if order_by in SORT_FIELDS:
                direction = desc if order_direction.lower() == "desc" else asc
                query = query.order_by(direction(SORT_FIELDS[order_by]), desc(Property.created_at))
            else:
                query = query.order_by(desc(Property.is_featured), desc(Property.created_at))

            query = query.offset(skip).limit(limit)
            properties = list((await self.db.execute(query)).scalars().all())

            logger.debug(f"Property search returned {len(properties)} of {total_count}")
            return properties, total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List[Any]:
        """Translate search filters into SQLAlchemy conditions."""
        conditions = []

        if filters.status is not None:
            conditions.append(Property.status == filters.status)

        if filters.search_text:
            pattern = f"%{filters.search_text.strip()}%"
            conditions.append(or_(Property.title.ilike(pattern), Property.description.ilike(pattern)))

        if filters.location:
            pattern = f"%{filters.location.strip()}%"
            conditions.append(or_(Property.city.ilike(pattern), Property.address.ilike(pattern)))

        if filters.city:
            conditions.append(func.lower(Property.city) == filters.city.strip().lower())

        if filters.property_type:
            conditions.append(Property.property_type == filters.property_type)

        if filters.listing_type:
            conditions.append(Property.listing_type == filters.listing_type)

        if filters.project_name:
            conditions.append(Property.project_name.ilike(f"%{filters.project_name.strip()}%"))

        if filters.developer_name:
            conditions.append(Property.developer_name.ilike(f"%{filters.developer_name.strip()}%"))

        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)

        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.min_bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.min_bedrooms)

        if filters.min_bathrooms is not None:
            conditions.append(Property.bathrooms >= filters.min_bathrooms)

        if filters.is_full_cash is not None:
            conditions.append(Property.is_full_cash == filters.is_full_cash)

        if filters.has_installments is True:
            conditions.append(and_(Property.installment_amount.is_not(None), Property.installment_amount > 0))
        elif filters.has_installments is False:
            conditions.append(or_(Property.installment_amount.is_(None), Property.installment_amount <= 0))

        if filters.international is True:
            conditions.append(Property.country != settings.home_country)
        elif filters.international is False:
            conditions.append(Property.country == settings.home_country)

        for flag in ("is_featured", "is_highlighted", "is_new_listing"):
            value = getattr(filters, flag)
            if value is not None:
                conditions.append(getattr(Property, flag) == value)

        return conditions

    async def get_flagged_properties(self, flag: str, limit: int = 10) -> List[Property]:
        """
        Get published properties with a presentation flag set, newest first.

        Args:
            flag: One of is_featured, is_highlighted, is_new_listing
            limit: Maximum number of properties to return
        """
        if flag not in ("is_featured", "is_highlighted", "is_new_listing"):
            raise ValueError(f"Unknown property flag: {flag}")

        query = (
            select(Property)
            .where(Property.status == PropertyStatus.PUBLISHED, getattr(Property, flag).is_(True))
            .order_by(desc(Property.created_at))
            .limit(limit)
        )
        return list((await self.db.execute(query)).scalars().all())

    async def get_new_listings(self, since: datetime, limit: int = 10) -> List[Property]:
        """Published properties flagged as new or created after ``since``."""
        query = (
            select(Property)
            .where(
                Property.status == PropertyStatus.PUBLISHED,
                or_(Property.is_new_listing.is_(True), Property.created_at >= since)
            )
            .order_by(desc(Property.created_at))
            .limit(limit)
        )
        return list((await self.db.execute(query)).scalars().all())

    async def get_distinct_values(self, column_name: str) -> List[str]:
        """Distinct non-empty values of a text column among published listings."""
        column = getattr(Property, column_name)
        query = (
            select(column)
            .where(Property.status == PropertyStatus.PUBLISHED, column.is_not(None), column != "")
            .distinct()
            .order_by(column)
        )
        return [value for value in (await self.db.execute(query)).scalars().all()]

    async def increment_views(self, property_obj: Property) -> Property:
        """Atomically bump the view counter and reload the row."""
        try:
            property_obj.views = Property.views + 1
            await self.db.commit()
            await self.db.refresh(property_obj)
            return property_obj
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to increment views for property {property_obj.id}: {e}")
            raise

    async def update_images(self, property_id: uuid.UUID, images: List[str]) -> Optional[Property]:
        """Replace the image list of a property."""
        return await self.update(property_id, {"images": _dedupe(images)})

    async def get_all_properties(self) -> List[Property]:
        """All properties regardless of status, oldest first."""
        query = select(Property).order_by(asc(Property.created_at))
        return list((await self.db.execute(query)).scalars().all())


def _dedupe(images: List[str]) -> List[str]:
    """Drop duplicate references while keeping the first occurrence's position."""
    seen = set()
    result = []
    for image in images:
        if image and image not in seen:
            seen.add(image)
            result.append(image)
    return result
