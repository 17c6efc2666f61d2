"""
Pydantic schemas for property requests and responses.
Handles property CRUD operations, search filters, and validation.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from showcase.models.property import PropertyType, ListingType, PropertyStatus


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(
        ...,
        min_length=3,
        max_length=255,
        description="Listing title",
        examples=["Sea view chalet in Marassi"]
    )
    description: str = Field(
        ...,
        min_length=10,
        max_length=10000,
        description="Detailed property description"
    )
    reference_number: Optional[str] = Field(None, max_length=50)

    address: str = Field(..., min_length=2, max_length=255, examples=["Marassi, North Coast"])
    city: str = Field(..., min_length=2, max_length=100, examples=["North Coast"])
    state: Optional[str] = Field(None, max_length=100)
    country: str = Field("Egypt", max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)

    property_type: PropertyType = Field(..., examples=["chalet"])
    listing_type: ListingType = Field(ListingType.PRIMARY, examples=["Primary"])
    project_name: Optional[str] = Field(None, max_length=255, examples=["Marassi"])
    developer_name: Optional[str] = Field(None, max_length=255, examples=["Emaar Misr"])

    price: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2, examples=[8500000])
    down_payment: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    installment_amount: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    installment_period: Optional[int] = Field(None, ge=1, le=600, description="Months")
    is_full_cash: bool = False

    bedrooms: int = Field(0, ge=0, le=50)
    bathrooms: int = Field(0, ge=0, le=50)
    built_up_area: Optional[int] = Field(None, gt=0, description="Square meters")
    plot_size: Optional[int] = Field(None, gt=0)
    garden_size: Optional[int] = Field(None, ge=0)
    floor: Optional[int] = Field(None, ge=-5, le=200)
    is_ground_unit: bool = False
    year_built: Optional[int] = Field(None, ge=1800, le=2100)

    is_featured: bool = False
    is_highlighted: bool = False
    is_new_listing: bool = False
    amenities: List[str] = Field(default_factory=list)

    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)

    status: PropertyStatus = PropertyStatus.PUBLISHED

    @field_validator('title', 'description', 'address', 'city')
    @classmethod
    def strip_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @model_validator(mode='after')
    def validate_coordinates(self):
        """Validate that both coordinates are provided together or both are None."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together, or both must be None")
        return self


class PropertyCreate(PropertyBase):
    """Schema for creating a new property; images may reference files already on disk."""

    images: List[str] = Field(default_factory=list, description="Image paths")


class PropertyUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, min_length=10, max_length=10000)
    reference_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, min_length=2, max_length=255)
    city: Optional[str] = Field(None, min_length=2, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    project_name: Optional[str] = Field(None, max_length=255)
    developer_name: Optional[str] = Field(None, max_length=255)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    down_payment: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    installment_amount: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    installment_period: Optional[int] = Field(None, ge=1, le=600)
    is_full_cash: Optional[bool] = None
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    built_up_area: Optional[int] = Field(None, gt=0)
    plot_size: Optional[int] = Field(None, gt=0)
    garden_size: Optional[int] = Field(None, ge=0)
    floor: Optional[int] = Field(None, ge=-5, le=200)
    is_ground_unit: Optional[bool] = None
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    is_featured: Optional[bool] = None
    is_highlighted: Optional[bool] = None
    is_new_listing: Optional[bool] = None
    amenities: Optional[List[str]] = None
    images: Optional[List[str]] = None
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    status: Optional[PropertyStatus] = None

    @model_validator(mode='after')
    def validate_coordinates(self):
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together")
        return self


class PropertyResponse(PropertyBase):
    """Property as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    images: List[str]
    views: int
    has_installments: bool
    main_image: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class PropertyListResponse(BaseModel):
    """Paginated list of properties."""

    properties: List[PropertyResponse]
    total: int = Field(..., description="Total number of matching properties")
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool


class PropertySearchParams(BaseModel):
    """Query parameters accepted by the catalog search."""

    query: Optional[str] = Field(None, description="Text matched against title and description")
    location: Optional[str] = Field(None, description="Matched against city or address")
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    project_name: Optional[str] = None
    developer_name: Optional[str] = None
    min_price: Optional[Decimal] = Field(None, ge=0)
    max_price: Optional[Decimal] = Field(None, ge=0)
    min_bedrooms: Optional[int] = Field(None, ge=0)
    min_bathrooms: Optional[int] = Field(None, ge=0)
    is_full_cash: Optional[bool] = None
    has_installments: Optional[bool] = None
    international: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_highlighted: Optional[bool] = None
    is_new_listing: Optional[bool] = None
    status: Optional[PropertyStatus] = None

    @model_validator(mode='after')
    def validate_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price cannot be greater than max_price")
        return self
