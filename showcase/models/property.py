"""
Property model for catalog listings.
Handles pricing, location, physical attributes and the denormalised image list.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, JSON, Enum as SQLEnum, Index, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from showcase.database import Base
from decimal import Decimal
import enum
import uuid
from typing import List, Optional


class PropertyType(str, enum.Enum):
    """Kinds of units shown in the catalog."""
    APARTMENT = "apartment"
    VILLA = "villa"
    TOWNHOUSE = "townhouse"
    TWINHOUSE = "twinhouse"
    PENTHOUSE = "penthouse"
    DUPLEX = "duplex"
    STUDIO = "studio"
    CHALET = "chalet"
    OFFICE = "office"
    LAND = "land"


class ListingType(str, enum.Enum):
    """Whether the unit is sold by the developer or by a previous owner."""
    PRIMARY = "Primary"
    RESALE = "Resale"


class PropertyStatus(str, enum.Enum):
    """Publication workflow status; only published listings are public."""
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"


class Property(Base):
    """
    Catalog listing.

    Photos are stored as an ordered list of path strings on the row
    (``/uploads/properties/<filename>``); there is no separate photo table.
    """

    __tablename__ = "properties"

    # Basic information
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    reference_number: Mapped[Optional[str]] = mapped_column(String(50), unique=True, nullable=True)

    # Address
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False, default="Egypt")
    zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    # Classification
    property_type: Mapped[PropertyType] = mapped_column(
        SQLEnum(PropertyType),
        nullable=False,
        index=True
    )
    listing_type: Mapped[ListingType] = mapped_column(
        SQLEnum(ListingType),
        nullable=False,
        default=ListingType.PRIMARY,
        index=True
    )
    project_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    developer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Pricing
    price: Mapped[Decimal] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=False,
        index=True,
        comment="Asking price in local currency"
    )
    down_payment: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=14, scale=2), nullable=True)
    installment_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=14, scale=2), nullable=True)
    installment_period: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Installment plan length in months"
    )
    is_full_cash: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Physical attributes
    bedrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    bathrooms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    built_up_area: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, comment="Square meters")
    plot_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    garden_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    floor: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_ground_unit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Presentation
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    is_highlighted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_new_listing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    amenities: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered image paths"
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Location
    latitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=10, scale=8), nullable=True)
    longitude: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=11, scale=8), nullable=True)

    # Workflow
    status: Mapped[PropertyStatus] = mapped_column(
        SQLEnum(PropertyStatus),
        nullable=False,
        default=PropertyStatus.PUBLISHED,
        index=True
    )
    created_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title}, city={self.city})>"

    @property
    def has_installments(self) -> bool:
        return bool(self.installment_amount and self.installment_amount > 0)

    @property
    def main_image(self) -> Optional[str]:
        return self.images[0] if self.images else None

    def validate_price(self) -> None:
        """Validate that price is positive."""
        if self.price is None or self.price <= 0:
            raise ValueError("Price must be greater than 0")

    def validate_rooms(self) -> None:
        """Validate that room counts are not negative."""
        if self.bedrooms is not None and self.bedrooms < 0:
            raise ValueError("Bedrooms cannot be negative")
        if self.bathrooms is not None and self.bathrooms < 0:
            raise ValueError("Bathrooms cannot be negative")

    def validate_coordinates(self) -> None:
        """Validate that coordinates are provided together and within range."""
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("Both latitude and longitude must be provided together")
        if self.latitude is not None and not (-90 <= self.latitude <= 90):
            raise ValueError("Latitude must be between -90 and 90")
        if self.longitude is not None and not (-180 <= self.longitude <= 180):
            raise ValueError("Longitude must be between -180 and 180")

    def validate_all(self) -> None:
        self.validate_price()
        self.validate_rooms()
        self.validate_coordinates()


# Composite indexes for the common catalog queries
catalog_order_index = Index(
    "idx_property_status_featured_created",
    Property.status,
    Property.is_featured,
    Property.created_at
)

city_price_index = Index(
    "idx_property_city_price",
    Property.city,
    Property.price
)
