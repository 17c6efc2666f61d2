"""
Site settings model holding branding and contact information.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column
from showcase.database import Base
from typing import Optional

# Values used when the settings row is created on first read
DEFAULT_SITE_SETTINGS = {
    "company_name": "Property Showcase",
    "contact_email": "info@example.com",
    "contact_phone": "",
    "address": "",
    "logo_url": None,
    "facebook_url": None,
    "instagram_url": None,
    "whatsapp_number": None,
    "hero_tagline": "Find your next home",
    "hero_subtitle": None,
    "about_text": None,
}


class SiteSettings(Base):
    """Singleton row; the repository creates it on first access."""

    __tablename__ = "site_settings"

    company_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    address: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    logo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    facebook_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    instagram_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    whatsapp_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    hero_tagline: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    hero_subtitle: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    about_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
