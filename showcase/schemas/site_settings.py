"""
Pydantic schemas for site branding and contact settings.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class SiteSettingsUpdate(BaseModel):
    """Partial update merged into the stored settings."""

    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    logo_url: Optional[str] = Field(None, max_length=500)
    facebook_url: Optional[str] = Field(None, max_length=500)
    instagram_url: Optional[str] = Field(None, max_length=500)
    whatsapp_number: Optional[str] = Field(None, max_length=50)
    hero_tagline: Optional[str] = Field(None, max_length=255)
    hero_subtitle: Optional[str] = Field(None, max_length=500)
    about_text: Optional[str] = None


class SiteSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    company_name: str
    contact_email: str
    contact_phone: str
    address: str
    logo_url: Optional[str] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    whatsapp_number: Optional[str] = None
    hero_tagline: Optional[str] = None
    hero_subtitle: Optional[str] = None
    about_text: Optional[str] = None
    updated_at: datetime
