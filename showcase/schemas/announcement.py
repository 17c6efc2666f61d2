"""
Pydantic schemas for announcements.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID


def _check_window(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date and end_date and end_date < start_date:
        raise ValueError("end_date must not be before start_date")


class AnnouncementBase(BaseModel):
    title: str = Field(..., min_length=2, max_length=255, examples=["New phase launch"])
    content: str = Field(..., min_length=1, max_length=20000)
    image: Optional[str] = Field(None, max_length=500)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = True
    is_featured: bool = False
    is_highlighted: bool = False


class AnnouncementCreate(AnnouncementBase):

    @model_validator(mode='after')
    def validate_window(self):
        _check_window(self.start_date, self.end_date)
        return self


class AnnouncementUpdate(BaseModel):
    """Partial update; explicitly sending null clears a date or the image."""

    title: Optional[str] = Field(None, min_length=2, max_length=255)
    content: Optional[str] = Field(None, min_length=1, max_length=20000)
    image: Optional[str] = Field(None, max_length=500)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    is_highlighted: Optional[bool] = None


class AnnouncementResponse(AnnouncementBase):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created_by: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime


class AnnouncementListResponse(BaseModel):
    announcements: List[AnnouncementResponse]
    total: int
